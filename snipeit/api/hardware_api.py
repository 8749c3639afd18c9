from typing import Any, Dict, List, Optional

from .snipeit_api import PAGE_SIZE, SnipeITAPI


class HardwareAPI(SnipeITAPI):
    def list_hardware(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Gets every hardware asset, following offset pagination.

        Args:
            limit: Stop after this many assets.
        """
        page_size = min(PAGE_SIZE, limit) if limit else PAGE_SIZE
        return self.fetch_all(f"hardware?limit={page_size}&offset=0&sort=id&order=asc", limit)
