from typing import Any, Dict, List, Optional

from .action1_api import Action1API


class EndpointAPI(Action1API):
    def list_managed_endpoints(self, org_id: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Gets the managed endpoints of an organization, following every page.

        Args:
            org_id: The Action1 organization ID.
            limit: Stop after this many endpoints.
        """
        return self.fetch_all(f"endpoints/managed/{org_id}?limit=100", limit)
