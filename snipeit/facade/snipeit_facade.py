import logging
from typing import Any, Dict, List, Optional

from inventory_sync.models import DeviceRecord, Ownership
from inventory_sync.normalization import parse_timestamp

from ..api.hardware_api import HardwareAPI
from ..api.snipeit_api import create_headers

logger = logging.getLogger(__name__)


def _name_of(value: Any) -> Optional[str]:
    # Snipe-IT nests related objects as {"id": .., "name": ..}
    if isinstance(value, dict):
        return value.get("name")
    return value


def hardware_to_record(asset: Dict[str, Any]) -> DeviceRecord:
    updated = asset.get("updated_at")
    return DeviceRecord(
        serial_number=asset.get("serial"),
        display_name=asset.get("name") or asset.get("asset_tag"),
        operating_system=_name_of(asset.get("model")),
        last_sync=parse_timestamp(updated.get("datetime") if isinstance(updated, dict) else updated),
        ownership=Ownership.CORPORATE,
        attributes={"category": _name_of(asset.get("category"))},
        record_id=str(asset["id"]) if asset.get("id") is not None else None,
        source="Snipe-IT",
    )


class SnipeITFacade:
    def __init__(self, base_url: str, api_token: str, **retry_options):
        headers = create_headers(api_token)
        self.hardware = HardwareAPI(base_url, headers, **retry_options)

    def get_assets(self, limit: Optional[int] = None) -> List[DeviceRecord]:
        assets = self.hardware.list_hardware(limit=limit)
        logger.info(f"Fetched {len(assets)} Snipe-IT assets")
        return [hardware_to_record(asset) for asset in assets]
