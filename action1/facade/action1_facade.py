import logging
from typing import Any, Dict, List, Optional

from inventory_sync.models import DeviceRecord, Ownership
from inventory_sync.normalization import parse_timestamp

from ..api.action1_api import ACTION1_BASE_URL, create_headers, get_oauth_token
from ..api.endpoint_api import EndpointAPI

logger = logging.getLogger(__name__)


def endpoint_to_record(endpoint: Dict[str, Any]) -> DeviceRecord:
    return DeviceRecord(
        serial_number=endpoint.get("serial"),
        display_name=endpoint.get("name") or endpoint.get("device_name"),
        operating_system=endpoint.get("OS"),
        last_sync=parse_timestamp(endpoint.get("last_seen")),
        ownership=Ownership.UNKNOWN,
        record_id=endpoint.get("id"),
        source="Action1",
    )


class Action1Facade:
    def __init__(self, org_id: str, api_token: str, base_url: str = ACTION1_BASE_URL,
                 token_provider=None, **retry_options):
        headers = create_headers(api_token)
        self.org_id = org_id
        self.endpoints = EndpointAPI(base_url, headers, token_provider=token_provider, **retry_options)

    @classmethod
    def from_credentials(cls, org_id: str, client_id: str, client_secret: str,
                         base_url: str = ACTION1_BASE_URL, **retry_options) -> "Action1Facade":
        def provider() -> str:
            return get_oauth_token(client_id, client_secret, base_url)

        return cls(org_id, provider(), base_url, token_provider=provider, **retry_options)

    def get_endpoints(self, limit: Optional[int] = None) -> List[DeviceRecord]:
        endpoints = self.endpoints.list_managed_endpoints(self.org_id, limit=limit)
        logger.info(f"Fetched {len(endpoints)} Action1 managed endpoints")
        return [endpoint_to_record(endpoint) for endpoint in endpoints]
