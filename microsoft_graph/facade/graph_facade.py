import logging
from typing import Any, Callable, Dict, List, Optional

from inventory_sync.exceptions import InventorySyncError
from inventory_sync.models import DeviceRecord, Ownership
from inventory_sync.normalization import parse_timestamp

from ..api.autopilot_api import AutopilotAPI
from ..api.graph_api import GRAPH_BASE_URL, GraphTokenProvider, create_headers
from ..api.mail_api import MailAPI
from ..api.managed_device_api import ManagedDeviceAPI

logger = logging.getLogger(__name__)


def managed_device_to_record(device: Dict[str, Any]) -> DeviceRecord:
    return DeviceRecord(
        serial_number=device.get("serialNumber"),
        display_name=device.get("deviceName"),
        operating_system=device.get("operatingSystem"),
        last_sync=parse_timestamp(device.get("lastSyncDateTime")),
        ownership=Ownership.parse(device.get("managedDeviceOwnerType")),
        attributes={"category": device.get("deviceCategoryDisplayName")},
        record_id=device.get("id"),
        source="Intune",
    )


def autopilot_identity_to_record(identity: Dict[str, Any]) -> DeviceRecord:
    return DeviceRecord(
        serial_number=identity.get("serialNumber"),
        display_name=identity.get("displayName") or identity.get("managedDeviceId"),
        operating_system="Windows",
        last_sync=parse_timestamp(identity.get("lastContactedDateTime")),
        ownership=Ownership.CORPORATE,
        attributes={"group_tag": identity.get("groupTag") or None},
        record_id=identity.get("id"),
        source="Autopilot",
    )


class GraphFacade:
    """
    Intune, Autopilot and mail operations over one Graph access token.

    The token is acquired once per run and shared by every resource client.
    When a token provider is given, a client that receives a 401 asks it for a
    fresh token and retries the request once.
    """

    def __init__(self, api_token: str, base_url: str = GRAPH_BASE_URL,
                 token_provider: Optional[Callable[[], str]] = None, **retry_options):
        headers = create_headers(api_token)
        self.managed_devices = ManagedDeviceAPI(base_url, headers, token_provider=token_provider, **retry_options)
        self.autopilot = AutopilotAPI(base_url, headers, token_provider=token_provider, **retry_options)
        self.mail = MailAPI(base_url, headers, token_provider=token_provider, **retry_options)
        self._category_ids: Optional[Dict[str, str]] = None

    @classmethod
    def from_credentials(cls, tenant_id: str, client_id: str, client_secret: str,
                         base_url: str = GRAPH_BASE_URL, **retry_options) -> "GraphFacade":
        provider = GraphTokenProvider(tenant_id, client_id, client_secret)
        return cls(provider.get_token(), base_url, token_provider=provider.get_token, **retry_options)

    def get_managed_devices(self, limit: Optional[int] = None) -> List[DeviceRecord]:
        devices = self.managed_devices.list_managed_devices(limit=limit)
        logger.info(f"Fetched {len(devices)} Intune managed devices")
        return [managed_device_to_record(device) for device in devices]

    def get_autopilot_devices(self, limit: Optional[int] = None) -> List[DeviceRecord]:
        identities = self.autopilot.list_autopilot_devices(limit=limit)
        logger.info(f"Fetched {len(identities)} Autopilot device identities")
        return [autopilot_identity_to_record(identity) for identity in identities]

    def get_device_category_ids(self) -> Dict[str, str]:
        """Device category display name -> ID, fetched once and cached."""
        if self._category_ids is None:
            categories = self.managed_devices.list_device_categories()
            self._category_ids = {c["displayName"]: c["id"] for c in categories if c.get("displayName")}
            logger.info(f"Loaded {len(self._category_ids)} Intune device categories")
        return self._category_ids

    def set_device_category(self, device: DeviceRecord, category_name: str) -> None:
        """
        Assigns the named device category to an Intune device.

        Raises:
            InventorySyncError: If no Intune category has that display name.
        """
        category_id = self.get_device_category_ids().get(category_name)
        if category_id is None:
            raise InventorySyncError(f"Intune has no device category named '{category_name}'")
        self.managed_devices.set_device_category(device.record_id, category_id)

    def set_group_tag(self, identity: DeviceRecord, group_tag: str) -> None:
        self.autopilot.update_group_tag(identity.record_id, group_tag)

    def send_report(self, sender: str, recipients: List[str], subject: str, html_body: str) -> None:
        self.mail.send_mail(sender, recipients, subject, html_body)
        logger.info(f"Report emailed to {', '.join(recipients)}")
