from typing import Any, Dict, List, Optional
from urllib.parse import quote

from .graph_api import GraphAPI

MANAGED_DEVICE_FIELDS = [
    "id",
    "deviceName",
    "serialNumber",
    "operatingSystem",
    "lastSyncDateTime",
    "managedDeviceOwnerType",
    "deviceCategoryDisplayName",
]


class ManagedDeviceAPI(GraphAPI):
    def list_managed_devices(
        self, select: Optional[List[str]] = None, filter_query: Optional[str] = None, limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """
        Gets Intune managed devices, following every page.

        Args:
            select: Properties to return, defaults to the fields reconciliation needs.
            filter_query: Optional OData $filter expression.
            limit: Stop after this many devices.
        """
        query = f"$select={','.join(select or MANAGED_DEVICE_FIELDS)}"
        if filter_query:
            query += f"&$filter={quote(filter_query)}"
        return self.fetch_all(f"deviceManagement/managedDevices?{query}", limit)

    def list_device_categories(self) -> List[Dict[str, Any]]:
        """Gets the Intune device categories."""
        return self.fetch_all("deviceManagement/deviceCategories")

    def set_device_category(self, device_id: str, category_id: str) -> None:
        """
        Assigns a device category to a managed device.

        Args:
            device_id: The managed device ID.
            category_id: The device category ID.
        """
        reference = {"@odata.id": f"{self.base_url}/deviceManagement/deviceCategories/{category_id}"}
        self.put(f"deviceManagement/managedDevices/{device_id}/deviceCategory/$ref", reference)
