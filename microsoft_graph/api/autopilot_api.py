from typing import Any, Dict, List, Optional

from .graph_api import GraphAPI


class AutopilotAPI(GraphAPI):
    def list_autopilot_devices(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """
        Gets Windows Autopilot device identities, following every page.

        Args:
            limit: Stop after this many identities.
        """
        return self.fetch_all("deviceManagement/windowsAutopilotDeviceIdentities", limit)

    def update_group_tag(self, identity_id: str, group_tag: str) -> None:
        """
        Sets the group tag on an Autopilot device identity.

        Args:
            identity_id: The Autopilot device identity ID.
            group_tag: The new group tag.
        """
        self.post(
            f"deviceManagement/windowsAutopilotDeviceIdentities/{identity_id}/updateDeviceProperties",
            {"groupTag": group_tag},
        )
