import logging
from typing import List, Optional

from msal import ConfidentialClientApplication

from inventory_sync.api.pages import graph_page
from inventory_sync.api.resilient_api import ResilientAPI, create_headers
from inventory_sync.exceptions import AuthenticationError

# Set up logging
logger = logging.getLogger(__name__)

GRAPH_SCOPE = ["https://graph.microsoft.com/.default"]
GRAPH_BASE_URL = "https://graph.microsoft.com/beta"


class GraphTokenProvider:
    """
    Client-credentials token source for Microsoft Graph.

    MSAL keeps the token in its in-memory cache, so calling ``get_token`` again
    only contacts Entra ID once the cached token has expired.
    """

    def __init__(self, tenant_id: str, client_id: str, client_secret: str, scopes: Optional[List[str]] = None):
        self.scopes = scopes or GRAPH_SCOPE
        try:
            self.app = ConfidentialClientApplication(
                client_id=client_id,
                client_credential=client_secret,
                authority=f"https://login.microsoftonline.com/{tenant_id}",
            )
        except ValueError as e:
            # MSAL validates the authority (tenant) when the app is created
            raise AuthenticationError(f"Invalid Graph authority for tenant '{tenant_id}': {e}") from e

    def get_token(self) -> str:
        """
        Acquire a Graph access token.

        Returns:
            str: The bearer token.

        Raises:
            AuthenticationError: If Entra ID does not return an access token.
        """
        result = self.app.acquire_token_for_client(scopes=self.scopes)
        token = (result or {}).get("access_token")
        if not token:
            error = (result or {}).get("error_description") or (result or {}).get("error") or "no token returned"
            raise AuthenticationError(f"Failed to acquire Graph access token: {error}")
        logger.debug("Graph access token acquired")
        return token


class GraphAPI(ResilientAPI):
    """
    Base class for Microsoft Graph resources.

    Collections arrive as ``{"value": [...], "@odata.nextLink": ...}``.
    """

    page_adapter = staticmethod(graph_page)


__all__ = ["GraphAPI", "GraphTokenProvider", "create_headers", "GRAPH_BASE_URL", "GRAPH_SCOPE"]
