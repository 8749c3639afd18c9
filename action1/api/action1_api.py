import logging

import requests

from inventory_sync.api.pages import action1_page
from inventory_sync.api.resilient_api import ResilientAPI, create_headers
from inventory_sync.exceptions import AuthenticationError

# Set up logging
logger = logging.getLogger(__name__)

ACTION1_BASE_URL = "https://app.action1.com/api/3.0"


def get_oauth_token(client_id: str, client_secret: str, base_url: str = ACTION1_BASE_URL) -> str:
    """
    Obtain an Action1 access token using the client credentials flow.

    Args:
        client_id (str): The Action1 API client ID.
        client_secret (str): The Action1 API client secret.
        base_url (str): The Action1 API base URL.

    Returns:
        str: The access token.

    Raises:
        AuthenticationError: If the token request fails or returns no token.
    """
    data = {
        'grant_type': 'client_credentials',
        'client_id': client_id,
        'client_secret': client_secret,
    }
    headers = {'content-type': 'application/x-www-form-urlencoded'}

    logger.debug("Requesting Action1 OAuth token")
    try:
        response = requests.post(f"{base_url.rstrip('/')}/oauth2/token", data=data, headers=headers, timeout=60)
    except requests.RequestException as e:
        raise AuthenticationError(f"Action1 token request failed: {e}") from e

    if response.status_code != 200:
        raise AuthenticationError(f"Action1 token request failed: {response.status_code} {response.text}")

    try:
        token = response.json().get('access_token')
    except ValueError as e:
        raise AuthenticationError(f"Action1 token response was not JSON: {e}") from e
    if not token:
        raise AuthenticationError("Action1 token response missing access_token")
    return token


class Action1API(ResilientAPI):
    """
    Base class for Action1 resources.

    Collections arrive as ``{"items": [...], "next_page": url}``.
    """

    page_adapter = staticmethod(action1_page)


__all__ = ["Action1API", "create_headers", "get_oauth_token", "ACTION1_BASE_URL"]
