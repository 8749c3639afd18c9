import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from .exceptions import ConfigurationError

load_dotenv()


def get_required(name: str) -> str:
    """
    Read a required environment variable.

    Raises:
        ConfigurationError: If the variable is unset or blank.
    """
    value = os.getenv(name)
    if value is None or not value.strip():
        raise ConfigurationError(f"Missing required environment variable: {name}")
    return value.strip()


def _get_number(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"Environment variable {name} must be a number, got {raw!r}")


def get_retry_config() -> Dict[str, Any]:
    """Retry and batching defaults; command line flags override these."""
    return {
        'max_retries': int(_get_number('SYNC_MAX_RETRIES', 5)),
        'initial_backoff': _get_number('SYNC_INITIAL_BACKOFF', 5),
        'max_backoff': _get_number('SYNC_MAX_BACKOFF', 300),
        'batch_size': int(_get_number('SYNC_BATCH_SIZE', 50)),
        'batch_delay': _get_number('SYNC_BATCH_DELAY', 10),
    }


def get_graph_config(
    tenant_id_var: str = 'AZURE_TENANT_ID',
    client_id_var: str = 'AZURE_CLIENT_ID',
    client_secret_var: str = 'AZURE_CLIENT_SECRET',
) -> Dict[str, Any]:
    """Microsoft Graph app registration, read from the named variables."""
    return {
        'tenant_id': get_required(tenant_id_var),
        'client_id': get_required(client_id_var),
        'client_secret': get_required(client_secret_var),
        'base_url': os.getenv('GRAPH_BASE_URL', 'https://graph.microsoft.com/beta'),
    }


def get_snipeit_config(url: Optional[str] = None, token_var: str = 'SNIPEIT_API_TOKEN') -> Dict[str, Any]:
    """Snipe-IT base URL (must end in /api/v1) and personal access token."""
    return {
        'base_url': url or get_required('SNIPEIT_URL'),
        'api_token': get_required(token_var),
    }


def get_action1_config(
    org_id: Optional[str] = None,
    client_id_var: str = 'ACTION1_CLIENT_ID',
    client_secret_var: str = 'ACTION1_CLIENT_SECRET',
) -> Dict[str, Any]:
    return {
        'base_url': os.getenv('ACTION1_BASE_URL', 'https://app.action1.com/api/3.0'),
        'org_id': org_id or get_required('ACTION1_ORG_ID'),
        'client_id': get_required(client_id_var),
        'client_secret': get_required(client_secret_var),
    }


def get_mail_config(sender_var: str = 'MAIL_SENDER') -> Dict[str, Any]:
    """Mailbox that sends report emails through Graph."""
    return {
        'sender': get_required(sender_var),
    }
