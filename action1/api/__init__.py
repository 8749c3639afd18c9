from .action1_api import Action1API, create_headers, get_oauth_token
from .endpoint_api import EndpointAPI

__all__ = [
    'Action1API',
    'create_headers',
    'get_oauth_token',
    'EndpointAPI',
]
