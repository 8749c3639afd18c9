from .api.action1_api import Action1API, create_headers, get_oauth_token
from .facade.action1_facade import Action1Facade

__all__ = [
    "Action1API",
    "create_headers",
    "get_oauth_token",
    "Action1Facade",
]
