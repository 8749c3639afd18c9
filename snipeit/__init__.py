from .api.snipeit_api import SnipeITAPI, create_headers
from .facade.snipeit_facade import SnipeITFacade

__all__ = [
    "SnipeITAPI",
    "create_headers",
    "SnipeITFacade",
]
