from .snipeit_api import SnipeITAPI, create_headers
from .hardware_api import HardwareAPI

__all__ = [
    'SnipeITAPI',
    'create_headers',
    'HardwareAPI',
]
