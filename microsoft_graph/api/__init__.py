from .graph_api import GraphAPI, GraphTokenProvider, create_headers
from .managed_device_api import ManagedDeviceAPI
from .autopilot_api import AutopilotAPI
from .mail_api import MailAPI

__all__ = [
    'GraphAPI',
    'GraphTokenProvider',
    'create_headers',
    'ManagedDeviceAPI',
    'AutopilotAPI',
    'MailAPI',
]
