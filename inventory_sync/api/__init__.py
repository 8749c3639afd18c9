from .resilient_api import ResilientAPI, Attempt, AttemptResult, create_headers
from .pages import graph_page, snipeit_page, action1_page

__all__ = [
    'ResilientAPI',
    'Attempt',
    'AttemptResult',
    'create_headers',
    'graph_page',
    'snipeit_page',
    'action1_page',
]
