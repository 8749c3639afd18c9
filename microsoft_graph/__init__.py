from .api.graph_api import GraphAPI, GraphTokenProvider, create_headers
from .facade.graph_facade import GraphFacade

__all__ = [
    "GraphAPI",
    "GraphTokenProvider",
    "create_headers",
    "GraphFacade",
]
