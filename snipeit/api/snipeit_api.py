from inventory_sync.api.pages import snipeit_page
from inventory_sync.api.resilient_api import ResilientAPI, create_headers

# Snipe-IT caps page size server-side; 500 is the documented maximum
PAGE_SIZE = 500


class SnipeITAPI(ResilientAPI):
    """
    Base class for Snipe-IT resources.

    The base URL must end in ``/api/v1``. Collections arrive as
    ``{"total": n, "rows": [...]}`` and are paged with ``offset``/``limit``.
    """

    page_adapter = staticmethod(snipeit_page)


__all__ = ["SnipeITAPI", "create_headers", "PAGE_SIZE"]
