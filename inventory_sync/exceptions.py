from typing import Optional


class InventorySyncError(Exception):
    """Base exception for inventory sync errors."""
    pass


class ConfigurationError(InventorySyncError):
    """Raised when a required setting or credential variable is missing."""
    pass


class AuthenticationError(InventorySyncError):
    """Raised when a bearer token cannot be obtained."""
    pass


class APIRequestError(InventorySyncError):
    """
    Raised when a remote call fails permanently or runs out of retries.

    Attributes:
        status_code (Optional[int]): HTTP status of the last response, None for connection failures.
        url (str): The request URL.
        method (str): The HTTP method.
        body (str): The response body (or connection error text).
    """

    def __init__(self, status_code: Optional[int], url: str, method: str, body: str = ""):
        self.status_code = status_code
        self.url = url
        self.method = method
        self.body = body
        super().__init__(f"{method} {url} failed with status {status_code}: {body}")


class APIResponseError(InventorySyncError):
    """Raised when a successful response carries a body that cannot be parsed."""
    pass
