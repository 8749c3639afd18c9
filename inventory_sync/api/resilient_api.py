import datetime
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional, Union

import dateutil.parser
import requests
from requests.exceptions import ConnectionError, Timeout

from ..exceptions import APIRequestError, APIResponseError
from ..models import Page
from .pages import graph_page

# Set up logging
logger = logging.getLogger(__name__)

JSON = Optional[Union[Dict[str, Any], List[Any]]]
PageAdapter = Callable[[Any, str], Page]

DEFAULT_MAX_RETRIES = 5
DEFAULT_INITIAL_BACKOFF = 5
DEFAULT_MAX_BACKOFF = 300
DEFAULT_TIMEOUT = 60


def create_headers(api_token: str) -> Dict[str, str]:
    """
    Create HTTP headers for bearer-token API requests.

    Args:
        api_token (str): The bearer token for authentication.

    Returns:
        Dict[str, str]: A dictionary containing the required HTTP headers.
    """
    return {
        "Authorization": f"Bearer {api_token}",
        "Content-Type": "application/json",
        "Accept": "application/json",
    }


class AttemptResult(Enum):
    SUCCESS = "success"
    RETRYABLE = "retryable"
    FATAL = "fatal"


@dataclass
class Attempt:
    result: AttemptResult
    response: Optional[requests.Response] = None
    error: Optional[str] = None

    @property
    def status_code(self) -> Optional[int]:
        return self.response.status_code if self.response is not None else None


class ResilientAPI:
    """
    Base class for paginated JSON APIs that throttle their callers.

    Every request goes through a single retry loop: HTTP 429, any 5xx and
    connection failures are retried with exponential backoff (honouring the
    server's ``Retry-After`` hint), everything else fails immediately. Failures
    are raised as ``APIRequestError`` with the status and body attached.

    Attributes:
        base_url (str): The base URL that relative URL suffixes are joined to.
        headers (Dict[str, str]): HTTP headers to use for API requests.
        max_retries (int): Maximum attempts for a retryable failure.
        initial_backoff (float): First wait in seconds when no Retry-After is given.
        max_backoff (float): Ceiling for the doubling backoff.
        token_provider (Optional[Callable[[], str]]): Re-issues the bearer token after a 401.
    """

    page_adapter: PageAdapter = staticmethod(graph_page)

    def __init__(
        self,
        base_url: str,
        headers: Dict[str, str],
        max_retries: int = DEFAULT_MAX_RETRIES,
        initial_backoff: float = DEFAULT_INITIAL_BACKOFF,
        max_backoff: float = DEFAULT_MAX_BACKOFF,
        timeout: float = DEFAULT_TIMEOUT,
        token_provider: Optional[Callable[[], str]] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.headers = headers
        self.max_retries = max(1, max_retries)
        self.initial_backoff = initial_backoff
        self.max_backoff = max_backoff
        self.timeout = timeout
        self.token_provider = token_provider

    def url_for(self, url_suffix: str) -> str:
        """Join a suffix to ``base_url``; absolute URLs (next links) pass through."""
        if url_suffix.startswith(("http://", "https://")):
            return url_suffix
        return f"{self.base_url}/{url_suffix.lstrip('/')}"

    def get(self, url_suffix: str) -> JSON:
        """
        Perform a GET request to the specified endpoint.

        Args:
            url_suffix (str): The API endpoint path to append to the base URL.

        Returns:
            JSON: The decoded response body, or None for an empty response.
        """
        return self.fetch(self.url_for(url_suffix))

    def post(self, url_suffix: str, data: Optional[Any] = None) -> JSON:
        return self.fetch(self.url_for(url_suffix), "POST", data)

    def put(self, url_suffix: str, data: Any) -> JSON:
        return self.fetch(self.url_for(url_suffix), "PUT", data)

    def patch(self, url_suffix: str, data: Any) -> JSON:
        return self.fetch(self.url_for(url_suffix), "PATCH", data)

    def delete(self, url_suffix: str, data: Optional[Any] = None) -> JSON:
        return self.fetch(self.url_for(url_suffix), "DELETE", data)

    def fetch(self, url: str, method: str = "GET", data: Optional[Any] = None) -> JSON:
        """
        Issue one logical request, retrying transient failures.

        Args:
            url (str): Absolute request URL.
            method (str): HTTP method.
            data (Optional[Any]): JSON body for write calls.

        Returns:
            JSON: The decoded response body, or None for an empty response.

        Raises:
            APIRequestError: On a permanent HTTP error or once retries are exhausted.
            APIResponseError: If a successful response is not valid JSON.
        """
        backoff = self.initial_backoff
        refreshed = False
        attempt_number = 0

        while True:
            attempt_number += 1
            attempt = self._attempt(method, url, data)

            if attempt.result is AttemptResult.SUCCESS:
                return self._decode(attempt.response, method, url)

            if attempt.status_code == 401 and self.token_provider and not refreshed:
                logger.warning("Received 401, requesting a fresh access token and retrying once")
                self.headers = {**self.headers, "Authorization": f"Bearer {self.token_provider()}"}
                refreshed = True
                attempt_number -= 1
                continue

            if attempt.result is AttemptResult.FATAL or attempt_number >= self.max_retries:
                if attempt.result is AttemptResult.RETRYABLE:
                    logger.error(f"Giving up on {method} {url} after {attempt_number} attempts")
                raise self._to_error(attempt, method, url)

            wait = self._retry_after(attempt.response)
            if wait is None:
                wait = backoff
            logger.warning(
                f"⚠️  {method} {url} returned {attempt.status_code or attempt.error} "
                f"(attempt {attempt_number}/{self.max_retries}). Retrying in {wait}s..."
            )
            time.sleep(wait)
            backoff = min(backoff * 2, self.max_backoff)

    def fetch_all_pages(self, url_suffix: str, limit: Optional[int] = None) -> Iterator[Page]:
        """
        Lazily walk a paginated collection, one page at a time.

        Args:
            url_suffix (str): The first page's URL or suffix.
            limit (Optional[int]): Stop once this many items have been fetched.
                The cap is checked after each page, never mid-page.

        Yields:
            Page: Each page in server order.
        """
        next_url: Optional[str] = self.url_for(url_suffix)
        fetched = 0
        while next_url:
            page = self.page_adapter(self.fetch(next_url), next_url)
            fetched += len(page.items)
            logger.debug(f"Fetched page with {len(page.items)} items ({fetched} total)")
            yield page

            if limit and fetched >= limit:
                logger.info(f"Result cap of {limit} reached, not following further pages")
                return
            next_url = page.next_url

    def fetch_all(self, url_suffix: str, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Flatten every page of a collection, truncated to ``limit`` items when given."""
        items: List[Dict[str, Any]] = []
        for page in self.fetch_all_pages(url_suffix, limit):
            items.extend(page.items)
        return items[:limit] if limit else items

    def _attempt(self, method: str, url: str, data: Optional[Any]) -> Attempt:
        try:
            response = requests.request(
                method, url, headers=self.headers, json=data, timeout=self.timeout
            )
        except (ConnectionError, Timeout) as e:
            return Attempt(AttemptResult.RETRYABLE, error=str(e))

        status = response.status_code
        if status < 400:
            logger.debug(f"{status} | {method} {url}")
            return Attempt(AttemptResult.SUCCESS, response)
        if status == 429 or status >= 500:
            return Attempt(AttemptResult.RETRYABLE, response)
        return Attempt(AttemptResult.FATAL, response)

    def _decode(self, response: requests.Response, method: str, url: str) -> JSON:
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise APIResponseError(f"{method} {url} returned a body that is not JSON: {e}") from e

    def _retry_after(self, response: Optional[requests.Response]) -> Optional[float]:
        """
        Read the server's wait hint.

        ``Retry-After`` may be delta-seconds or an HTTP date. Hints in the past or
        that cannot be parsed are ignored so the caller falls back to its backoff.
        """
        if response is None:
            return None
        value = response.headers.get("Retry-After")
        if not value:
            return None
        value = value.strip()
        if value.isdigit():
            return float(value)

        try:
            retry_at = dateutil.parser.parse(value)
        except (ValueError, OverflowError):
            logger.warning(f"Ignoring unparseable Retry-After header: {value}")
            return None
        if retry_at.tzinfo is None:
            retry_at = retry_at.replace(tzinfo=datetime.timezone.utc)
        wait = (retry_at - datetime.datetime.now(datetime.timezone.utc)).total_seconds()
        return wait if wait > 0 else None

    def _to_error(self, attempt: Attempt, method: str, url: str) -> APIRequestError:
        body = attempt.error or ""
        if attempt.response is not None:
            body = attempt.response.text
        logger.error(f"Request failed: {method} {url} -> {attempt.status_code}")
        logger.error(f"Response text: {body}")
        return APIRequestError(attempt.status_code, url, method, body)
