"""Adapters mapping each vendor's page envelope onto :class:`Page`."""

from typing import Any, Optional
from urllib.parse import parse_qs, urlencode, urlparse, urlunparse

from ..exceptions import APIResponseError
from ..models import Page


def _require_dict(payload: Any, url: str) -> dict:
    if not isinstance(payload, dict):
        raise APIResponseError(f"Unexpected page shape from {url}: {type(payload).__name__}")
    return payload


def graph_page(payload: Any, url: str) -> Page:
    """Microsoft Graph: ``value`` holds the items, ``@odata.nextLink`` the next page."""
    payload = _require_dict(payload, url)
    return Page(items=payload.get("value", []), next_url=payload.get("@odata.nextLink"))


def action1_page(payload: Any, url: str) -> Page:
    """Action1: ``items`` plus a ``next_page`` link; a bare array is a single page."""
    if isinstance(payload, list):
        return Page(items=payload)
    payload = _require_dict(payload, url)
    return Page(items=payload.get("items", []), next_url=payload.get("next_page") or None)


def snipeit_page(payload: Any, url: str) -> Page:
    """
    Snipe-IT: ``rows`` plus a ``total`` count, paged with ``offset``/``limit``.

    The next URL is derived from the current one by advancing ``offset`` by the
    number of rows returned, until ``total`` rows have been seen.
    """
    payload = _require_dict(payload, url)
    if payload.get("status") == "error":
        raise APIResponseError(f"Snipe-IT returned an error for {url}: {payload.get('messages')}")

    rows = payload.get("rows", [])
    total = int(payload.get("total", 0) or 0)

    parsed = urlparse(url)
    query = parse_qs(parsed.query)
    offset = int(query.get("offset", ["0"])[0])
    next_offset = offset + len(rows)

    next_url: Optional[str] = None
    if rows and next_offset < total:
        query["offset"] = [str(next_offset)]
        next_url = urlunparse(parsed._replace(query=urlencode(query, doseq=True)))
    return Page(items=rows, next_url=next_url)
