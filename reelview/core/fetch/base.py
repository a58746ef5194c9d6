# reelview/core/fetch/base.py
"""
Contracts for the listing fetch collaborator.

This module defines:
- `ListingFetcher` Protocol: how the pager asks for one listing page.
- `FetchTask` Protocol: the handle the pager keeps for the request in flight.
- `build_listing_url`: the one place the request URL shape lives.

Concrete fetchers live in `listing_fetcher.py`; tests use in-memory fakes.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

PAGE_SIZE = 50

PageCallback = Callable[[Any], None]
ErrorCallback = Callable[[BaseException], None]


@runtime_checkable
class FetchTask(Protocol):
    """Handle for an issued request. Requests are never cancelled once issued."""

    @property
    def url(self) -> str: ...


@runtime_checkable
class ListingFetcher(Protocol):
    """
    Protocol for fetching one listing page.

    Implementations call exactly one of `on_page` (decoded JSON object) or
    `on_error` (any exception: transport, status, decode) per request. They may
    call it synchronously from `start` or later from the owner's event loop,
    but never concurrently with another state transition.
    """

    def start(self, url: str, on_page: PageCallback, on_error: ErrorCallback) -> FetchTask:
        """
        Issue the request for `url`.

        Args:
            url:      Fully built listing URL (see build_listing_url).
            on_page:  Called with the decoded JSON body on success.
            on_error: Called with the exception on any failure.

        Returns:
            A FetchTask handle for bookkeeping.
        """
        ...


def build_listing_url(origin: str, path: str, page_size: int = PAGE_SIZE, after: str | None = None) -> str:
    """
    Example:
        build_listing_url("https://www.reddit.com", "/r/pics/", 50, "t3_abc")
        -> "https://www.reddit.com/r/pics/.json?limit=50&after=t3_abc"
    """
    base = f"{origin.rstrip('/')}/{path.strip('/')}/.json?limit={page_size}"
    if after:
        return f"{base}&after={after}"
    return base


__all__ = [
    "PAGE_SIZE",
    "PageCallback",
    "ErrorCallback",
    "FetchTask",
    "ListingFetcher",
    "build_listing_url",
]
