# reelview/core/fetch/listing_fetcher.py
"""
requests-backed listing fetchers.

- RequestsListingFetcher: blocking GET, completes before `start` returns.
- ThreadedListingFetcher: runs the blocking GET on a daemon thread and hands
  the completion back through `post`, so the owner applies it on its own loop.

Neither retries. Transport errors, non-2xx statuses (unless the policy allows
them) and undecodable JSON are all reported through `on_error`.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import requests

from reelview.core.feed.errors import FeedError, TransportFailureError, feed_error_guard
from reelview.schemas.models import FetchPolicy

from .base import ErrorCallback, PageCallback

log = logging.getLogger(__name__)


# -------------------------
# Internal HTTP helpers
# -------------------------


def _http_get_json(url: str, policy: FetchPolicy) -> Any:
    try:
        resp = requests.get(
            url,
            headers={"User-Agent": policy.user_agent, "Accept": "application/json"},
            timeout=policy.timeout_s,
        )
    except requests.RequestException as e:
        raise TransportFailureError(str(e)) from e

    if not policy.allow_non_200 and not (200 <= resp.status_code < 300):
        raise TransportFailureError(f"HTTP {resp.status_code} for {url}")

    try:
        return resp.json()
    except ValueError as e:
        raise TransportFailureError(f"invalid JSON from {url}: {e}") from e


# -------------------------
# Public API
# -------------------------


def fetch_listing_json(url: str, *, policy: FetchPolicy | None = None) -> Any:
    """Blocking GET of one listing page; any failure surfaces as a FeedError."""
    with feed_error_guard():
        return _http_get_json(url, policy or FetchPolicy())


@dataclass(frozen=True)
class _Task:
    url: str


class RequestsListingFetcher:
    """Synchronous ListingFetcher. Callbacks fire before `start` returns."""

    def __init__(self, policy: FetchPolicy | None = None) -> None:
        self.policy = policy or FetchPolicy()

    def start(self, url: str, on_page: PageCallback, on_error: ErrorCallback) -> _Task:
        log.debug("GET %s", url)
        try:
            data = fetch_listing_json(url, policy=self.policy)
        except FeedError as exc:
            log.warning("listing fetch failed: %s", exc)
            on_error(exc)
        else:
            on_page(data)
        return _Task(url=url)


class ThreadedListingFetcher:
    """
    ListingFetcher that blocks on a worker thread.

    `post` must enqueue a zero-arg callable for the owner's event loop; the
    completion callbacks only ever run through it.
    """

    def __init__(self, post: Callable[[Callable[[], None]], None], policy: FetchPolicy | None = None) -> None:
        self.policy = policy or FetchPolicy()
        self._post = post

    def start(self, url: str, on_page: PageCallback, on_error: ErrorCallback) -> _Task:
        def _run() -> None:
            log.debug("GET %s (worker)", url)
            try:
                data = fetch_listing_json(url, policy=self.policy)
            except FeedError as exc:
                log.warning("listing fetch failed: %s", exc)
                err = exc
                self._post(lambda: on_error(err))
            else:
                self._post(lambda: on_page(data))

        threading.Thread(target=_run, name="reelview-fetch", daemon=True).start()
        return _Task(url=url)


__all__ = [
    "fetch_listing_json",
    "RequestsListingFetcher",
    "ThreadedListingFetcher",
]
