# reelview/core/feed/pager.py
"""
Feed buffer and pager.

FeedBuffer is append-only: once an item has an index it keeps it for the
session. Pager issues "next page" requests through a ListingFetcher, gated by
its loading flag, and merges each completed page into the buffer in arrival
order. There is no automatic retry: a failure stays until the next
request_next_page() call.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from reelview.core.extract.urls import SITE_ORIGIN
from reelview.core.feed.errors import FeedError, classify_feed_error
from reelview.core.feed.parser import parse_listing_page_or_raise
from reelview.core.fetch.base import PAGE_SIZE, FetchTask, ListingFetcher, build_listing_url
from reelview.schemas.models import NormalizedMediaItem

log = logging.getLogger(__name__)


class FeedBuffer:
    """Ordered, append-only sequence of normalized items plus the latest cursor."""

    def __init__(self) -> None:
        self._items: list[NormalizedMediaItem] = []
        self.cursor: str | None = None

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[NormalizedMediaItem]:
        return iter(self._items)

    def __getitem__(self, index: int) -> NormalizedMediaItem:
        return self._items[index]

    def get(self, index: int | None) -> NormalizedMediaItem | None:
        if index is None or not 0 <= index < len(self._items):
            return None
        return self._items[index]

    @property
    def items(self) -> tuple[NormalizedMediaItem, ...]:
        return tuple(self._items)

    def append_page(self, items: Sequence[NormalizedMediaItem], cursor: str) -> None:
        self._items.extend(items)
        self.cursor = cursor


@dataclass(frozen=True)
class FetchOutcome:
    """Result of one settled request, handed to `on_settled`."""

    added: int = 0
    error: FeedError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Pager:
    """
    Fetches listing pages into a FeedBuffer.

    Args:
        fetcher:    ListingFetcher collaborator.
        path:       Listing path, e.g. "r/pics" or "/r/pics/top".
        origin:     Site origin used to build request URLs.
        page_size:  `limit` parameter per request.
        buffer:     Optional pre-existing buffer (tests / resumed sessions).
        on_settled: Called once per request after the buffer/flags are updated.
    """

    def __init__(
        self,
        fetcher: ListingFetcher,
        *,
        path: str,
        origin: str = SITE_ORIGIN,
        page_size: int = PAGE_SIZE,
        buffer: FeedBuffer | None = None,
        on_settled: Callable[[FetchOutcome], None] | None = None,
    ) -> None:
        if page_size < 1:
            raise ValueError("page_size must be >= 1")
        self.fetcher = fetcher
        self.path = path
        self.origin = origin
        self.page_size = page_size
        self.buffer = buffer if buffer is not None else FeedBuffer()
        self.on_settled = on_settled
        self.loading = False
        self.failed = False
        self.last_error: FeedError | None = None
        self._task: FetchTask | None = None

    @property
    def cursor(self) -> str | None:
        return self.buffer.cursor

    @property
    def in_flight(self) -> FetchTask | None:
        return self._task

    def next_url(self) -> str:
        return build_listing_url(self.origin, self.path, self.page_size, self.buffer.cursor)

    def request_next_page(self) -> bool:
        """
        Issue a request for the next page unless one is already in flight.

        Returns:
            True if a request was issued, False if the call was a no-op.
        """
        if self.loading:
            return False
        self.loading = True
        self.failed = False
        self.last_error = None
        self._task = None
        url = self.next_url()
        log.info("requesting %s", url)
        task = self.fetcher.start(url, self._on_page, self._on_error)
        # synchronous fetchers settle inside start()
        self._task = task if self.loading else None
        return True

    # ---------- completion ----------

    def _on_page(self, raw: Any) -> None:
        try:
            items, cursor = parse_listing_page_or_raise(raw)
        except (FeedError, ValidationError) as exc:
            self._fail(classify_feed_error(exc))
            return
        self.buffer.append_page(items, cursor)
        self.loading = False
        log.info("page merged: +%d items (total %d), cursor=%r", len(items), len(self.buffer), cursor)
        self._settle(FetchOutcome(added=len(items)))

    def _on_error(self, exc: BaseException) -> None:
        self._fail(classify_feed_error(exc))

    def _fail(self, err: FeedError) -> None:
        self.loading = False
        self.failed = True
        self.last_error = err
        log.warning("page failed: %s: %s", type(err).__name__, err)
        self._settle(FetchOutcome(error=err))

    def _settle(self, outcome: FetchOutcome) -> None:
        self._task = None
        if self.on_settled is not None:
            self.on_settled(outcome)


__all__ = ["FeedBuffer", "FetchOutcome", "Pager"]
