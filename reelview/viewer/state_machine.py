# reelview/viewer/state_machine.py
"""
Viewer state machine.

Purpose
-------
Own the slideshow state (current index, auto-advance flag/interval, loading
and failed flags) over a Pager's append-only buffer. Every change goes through
`dispatch(msg)` with one of the closed set of messages below; each call runs
to completion.

Rules
-----
- Navigation (Advance / Retreat / SetIndex) clamps to [0, len-1] (None while
  the buffer is empty), then applies the low-watermark rule, then restarts the
  auto-advance timer so the countdown is always a full interval.
- Low-watermark: when neither loading nor failed and
  `len - index < page_size // 3`, load more.
- Tick behaves like Advance without restarting the timer, and does nothing
  while auto-advance is off.
- ToggleAutoAdvance / SetInterval persist to the preference store and restart
  the timer. Neither touches the current index.
- At most one timer handle is live: the previous one is always cancelled
  before a new one is scheduled.
- Retry is only accepted from the failed phase.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from reelview.core.extract.urls import SITE_ORIGIN
from reelview.core.feed.errors import FeedError
from reelview.core.feed.pager import FeedBuffer, FetchOutcome, Pager
from reelview.core.fetch.base import PAGE_SIZE, ListingFetcher
from reelview.schemas.models import NormalizedMediaItem, ViewerPreferences, ViewerState
from reelview.viewer.preferences import (
    PreferenceStore,
    load_preferences,
    save_timeout_enabled,
    save_timeout_seconds,
)
from reelview.viewer.scheduler import Scheduler, TimerHandle

log = logging.getLogger(__name__)

# =========================
# Messages
# =========================


@dataclass(frozen=True)
class LoadItems:
    pass


@dataclass(frozen=True)
class Retry:
    pass


@dataclass(frozen=True)
class Advance:
    pass


@dataclass(frozen=True)
class Retreat:
    pass


@dataclass(frozen=True)
class SetIndex:
    index: int


@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class ToggleAutoAdvance:
    pass


@dataclass(frozen=True)
class SetInterval:
    seconds: int | str


@dataclass(frozen=True)
class ItemsLoaded:
    added: int


@dataclass(frozen=True)
class ItemsFailed:
    error: FeedError | None = None


Message = (
    LoadItems
    | Retry
    | Advance
    | Retreat
    | SetIndex
    | Tick
    | ToggleAutoAdvance
    | SetInterval
    | ItemsLoaded
    | ItemsFailed
)


def low_watermark(page_size: int) -> int:
    return page_size // 3


def _parse_interval(value: int | str) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return None


# =========================
# State machine
# =========================


class ViewerStateMachine:
    """
    Single owner of viewer + buffer state.

    Args:
        fetcher:        ListingFetcher used by the internal Pager.
        scheduler:      Periodic timer collaborator for auto-advance.
        path:           Listing path, e.g. "r/pics".
        origin:         Site origin for request URLs.
        page_size:      Items requested per page (also drives the low-watermark).
        preferences:    Optional store for auto-advance preferences.
        defaults:       Preferences used when the store has nothing valid.
        tick_callback:  What the timer calls; defaults to dispatching Tick directly.
        on_change:      Called with the machine after every state-changing dispatch.
    """

    def __init__(
        self,
        fetcher: ListingFetcher,
        scheduler: Scheduler,
        *,
        path: str,
        origin: str = SITE_ORIGIN,
        page_size: int = PAGE_SIZE,
        preferences: PreferenceStore | None = None,
        defaults: ViewerPreferences | None = None,
        tick_callback: Callable[[], None] | None = None,
        on_change: Callable[[ViewerStateMachine], None] | None = None,
    ) -> None:
        self.pager = Pager(
            fetcher,
            path=path,
            origin=origin,
            page_size=page_size,
            on_settled=self._on_settled,
        )
        self.scheduler = scheduler
        self.preferences = preferences
        self.on_change = on_change
        self._tick_callback = tick_callback or (lambda: self.dispatch(Tick()))

        prefs = load_preferences(preferences, defaults)
        self.auto_advance = prefs.timeout_enabled
        self.interval_s = prefs.timeout_seconds
        self.current_index: int | None = None
        self._timer: TimerHandle | None = None
        self._started = False

    # ---------- read side ----------

    @property
    def buffer(self) -> FeedBuffer:
        return self.pager.buffer

    @property
    def loading(self) -> bool:
        return self.pager.loading

    @property
    def failed(self) -> bool:
        return self.pager.failed

    @property
    def timer(self) -> TimerHandle | None:
        return self._timer

    @property
    def current_item(self) -> NormalizedMediaItem | None:
        return self.buffer.get(self.current_index)

    @property
    def state(self) -> ViewerState:
        return ViewerState(
            current_index=self.current_index,
            item_count=len(self.buffer),
            auto_advance=self.auto_advance,
            interval_s=self.interval_s,
            loading=self.loading,
            failed=self.failed,
            cursor=self.buffer.cursor,
        )

    # ---------- lifecycle ----------

    def start(self) -> None:
        """Arm the timer per the seeded preferences and request the first page."""
        if self._started:
            return
        self._started = True
        self._refresh_interval()
        self.dispatch(LoadItems())

    def close(self) -> None:
        self._cancel_timer()

    # ---------- transitions ----------

    def dispatch(self, msg: Message) -> bool:
        """
        Apply one message.

        Returns:
            True when observable state changed (renderers should repaint).
        """
        changed = self._update(msg)
        if changed and self.on_change is not None:
            self.on_change(self)
        return changed

    def _update(self, msg: Message) -> bool:
        if isinstance(msg, LoadItems):
            return self._load_items()

        if isinstance(msg, Retry):
            if not self.failed or self.loading:
                return False
            return self._load_items()

        if isinstance(msg, Advance):
            return self._navigate(self._index_or(0) + 1)

        if isinstance(msg, Retreat):
            return self._navigate(self._index_or(0) - 1)

        if isinstance(msg, SetIndex):
            return self._navigate(msg.index)

        if isinstance(msg, Tick):
            if not self.auto_advance:
                return False
            self._move_to(self._index_or(0) + 1)
            return True

        if isinstance(msg, ToggleAutoAdvance):
            self.auto_advance = not self.auto_advance
            save_timeout_enabled(self.preferences, self.auto_advance)
            self._refresh_interval()
            return True

        if isinstance(msg, SetInterval):
            seconds = _parse_interval(msg.seconds)
            if seconds is None or seconds <= 0 or seconds == self.interval_s:
                return False
            self.interval_s = seconds
            save_timeout_seconds(self.preferences, seconds)
            self._refresh_interval()
            return True

        if isinstance(msg, ItemsLoaded):
            if self.current_index is None and len(self.buffer) > 0:
                self.current_index = 0
            return True

        if isinstance(msg, ItemsFailed):
            return True

        raise TypeError(f"unknown viewer message: {msg!r}")

    # ---------- helpers ----------

    def _index_or(self, default: int) -> int:
        return default if self.current_index is None else self.current_index

    def _load_items(self) -> bool:
        if self.loading:
            return False
        return self.pager.request_next_page()

    def _navigate(self, target: int) -> bool:
        self._move_to(target)
        self._refresh_interval()
        return True

    def _move_to(self, target: int) -> None:
        self.current_index = target
        self._check_bounds()
        self._check_next_load()

    def _check_bounds(self) -> None:
        n = len(self.buffer)
        if n == 0:
            self.current_index = None
        elif self.current_index is not None:
            self.current_index = max(0, min(self.current_index, n - 1))

    def _check_next_load(self) -> None:
        # Failed pages are only re-requested by an explicit Retry/LoadItems.
        if self.loading or self.failed:
            return
        remaining = len(self.buffer) - self._index_or(0)
        if remaining < low_watermark(self.pager.page_size):
            log.debug("low watermark: %d remaining, prefetching", remaining)
            self.dispatch(LoadItems())

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _refresh_interval(self) -> None:
        self._cancel_timer()
        if self.auto_advance:
            self._timer = self.scheduler.every(self.interval_s, self._tick_callback)

    def _on_settled(self, outcome: FetchOutcome) -> None:
        if outcome.ok:
            self.dispatch(ItemsLoaded(outcome.added))
        else:
            self.dispatch(ItemsFailed(outcome.error))


__all__ = [
    "LoadItems",
    "Retry",
    "Advance",
    "Retreat",
    "SetIndex",
    "Tick",
    "ToggleAutoAdvance",
    "SetInterval",
    "ItemsLoaded",
    "ItemsFailed",
    "Message",
    "low_watermark",
    "ViewerStateMachine",
]
