# reelview/viewer/loop.py
"""
Event loop that owns a ViewerStateMachine.

Fetch completions (worker thread), timer ticks (timer thread) and user
commands (stdin thread) are all posted here as zero-arg callables and run one
at a time on the thread that calls `run_once` / `run`. Nothing else touches
the machine.
"""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable

from reelview.core.fetch.base import ListingFetcher
from reelview.core.fetch.listing_fetcher import ThreadedListingFetcher
from reelview.inputs.settings import AppSettings
from reelview.viewer.preferences import JsonFilePreferenceStore, MemoryPreferenceStore, PreferenceStore
from reelview.viewer.scheduler import Scheduler, ThreadingScheduler
from reelview.viewer.state_machine import Message, Tick, ViewerStateMachine

log = logging.getLogger(__name__)

Job = Callable[[], None]


def preference_store_for(settings: AppSettings) -> PreferenceStore:
    if settings.viewer.prefs_path:
        return JsonFilePreferenceStore(settings.viewer.prefs_path)
    return MemoryPreferenceStore()


class ViewerLoop:
    def __init__(
        self,
        settings: AppSettings,
        *,
        on_change: Callable[[ViewerStateMachine], None] | None = None,
        fetcher: ListingFetcher | None = None,
        scheduler: Scheduler | None = None,
        store: PreferenceStore | None = None,
    ) -> None:
        self._queue: queue.Queue[Job] = queue.Queue()
        self._stopped = threading.Event()
        self.machine = ViewerStateMachine(
            fetcher or ThreadedListingFetcher(self.post, settings.feed.fetch_policy()),
            scheduler or ThreadingScheduler(),
            path=settings.feed.path,
            origin=settings.feed.origin,
            page_size=settings.feed.page_size,
            preferences=store if store is not None else preference_store_for(settings),
            defaults=settings.viewer.defaults(),
            tick_callback=lambda: self.send(Tick()),
            on_change=on_change,
        )

    @property
    def stopped(self) -> bool:
        return self._stopped.is_set()

    def post(self, job: Job) -> None:
        self._queue.put(job)

    def send(self, msg: Message) -> None:
        self.post(lambda: self.machine.dispatch(msg))

    def stop(self) -> None:
        self._stopped.set()
        # wake a blocked run_once
        self.post(lambda: None)

    def run_once(self, timeout: float | None = None) -> bool:
        """Run one queued job. Returns False if the queue stayed empty."""
        try:
            job = self._queue.get(timeout=timeout)
        except queue.Empty:
            return False
        job()
        return True

    def run(self) -> None:
        self.machine.start()
        try:
            while not self.stopped:
                self.run_once(timeout=0.5)
        finally:
            self.machine.close()
            log.debug("viewer loop stopped")


__all__ = ["ViewerLoop", "preference_store_for"]
