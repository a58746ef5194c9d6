# reelview/viewer/scheduler.py
"""
Periodic timer collaborator for auto-advance.

The state machine only sees the `Scheduler` protocol; it never reads a
wall clock. `ThreadingScheduler` is the default for the console loop and
fires its callback from a timer thread, so the callback it is given should
post to the owner's queue rather than touch state.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Protocol, runtime_checkable


@runtime_checkable
class TimerHandle(Protocol):
    def cancel(self) -> None: ...


@runtime_checkable
class Scheduler(Protocol):
    def every(self, seconds: float, callback: Callable[[], None]) -> TimerHandle:
        """Call `callback` every `seconds` until the returned handle is cancelled."""
        ...


class _RepeatingTimer:
    def __init__(self, seconds: float, callback: Callable[[], None]) -> None:
        self._seconds = seconds
        self._callback = callback
        self._lock = threading.Lock()
        self._cancelled = False
        self._timer: threading.Timer | None = None
        self._arm()

    def _arm(self) -> None:
        with self._lock:
            if self._cancelled:
                return
            self._timer = threading.Timer(self._seconds, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def _fire(self) -> None:
        if self._cancelled:
            return
        self._callback()
        self._arm()

    def cancel(self) -> None:
        with self._lock:
            self._cancelled = True
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None


class ThreadingScheduler:
    """Scheduler backed by re-arming threading.Timer objects."""

    def every(self, seconds: float, callback: Callable[[], None]) -> _RepeatingTimer:
        if seconds <= 0:
            raise ValueError("interval must be > 0")
        return _RepeatingTimer(seconds, callback)


__all__ = ["TimerHandle", "Scheduler", "ThreadingScheduler"]
