# reelview/viewer/preferences.py
"""
Auto-advance preference persistence.

Values are stored as strings under two keys, read once at viewer start and
written after every accepted toggle / interval change. Unparsable stored
values are ignored and the defaults kept.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

from reelview.schemas.models import ViewerPreferences

TIMEOUT_KEY = "TIMEOUT_KEY"
TIMEOUT_ENABLED_KEY = "TIMEOUT_ENABLED_KEY"

log = logging.getLogger(__name__)


@runtime_checkable
class PreferenceStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryPreferenceStore:
    """Dict-backed store; the default when nothing is persisted."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.values: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value


class JsonFilePreferenceStore:
    """
    Flat JSON object on disk. A missing or corrupt file reads as empty; writes
    replace the whole file.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            log.warning("ignoring unreadable preferences %s: %s", self.path, e)
            return {}
        if not isinstance(raw, dict):
            return {}
        return {str(k): str(v) for k, v in raw.items()}

    def get(self, key: str) -> str | None:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")


def _parse_bool(val: str) -> bool | None:
    v = val.strip().lower()
    if v == "true":
        return True
    if v == "false":
        return False
    return None


def _parse_seconds(val: str) -> int | None:
    try:
        n = int(val.strip())
    except ValueError:
        return None
    return n if n > 0 else None


def load_preferences(store: PreferenceStore | None, defaults: ViewerPreferences | None = None) -> ViewerPreferences:
    prefs = defaults or ViewerPreferences()
    if store is None:
        return prefs

    updates: dict[str, object] = {}
    enabled_raw = store.get(TIMEOUT_ENABLED_KEY)
    if enabled_raw is not None:
        enabled = _parse_bool(enabled_raw)
        if enabled is not None:
            updates["timeout_enabled"] = enabled

    seconds_raw = store.get(TIMEOUT_KEY)
    if seconds_raw is not None:
        seconds = _parse_seconds(seconds_raw)
        if seconds is not None:
            updates["timeout_seconds"] = seconds

    return prefs.model_copy(update=updates) if updates else prefs


def save_timeout_enabled(store: PreferenceStore | None, enabled: bool) -> None:
    if store is not None:
        store.set(TIMEOUT_ENABLED_KEY, "true" if enabled else "false")


def save_timeout_seconds(store: PreferenceStore | None, seconds: int) -> None:
    if store is not None:
        store.set(TIMEOUT_KEY, str(seconds))


__all__ = [
    "TIMEOUT_KEY",
    "TIMEOUT_ENABLED_KEY",
    "PreferenceStore",
    "MemoryPreferenceStore",
    "JsonFilePreferenceStore",
    "load_preferences",
    "save_timeout_enabled",
    "save_timeout_seconds",
]
