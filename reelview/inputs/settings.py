# reelview/inputs/settings.py
"""
Settings loader for reelview.

Goals
-----
- File-first settings validated with Pydantic.
- Every field has a default, so running with no file at all is valid.
- Minimal environment-variable overrides for CLI convenience.

JSON shape
----------
    {
      "feed":   {"origin": "https://www.reddit.com", "path": "r/pics", "page_size": 50,
                 "timeout_s": 15.0, "user_agent": "...", "allow_non_200": false},
      "viewer": {"interval_s": 10, "auto_advance": true, "prefs_path": "prefs.json"}
    }

Environment overrides (optional)
--------------------------------
- REELVIEW_PATH       -> feed.path
- REELVIEW_ORIGIN     -> feed.origin
- REELVIEW_PAGE_SIZE  -> feed.page_size (int >= 1)
- REELVIEW_INTERVAL   -> viewer.interval_s (int > 0)
- REELVIEW_AUTO       -> viewer.auto_advance (1/0, true/false, yes/no, on/off)
- REELVIEW_PREFS      -> viewer.prefs_path

Public API
----------
- class SettingsLoader:
    - load(path: str | Path | None) -> AppSettings
    - load_json(text: str) -> AppSettings
    - with_overrides(cfg, **kwargs) -> AppSettings (non-destructive copies)
- function load_settings(path: str | Path | None) -> AppSettings (convenience)
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

from pydantic import BaseModel, Field, ValidationError

from reelview.core.extract.urls import SITE_ORIGIN
from reelview.core.fetch.base import PAGE_SIZE
from reelview.schemas.models import FetchPolicy, ViewerPreferences

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}

# ----------------------------
# Pydantic models
# ----------------------------


class FeedOptions(BaseModel):
    """Where listings come from and how they are requested."""

    origin: str = Field(SITE_ORIGIN, description="Site origin for listing requests.")
    path: str = Field("r/pics", min_length=1, description='Listing path, e.g. "r/pics" or "r/earthporn/top".')
    page_size: int = Field(PAGE_SIZE, ge=1, le=100, description="Entries requested per page (`limit`).")
    timeout_s: float = Field(15.0, gt=0, description="Per-request timeout in seconds.")
    user_agent: str = Field("reelview/0.1 (+slideshow)", description="User-Agent header.")
    allow_non_200: bool = Field(False, description="Treat non-2xx responses as pages instead of failures.")

    def fetch_policy(self) -> FetchPolicy:
        return FetchPolicy(timeout_s=self.timeout_s, user_agent=self.user_agent, allow_non_200=self.allow_non_200)


class ViewerOptions(BaseModel):
    """Slideshow defaults; a preference file, when present, wins over these."""

    interval_s: int = Field(10, gt=0, description="Auto-advance interval in seconds.")
    auto_advance: bool = Field(True, description="Start with auto-advance enabled.")
    prefs_path: str | None = Field(None, description="JSON file for persisted auto-advance preferences.")

    def defaults(self) -> ViewerPreferences:
        return ViewerPreferences(timeout_enabled=self.auto_advance, timeout_seconds=self.interval_s)


class AppSettings(BaseModel):
    feed: FeedOptions = FeedOptions()
    viewer: ViewerOptions = ViewerOptions()


# ----------------------------
# Loader
# ----------------------------


@dataclass(frozen=True)
class SettingsLoader:
    """
    File-first settings loader with light env overrides.

    Default search (when path=None):
        1) ./reelview.json
        2) built-in defaults
    """

    env_prefix: str = "REELVIEW_"

    # ---------- Public API ----------

    def load(self, path: str | Path | None = None) -> AppSettings:
        p = self._resolve_path(path)
        raw = self._read_json_file(p) if p is not None else {}
        cfg = self._parse_root(raw)
        return self._apply_env_overrides(cfg)

    def load_json(self, text: str) -> AppSettings:
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON payload: {e}") from e
        if not isinstance(raw, dict):
            raise ValueError("Settings root must be a JSON object.")
        cfg = self._parse_root(raw)
        return self._apply_env_overrides(cfg)

    def with_overrides(
        self,
        cfg: AppSettings,
        *,
        path: str | None = None,
        origin: str | None = None,
        interval_s: int | None = None,
        auto_advance: bool | None = None,
        prefs_path: str | None = None,
    ) -> AppSettings:
        """
        Return a *new* AppSettings with provided non-null overrides applied.
        Does not mutate the original instance.
        """
        feed_updates: dict[str, Any] = {}
        viewer_updates: dict[str, Any] = {}
        if path is not None:
            feed_updates["path"] = path
        if origin is not None:
            feed_updates["origin"] = origin
        if interval_s is not None:
            if interval_s <= 0:
                raise ValueError("interval must be > 0")
            viewer_updates["interval_s"] = interval_s
        if auto_advance is not None:
            viewer_updates["auto_advance"] = auto_advance
        if prefs_path is not None:
            viewer_updates["prefs_path"] = prefs_path

        return self._merge(cfg, feed_updates, viewer_updates)

    # ---------- Internals ----------

    def _resolve_path(self, path: str | Path | None) -> Path | None:
        if path is not None:
            p = Path(path)
            if not p.exists():
                raise FileNotFoundError(f"Settings file not found: {p}")
            return p
        default = Path("reelview.json")
        return default if default.exists() else None

    def _read_json_file(self, p: Path) -> dict[str, Any]:
        if p.suffix.lower() != ".json":
            raise ValueError(f"Unsupported settings format for {p.name}; only .json is supported.")
        try:
            data = json.loads(p.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {p}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Settings root in {p} must be a JSON object.")
        return cast(dict[str, Any], data)

    def _parse_root(self, data: dict[str, Any]) -> AppSettings:
        try:
            return AppSettings.model_validate(data)
        except ValidationError as e:
            raise ValueError(f"Settings validation failed:\n{e}") from e

    def _apply_env_overrides(self, cfg: AppSettings) -> AppSettings:
        prefix = self.env_prefix
        feed_updates: dict[str, Any] = {}
        viewer_updates: dict[str, Any] = {}

        path = os.getenv(f"{prefix}PATH")
        if path:
            feed_updates["path"] = path

        origin = os.getenv(f"{prefix}ORIGIN")
        if origin:
            feed_updates["origin"] = origin

        page_size = os.getenv(f"{prefix}PAGE_SIZE")
        if page_size:
            try:
                n = int(page_size)
                if 1 <= n <= 100:
                    feed_updates["page_size"] = n
            except ValueError:
                # Ignore bad value; keep validated cfg.feed.page_size
                pass

        interval = os.getenv(f"{prefix}INTERVAL")
        if interval:
            try:
                n = int(interval)
                if n > 0:
                    viewer_updates["interval_s"] = n
            except ValueError:
                pass

        auto = os.getenv(f"{prefix}AUTO")
        if auto:
            normalized = auto.strip().lower()
            if normalized in _TRUTHY:
                viewer_updates["auto_advance"] = True
            elif normalized in _FALSY:
                viewer_updates["auto_advance"] = False

        prefs = os.getenv(f"{prefix}PREFS")
        if prefs:
            viewer_updates["prefs_path"] = prefs

        return self._merge(cfg, feed_updates, viewer_updates)

    def _merge(self, cfg: AppSettings, feed_updates: dict[str, Any], viewer_updates: dict[str, Any]) -> AppSettings:
        if not feed_updates and not viewer_updates:
            return cfg
        return cfg.model_copy(
            update={
                "feed": cfg.feed.model_copy(update=feed_updates),
                "viewer": cfg.viewer.model_copy(update=viewer_updates),
            }
        )


# ----------------------------
# Convenience function
# ----------------------------


def load_settings(path: str | Path | None = None) -> AppSettings:
    """Convenience wrapper for one-shot callers."""
    return SettingsLoader().load(path)
