# tests/utils.py
"""
Single source of truth for test data, factories, and test doubles.
Update values here to cascade across the test suite.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

# -----------------------------
# Global defaults (edit once)
# -----------------------------

DEFAULT_TITLE = "A very good picture"
DEFAULT_PERMALINK = "/r/pics/comments/abc123/a_very_good_picture/"
DEFAULT_NAME = "t3_abc123"
CDN = "https://preview.redd.it"


# -----------------------------
# Raw JSON factories
# -----------------------------


def make_image(url: str, width: int, height: int | None = None) -> dict[str, Any]:
    return {"url": url, "width": width, "height": height if height is not None else width}


def make_preview_image(
    *,
    source: dict[str, Any] | None = None,
    resolutions: list[dict[str, Any]] | None = None,
    gif: dict[str, Any] | None = None,
    mp4: dict[str, Any] | None = None,
) -> dict[str, Any]:
    img: dict[str, Any] = {
        "source": source or make_image(f"{CDN}/still.jpg?width=640&amp;s=1", 640),
        "resolutions": resolutions if resolutions is not None else [],
        "id": "img1",
    }
    if gif is not None or mp4 is not None:
        variants: dict[str, Any] = {}
        if gif is not None:
            variants["gif"] = gif
        if mp4 is not None:
            variants["mp4"] = mp4
        img["variants"] = variants
    return img


def make_image_set(url: str, width: int, alternates: list[tuple[str, int]] | None = None) -> dict[str, Any]:
    return {
        "source": make_image(url, width),
        "resolutions": [make_image(u, w) for u, w in (alternates or [])],
    }


def make_gallery_item(url: str, x: int, alternates: list[tuple[str, int]] | None = None) -> dict[str, Any]:
    return {
        "status": "valid",
        "e": "Image",
        "m": "image/jpg",
        "s": {"x": x, "y": x, "u": url},
        "p": [{"x": w, "y": w, "u": u} for u, w in (alternates or [])],
    }


def make_payload(
    *,
    title: str = DEFAULT_TITLE,
    permalink: str = DEFAULT_PERMALINK,
    name: str = DEFAULT_NAME,
    **fields: Any,
) -> dict[str, Any]:
    payload: dict[str, Any] = {"title": title, "permalink": permalink, "name": name, "score": 1234}
    payload.update(fields)
    return payload


def make_entry(kind: str = "t3", payload: dict[str, Any] | None = None, **fields: Any) -> dict[str, Any]:
    if payload is None:
        payload = make_payload(**fields)
    return {"kind": kind, "data": payload}


def make_picture_entry(name: str, url: str, width: int = 640) -> dict[str, Any]:
    return make_entry(
        payload=make_payload(
            name=name,
            title=f"picture {name}",
            preview={"images": [make_preview_image(source=make_image(url, width))], "enabled": True},
        )
    )


def make_video_entry(name: str, mp4_url: str) -> dict[str, Any]:
    return make_entry(
        payload=make_payload(
            name=name,
            title=f"video {name}",
            preview={
                "images": [
                    make_preview_image(
                        source=make_image(f"{CDN}/{name}.gif", 320),
                        mp4=make_image_set(mp4_url, 320),
                    )
                ]
            },
        )
    )


def make_page(children: list[dict[str, Any]] | None, *, envelope: bool = True) -> dict[str, Any]:
    if not envelope:
        return {"kind": "Listing"}
    return {"kind": "Listing", "data": {"children": children or [], "after": None, "dist": len(children or [])}}


# -----------------------------
# Test doubles
# -----------------------------


@dataclass
class _Task:
    url: str


@dataclass
class FakeFetcher:
    """
    Deferred ListingFetcher: records requests; tests resolve them explicitly
    with `complete(...)` / `fail(...)`, in any order.
    """

    requests: list[tuple[str, Callable[[Any], None], Callable[[BaseException], None]]] = field(default_factory=list)

    @property
    def urls(self) -> list[str]:
        return [u for u, _, _ in self.requests]

    def start(self, url: str, on_page: Callable[[Any], None], on_error: Callable[[BaseException], None]) -> _Task:
        self.requests.append((url, on_page, on_error))
        return _Task(url)

    def complete(self, raw: Any, index: int = -1) -> None:
        _, on_page, _ = self.requests[index]
        on_page(raw)

    def fail(self, exc: BaseException, index: int = -1) -> None:
        _, _, on_error = self.requests[index]
        on_error(exc)


@dataclass
class ScriptedFetcher:
    """Synchronous ListingFetcher that answers from a list of pages in order."""

    pages: list[Any]
    urls: list[str] = field(default_factory=list)

    def start(self, url: str, on_page: Callable[[Any], None], on_error: Callable[[BaseException], None]) -> _Task:
        self.urls.append(url)
        page = self.pages.pop(0)
        if isinstance(page, BaseException):
            on_error(page)
        else:
            on_page(page)
        return _Task(url)


class ManualTimer:
    def __init__(self, scheduler: ManualScheduler, seconds: float, callback: Callable[[], None]) -> None:
        self.scheduler = scheduler
        self.seconds = seconds
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        if not self.cancelled:
            self.scheduler.events.append("cancel")
        self.cancelled = True


class ManualScheduler:
    """Scheduler without a clock; `fire()` runs the callbacks of live timers."""

    def __init__(self) -> None:
        self.timers: list[ManualTimer] = []
        self.events: list[str] = []

    def every(self, seconds: float, callback: Callable[[], None]) -> ManualTimer:
        assert self.live_count() == 0, "previous timer still live"
        t = ManualTimer(self, seconds, callback)
        self.timers.append(t)
        self.events.append(f"schedule:{seconds}")
        return t

    def live(self) -> list[ManualTimer]:
        return [t for t in self.timers if not t.cancelled]

    def live_count(self) -> int:
        return len(self.live())

    def fire(self) -> None:
        for t in self.live():
            t.callback()
