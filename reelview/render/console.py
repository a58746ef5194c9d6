# reelview/render/console.py
from __future__ import annotations

from reelview.schemas.models import (
    EmbedMedia,
    NormalizedMediaItem,
    PictureMedia,
    VideoMedia,
    ViewerState,
)

_STRIP_WINDOW = 7


def _largest_source(source_set: str) -> str:
    """
    Return the last (primary) URL of a source-set string.

    Example:
        "a 100w, b 200w, c 300w" -> "c"
    """
    last = source_set.rsplit(",", 1)[-1].strip()
    return last.split(" ", 1)[0] if last else ""


def render_item(item: NormalizedMediaItem | None) -> str:
    """
    Render one item as two plain-text lines: title + permalink, then media.
    """
    if item is None:
        return "(nothing to show yet)"
    head = f"{item.title}\n  {item.title_url}\n"
    media = item.media
    if isinstance(media, PictureMedia):
        sizes = media.source_set.count(",") + 1 if media.source_set else 0
        return head + f"  [picture] {media.url} ({sizes} sizes, largest {_largest_source(media.source_set)})"
    if isinstance(media, VideoMedia):
        return head + f"  [video {media.mime}] {media.url} (muted, autoplay, loop)"
    if isinstance(media, EmbedMedia):
        return head + f"  [embed {media.width}x{media.height} scrolling={media.scrolling}] {media.url}"
    return head + "  [unknown media]"


def render_status(state: ViewerState) -> str:
    """
    One status line.

    Example:
        "3/120 | auto every 10s | loading…"
    """
    pos = "-" if state.current_index is None else str(state.current_index + 1)
    auto = f"auto every {state.interval_s}s" if state.auto_advance else "auto off"
    parts = [f"{pos}/{state.item_count}", auto]
    if state.phase == "loading":
        parts.append("loading…")
    elif state.phase == "failed":
        parts.append("failed to load next page (r = retry)")
    return " | ".join(parts)


def render_index_strip(state: ViewerState, window: int = _STRIP_WINDOW) -> str:
    """
    Numbered strip around the current item; the current one is bracketed.

    Example:
        "1 2 [3] 4 5"
    """
    if state.item_count == 0 or state.current_index is None:
        return ""
    half = window // 2
    lo = max(0, state.current_index - half)
    hi = min(state.item_count, lo + window)
    lo = max(0, hi - window)
    cells = []
    for i in range(lo, hi):
        label = str(i + 1)
        cells.append(f"[{label}]" if i == state.current_index else label)
    return " ".join(cells)


def render_screen(state: ViewerState, item: NormalizedMediaItem | None) -> str:
    lines = [render_status(state), render_item(item)]
    strip = render_index_strip(state)
    if strip:
        lines.append(strip)
    return "\n".join(lines)
