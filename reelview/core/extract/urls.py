# reelview/core/extract/urls.py
"""
URL helpers shared by the extractors.

- decode_entities: upstream JSON escapes '&' as '&amp;' inside every URL.
- source set builders: "<url> <width>w" descriptors, alternates first and the
  primary source last.
- absolute_permalink: resolve a relative permalink against the site origin.
"""

from __future__ import annotations

from collections.abc import Iterable
from urllib.parse import urlparse

from reelview.schemas.models import GalleryItem, GallerySource, PreviewImage, PreviewImageSet

SITE_ORIGIN = "https://www.reddit.com"


def decode_entities(url: str) -> str:
    # Only '&amp;' is decoded; entity-like query keys ('&copy=') stay intact.
    return url.replace("&amp;", "&")


def absolute_permalink(permalink: str, origin: str = SITE_ORIGIN) -> str:
    return f"{origin.rstrip('/')}/{permalink.lstrip('/')}"


def is_http_url(url: str | None) -> bool:
    if not url:
        return False
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def _descriptor(url: str, width: int | None) -> str:
    return f"{decode_entities(url)} {width}w"


def join_source_set(entries: Iterable[str]) -> str:
    return ", ".join(entries)


def preview_source_set(image: PreviewImageSet) -> str:
    """
    Example:
        resolutions w=100, w=200 and source w=300 ->
        "u100 100w, u200 200w, u300 300w"
    """
    parts = [_preview_descriptor(r) for r in image.resolutions]
    parts.append(_preview_descriptor(image.source))
    return join_source_set(parts)


def _preview_descriptor(img: PreviewImage) -> str:
    return _descriptor(img.url, img.width)


def gallery_source_set(item: GalleryItem) -> str:
    parts = [_gallery_descriptor(p) for p in item.p if _has_width(p)]
    if item.s is not None and _has_width(item.s):
        parts.append(_gallery_descriptor(item.s))
    return join_source_set(parts)


def _has_width(src: GallerySource) -> bool:
    return bool(src.u) and src.x is not None


def _gallery_descriptor(src: GallerySource) -> str:
    return _descriptor(src.u or "", src.x)


__all__ = [
    "SITE_ORIGIN",
    "decode_entities",
    "absolute_permalink",
    "is_http_url",
    "join_source_set",
    "preview_source_set",
    "gallery_source_set",
]
