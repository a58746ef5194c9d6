# reelview/core/extract/__init__.py
from __future__ import annotations

from .extractors import EXTRACTOR_CHAIN
from .normalizer import LINK_KIND, normalize_entry

__all__ = [
    "EXTRACTOR_CHAIN",
    "LINK_KIND",
    "normalize_entry",
]
