# reelview/core/feed/parser.py
"""
Listing page parser (RawListingPage → items + cursor).

Outcomes
--------
- No data envelope                       → None   (UpstreamEmptyError in the raising variant)
- Envelope but no items and no cursor    → None   (UpstreamUnusableError)
- Anything else                          → (items, cursor); items may be empty

The cursor is the `name` of the last child whose payload carries one, whether
or not that child produced media and whatever its kind. Only link (t3)
payloads must carry a title and permalink.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from reelview.core.extract.normalizer import normalize_entry
from reelview.core.feed.errors import UpstreamEmptyError, UpstreamUnusableError
from reelview.schemas.models import NormalizedMediaItem, RawListingPage

PageResult = tuple[list[NormalizedMediaItem], str]

log = logging.getLogger(__name__)


def _coerce(raw: RawListingPage | Mapping[str, Any]) -> RawListingPage:
    if isinstance(raw, RawListingPage):
        return raw
    # ValidationError propagates; callers classify it as a transport failure.
    return RawListingPage.model_validate(raw)


def _walk(page: RawListingPage) -> PageResult | None:
    if page.data is None:
        return None

    items: list[NormalizedMediaItem] = []
    after = ""
    for child in page.data.children:
        if child.data is None:
            continue
        if child.data.name:
            after = child.data.name
        items.extend(normalize_entry(child))

    log.debug("parsed page: %d children → %d items, cursor=%r", len(page.data.children), len(items), after)
    if not items and not after:
        return None
    return items, after


def parse_listing_page(raw: RawListingPage | Mapping[str, Any]) -> PageResult | None:
    """
    Parse one listing page.

    Args:
        raw: A validated RawListingPage or the decoded JSON object.

    Returns:
        (items, cursor) when the page produced media or advanced pagination, else None.
    """
    return _walk(_coerce(raw))


def parse_listing_page_or_raise(raw: RawListingPage | Mapping[str, Any]) -> PageResult:
    """Like parse_listing_page, but tells the two "nothing usable" outcomes apart."""
    page = _coerce(raw)
    if page.data is None:
        raise UpstreamEmptyError("listing response has no data envelope")
    result = _walk(page)
    if result is None:
        raise UpstreamUnusableError("listing page yielded neither items nor a cursor")
    return result


__all__ = ["PageResult", "parse_listing_page", "parse_listing_page_or_raise"]
