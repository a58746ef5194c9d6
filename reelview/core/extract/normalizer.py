# reelview/core/extract/normalizer.py
"""
Item normalizer: one RawEntry -> zero or more NormalizedMediaItem.

Only link/post entries (kind "t3") are eligible. Extractors run in the fixed
EXTRACTOR_CHAIN order; the first that returns items decides the output for
the entry and the rest are skipped. A full miss contributes nothing and is
only logged.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from reelview.core.extract.extractors import EXTRACTOR_CHAIN, Extractor
from reelview.schemas.models import EntryPayload, NormalizedMediaItem, RawEntry

LINK_KIND = "t3"

log = logging.getLogger(__name__)


def is_eligible(entry: RawEntry) -> bool:
    return entry.kind == LINK_KIND and entry.data is not None


def link_payload(entry: RawEntry) -> EntryPayload | None:
    """
    The typed payload of an eligible entry, else None. A link payload missing
    its title, permalink or name raises ValidationError.
    """
    if not is_eligible(entry) or entry.data is None:
        return None
    return entry.data.as_link_payload()


def normalize_entry(
    entry: RawEntry,
    *,
    chain: Sequence[Extractor] = EXTRACTOR_CHAIN,
) -> list[NormalizedMediaItem]:
    payload = link_payload(entry)
    if payload is None:
        return []

    for extractor in chain:
        items = extractor(payload)
        if items is not None:
            return items

    log.debug("extraction miss for %s (%r)", payload.name, payload.title[:60])
    return []


__all__ = ["LINK_KIND", "is_eligible", "link_payload", "normalize_entry"]
