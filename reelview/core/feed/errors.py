# reelview/core/feed/errors.py
"""
Typed errors for listing pages.

Exports
-------
- FeedError, UpstreamEmptyError, UpstreamUnusableError, TransportFailureError
- FEED_ERRORS
- classify_feed_error(exc)
- feed_error_guard()

A page that yields no media for a single entry is *not* an error here: the
normalizer treats that as an internal extraction miss and skips the entry.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import contextmanager

import requests
from pydantic import ValidationError

# =========================
# Exception types
# =========================


class FeedError(RuntimeError):
    """Base class for failures that put the viewer in the failed state."""


class UpstreamEmptyError(FeedError):
    """The listing had no data envelope (end of results or an empty response)."""


class UpstreamUnusableError(FeedError):
    """The envelope was present but produced neither items nor a cursor."""


class TransportFailureError(FeedError):
    """Network error, non-success status, or an undecodable/malformed page."""


FEED_ERRORS = (
    UpstreamEmptyError,
    UpstreamUnusableError,
    TransportFailureError,
)

# =========================
# Classification helpers
# =========================


def classify_feed_error(exc: BaseException) -> FeedError:
    """
    Map arbitrary exceptions raised while fetching or decoding a page to a FeedError.

    Heuristics:
      - FeedError subclasses          → passed through
      - requests.* errors             → TransportFailureError
      - JSON decode / pydantic errors → TransportFailureError (structural parse failure)
      - Fallback                      → TransportFailureError
    """
    if isinstance(exc, FeedError):
        return exc

    if isinstance(exc, requests.RequestException):
        return TransportFailureError(f"transport: {exc}")

    if isinstance(exc, (json.JSONDecodeError, ValidationError)):
        return TransportFailureError(f"malformed listing: {type(exc).__name__}: {exc}")

    return TransportFailureError(f"{type(exc).__name__}: {exc}")


@contextmanager
def feed_error_guard() -> Iterator[None]:
    """Context manager to normalize unexpected exceptions into FeedError."""
    try:
        yield
    except FEED_ERRORS:
        raise
    except Exception as exc:  # noqa: BLE001
        raise classify_feed_error(exc) from exc


__all__ = [
    "FeedError",
    "UpstreamEmptyError",
    "UpstreamUnusableError",
    "TransportFailureError",
    "FEED_ERRORS",
    "classify_feed_error",
    "feed_error_guard",
]
