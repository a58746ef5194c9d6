# tests/unit/test_listing_fetcher.py
from __future__ import annotations

import queue
from typing import Any

import pytest
import requests

from reelview.core.feed.errors import FeedError, TransportFailureError
from reelview.core.fetch import listing_fetcher as lf
from reelview.core.fetch.base import ListingFetcher
from reelview.schemas.models import FetchPolicy


class _FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, bad_json: bool = False) -> None:
        self.status_code = status_code
        self._payload = payload
        self._bad_json = bad_json

    def json(self) -> Any:
        if self._bad_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


def _patch_get(monkeypatch, response: _FakeResponse | Exception, calls: list[dict[str, Any]] | None = None) -> None:
    def fake_get(url: str, headers: dict[str, str], timeout: float) -> _FakeResponse:
        if calls is not None:
            calls.append({"url": url, "headers": headers, "timeout": timeout})
        if isinstance(response, Exception):
            raise response
        return response

    monkeypatch.setattr(lf.requests, "get", fake_get)


def test_fetchers_satisfy_protocol() -> None:
    assert isinstance(lf.RequestsListingFetcher(), ListingFetcher)
    assert isinstance(lf.ThreadedListingFetcher(lambda job: job()), ListingFetcher)


def test_fetch_sends_policy_headers_and_timeout(monkeypatch) -> None:
    calls: list[dict[str, Any]] = []
    _patch_get(monkeypatch, _FakeResponse(payload={"data": {}}), calls)

    out = lf.fetch_listing_json("https://x/r/pics/.json?limit=50", policy=FetchPolicy(timeout_s=3, user_agent="UA/1"))
    assert out == {"data": {}}
    assert calls[0]["headers"]["User-Agent"] == "UA/1"
    assert calls[0]["timeout"] == 3


@pytest.mark.parametrize(
    "response",
    [
        _FakeResponse(status_code=503, payload={}),
        _FakeResponse(bad_json=True),
        requests.ConnectionError("dns"),
        requests.Timeout("slow"),
    ],
)
def test_fetch_failures_raise_transport_failure(monkeypatch, response) -> None:
    _patch_get(monkeypatch, response)
    with pytest.raises(TransportFailureError):
        lf.fetch_listing_json("https://x/r/pics/.json")


def test_unexpected_errors_are_classified(monkeypatch) -> None:
    _patch_get(monkeypatch, KeyError("headers"))
    with pytest.raises(TransportFailureError):
        lf.fetch_listing_json("https://x/r/pics/.json")

    errors: list[FeedError] = []
    lf.RequestsListingFetcher().start("https://x/r/pics/.json", lambda d: None, errors.append)
    assert len(errors) == 1 and isinstance(errors[0], TransportFailureError)


def test_non_200_allowed_by_policy(monkeypatch) -> None:
    _patch_get(monkeypatch, _FakeResponse(status_code=404, payload={"error": 404}))
    assert lf.fetch_listing_json("https://x", policy=FetchPolicy(allow_non_200=True)) == {"error": 404}


def test_sync_fetcher_routes_callbacks(monkeypatch) -> None:
    pages: list[Any] = []
    errors: list[FeedError] = []

    _patch_get(monkeypatch, _FakeResponse(payload={"ok": 1}))
    task = lf.RequestsListingFetcher().start("https://x/a", pages.append, errors.append)
    assert task.url == "https://x/a"
    assert pages == [{"ok": 1}] and errors == []

    _patch_get(monkeypatch, requests.ConnectionError("down"))
    lf.RequestsListingFetcher().start("https://x/b", pages.append, errors.append)
    assert len(pages) == 1
    assert len(errors) == 1 and isinstance(errors[0], TransportFailureError)


def test_threaded_fetcher_posts_completion(monkeypatch) -> None:
    _patch_get(monkeypatch, _FakeResponse(payload={"ok": 2}))
    jobs: queue.Queue = queue.Queue()
    pages: list[Any] = []

    lf.ThreadedListingFetcher(jobs.put).start("https://x/a", pages.append, lambda e: None)

    job = jobs.get(timeout=2)
    assert pages == []  # nothing runs until the owner runs the job
    job()
    assert pages == [{"ok": 2}]


def test_threaded_fetcher_posts_errors(monkeypatch) -> None:
    _patch_get(monkeypatch, _FakeResponse(status_code=500))
    jobs: queue.Queue = queue.Queue()
    errors: list[FeedError] = []

    lf.ThreadedListingFetcher(jobs.put).start("https://x/a", lambda d: None, errors.append)
    jobs.get(timeout=2)()
    assert len(errors) == 1 and isinstance(errors[0], TransportFailureError)
