# tests/conftest.py
from __future__ import annotations

import pytest

from reelview.core.fetch.base import PAGE_SIZE
from reelview.viewer.preferences import MemoryPreferenceStore
from reelview.viewer.state_machine import ViewerStateMachine
from tests.utils import FakeFetcher, ManualScheduler, make_page, make_picture_entry


# -------- Environment isolation --------
@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for key in (
        "REELVIEW_PATH",
        "REELVIEW_ORIGIN",
        "REELVIEW_PAGE_SIZE",
        "REELVIEW_INTERVAL",
        "REELVIEW_AUTO",
        "REELVIEW_PREFS",
        "REELVIEW_DEBUG",
    ):
        monkeypatch.delenv(key, raising=False)
    yield


# -------- Collaborator fixtures --------
@pytest.fixture
def fake_fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def manual_scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def pref_store() -> MemoryPreferenceStore:
    return MemoryPreferenceStore()


@pytest.fixture
def picture_page():
    """
    Factory for a listing page of `n` picture entries named t3_<prefix><i>.
    """

    def _factory(n: int, prefix: str = "p") -> dict:
        return make_page([make_picture_entry(f"t3_{prefix}{i}", f"https://i.redd.it/{prefix}{i}.jpg") for i in range(n)])

    return _factory


@pytest.fixture
def viewer_factory(fake_fetcher, manual_scheduler, pref_store):
    """
    Build a ViewerStateMachine wired to the fake collaborators.

    Usage:
        vm = viewer_factory()
        vm = viewer_factory(page_size=10)
    """

    def _factory(*, page_size: int = PAGE_SIZE, path: str = "r/pics", **kwargs) -> ViewerStateMachine:
        return ViewerStateMachine(
            fake_fetcher,
            manual_scheduler,
            path=path,
            page_size=page_size,
            preferences=pref_store,
            **kwargs,
        )

    return _factory


@pytest.fixture
def loaded_viewer(viewer_factory, fake_fetcher, picture_page):
    """
    Factory: a started viewer whose first page (n items) has been delivered.
    """

    def _factory(n: int, **kwargs) -> ViewerStateMachine:
        vm = viewer_factory(**kwargs)
        vm.start()
        fake_fetcher.complete(picture_page(n))
        return vm

    return _factory


# -------- Pytest markers --------
def pytest_configure(config):
    config.addinivalue_line("markers", "integration: marks integration tests")
