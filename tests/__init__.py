# tests/__init__.py
"""
Expose common test utilities so tests can import directly:
    from tests import make_page, make_picture_entry, FakeFetcher
"""

from .utils import FakeFetcher, ManualScheduler, make_page, make_picture_entry, make_video_entry

__all__ = ["FakeFetcher", "ManualScheduler", "make_page", "make_picture_entry", "make_video_entry"]
