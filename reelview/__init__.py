# reelview/__init__.py
"""reelview: listing JSON → uniform media items, plus a slideshow viewer state machine."""

__version__ = "0.1.0"
