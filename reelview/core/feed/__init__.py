# reelview/core/feed/__init__.py
"""Listing page parsing, pagination and the append-only feed buffer."""
