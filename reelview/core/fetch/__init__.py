# reelview/core/fetch/__init__.py
from .base import PAGE_SIZE, FetchTask, ListingFetcher, build_listing_url
from .listing_fetcher import RequestsListingFetcher, ThreadedListingFetcher, fetch_listing_json

__all__ = [
    "PAGE_SIZE",
    "FetchTask",
    "ListingFetcher",
    "build_listing_url",
    "fetch_listing_json",
    "RequestsListingFetcher",
    "ThreadedListingFetcher",
]
