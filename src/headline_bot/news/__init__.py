"""Headline cache and the feed it is refreshed from."""

from .cache import HeadlineCache, HeadlineStore
from .feed import FeedItem, FeedSource

__all__ = ["FeedItem", "FeedSource", "HeadlineCache", "HeadlineStore"]
