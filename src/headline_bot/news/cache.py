"""Thread-safe headline cache.

The responder only reads the cache while a background task refreshes it, so
every access to the shared state goes through one lock.
"""

from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Protocol

import structlog

from headline_bot.exceptions import CacheMissError, RefreshError
from headline_bot.models import Article, Headline
from headline_bot.news.feed import ArticleSource, FeedItem

logger = structlog.get_logger()

Clock = Callable[[], datetime]


class HeadlineStore(Protocol):
    """Read/refresh contract the responder relies on."""

    def refresh(self) -> None: ...

    def get_headlines(self) -> list[Headline]: ...

    def get_article(self, article_id: int) -> Article: ...


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _Entry:
    __slots__ = ("headline", "item")

    def __init__(self, headline: Headline, item: FeedItem) -> None:
        self.headline = headline
        self.item = item


class HeadlineCache:
    """Headlines and articles keyed by a stable numeric id.

    Ids are assigned the first time an article URL is seen and kept for as
    long as the article stays cached. Articles are evicted ``ttl`` after they
    were first seen.
    """

    def __init__(
        self,
        source: ArticleSource,
        *,
        ttl: timedelta = timedelta(hours=24),
        clock: Clock = _utcnow,
    ) -> None:
        self.source = source
        self.ttl = ttl
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[int, _Entry] = {}
        self._ids_by_url: dict[str, int] = {}
        self._next_id = 1

    def refresh(self) -> None:
        """Pull the current articles from the source and evict expired ones.

        Raises:
            RefreshError: If the source cannot be read. The cache keeps its
                previous contents.
        """
        try:
            items = self.source.fetch()
        except Exception as exc:  # noqa: BLE001
            raise RefreshError(f"failed to fetch headlines: {exc}") from exc

        now = self._clock()
        with self._lock:
            added = 0
            for item in items:
                if item.url in self._ids_by_url:
                    continue
                article_id = self._next_id
                self._next_id += 1
                self._ids_by_url[item.url] = article_id
                self._entries[article_id] = _Entry(
                    Headline(id=article_id, title=item.title, added=now), item
                )
                added += 1
            evicted = self._evict(now)
            total = len(self._entries)

        logger.info("headlines_refreshed", added=added, evicted=evicted, total=total)

    def get_headlines(self) -> list[Headline]:
        """Return the cached headlines in id order."""
        now = self._clock()
        with self._lock:
            return [
                entry.headline.model_copy()
                for _, entry in sorted(self._entries.items())
                if not self._expired(entry, now)
            ]

    def get_article(self, article_id: int) -> Article:
        """Return the article cached under ``article_id``.

        Raises:
            CacheMissError: If the id is unknown or the article has expired.
        """
        now = self._clock()
        with self._lock:
            entry = self._entries.get(article_id)
            if entry is None or self._expired(entry, now):
                raise CacheMissError(f"article {article_id} not found")
            return Article(headline=entry.headline.title, text=entry.item.text)

    def _expired(self, entry: _Entry, now: datetime) -> bool:
        return now - entry.headline.added > self.ttl

    def _evict(self, now: datetime) -> int:
        expired = [i for i, entry in self._entries.items() if self._expired(entry, now)]
        for article_id in expired:
            entry = self._entries.pop(article_id)
            self._ids_by_url.pop(entry.item.url, None)
        return len(expired)
