"""RSS feed source for the headline cache."""

from __future__ import annotations

import re
from typing import Protocol

import feedparser
import httpx
import structlog
from bs4 import BeautifulSoup
from pydantic import BaseModel, Field

logger = structlog.get_logger()

_BLANK_LINES = re.compile(r"\n{3,}")


class FeedItem(BaseModel):
    """One article as published by a feed."""

    url: str = Field(description="Article link, used as the identity of the article")
    title: str = Field(description="Article headline")
    text: str = Field(default="", description="Article text")


class ArticleSource(Protocol):
    """Anything that can list the articles currently published."""

    def fetch(self) -> list[FeedItem]: ...


def html_to_text(value: str) -> str:
    """Strip markup from feed content, keeping paragraph breaks."""
    if not value:
        return ""

    soup = BeautifulSoup(value, "html.parser")
    for tag in soup(["script", "style", "head"]):
        tag.decompose()

    text = soup.get_text(separator="\n")
    lines = [line.strip() for line in text.splitlines()]
    return _BLANK_LINES.sub("\n\n", "\n".join(lines)).strip()


def _entry_text(entry: feedparser.FeedParserDict) -> str:
    for content in entry.get("content") or []:
        value = content.get("value")
        if value:
            return html_to_text(value)
    return html_to_text(entry.get("summary") or entry.get("description") or "")


class FeedSource:
    """Fetches articles from an RSS or Atom feed."""

    def __init__(self, url: str, *, timeout: float = 30.0, client: httpx.Client | None = None) -> None:
        self.url = url
        self._client = client or httpx.Client(timeout=timeout, follow_redirects=True)

    def fetch(self) -> list[FeedItem]:
        """Download and parse the feed.

        Raises:
            httpx.HTTPError: If the feed cannot be downloaded.
            ValueError: If the response is not a feed.
        """
        response = self._client.get(self.url)
        response.raise_for_status()

        feed = feedparser.parse(response.content)
        if feed.get("bozo") and not feed.entries:
            raise ValueError(f"cannot parse feed {self.url}: {feed.get('bozo_exception')}")

        items: list[FeedItem] = []
        for entry in feed.entries:
            url = (entry.get("link") or entry.get("id") or "").strip()
            title = " ".join(html_to_text(entry.get("title") or "").split())
            if not url or not title:
                continue
            items.append(FeedItem(url=url, title=title, text=_entry_text(entry) or title))

        logger.debug("feed_fetched", url=self.url, items=len(items))
        return items

    def close(self) -> None:
        self._client.close()
