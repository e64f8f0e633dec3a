"""RSS/Atom feed adapter.

Used for media relays and any utility that exposes a WordPress-style feed.
Entries are filtered by the source's keyword list and must carry a date.
"""

import logging
from typing import Any

import feedparser
import httpx
from bs4 import BeautifulSoup

from ngpower.config import Settings
from ngpower.schemas.ingest import SourceConfig
from ngpower.services.adapters import extract_areas, matches_keywords, summarise
from ngpower.services.fetch import fetch_text

logger = logging.getLogger(__name__)


def _plain_text(html: str) -> str:
    if not html:
        return ""
    return " ".join(BeautifulSoup(html, "html.parser").get_text(" ").split())


class RssFeedAdapter:
    def __init__(self, config: SourceConfig, settings: Settings):
        self.config = config
        self.settings = settings
        self.name = config.name
        self.source = config.source

    async def fetch(self, client: httpx.AsyncClient) -> list[dict[str, Any]]:
        body = await fetch_text(client, self.config.url, self.settings)
        return self.parse(body)

    def parse(self, body: str) -> list[dict[str, Any]]:
        feed = feedparser.parse(body)
        if feed.bozo and not feed.entries:
            raise ValueError(f"unreadable feed at {self.config.url}: {feed.get('bozo_exception')}")

        items = []
        for entry in feed.entries[: self.config.max_items]:
            title = " ".join(entry.get("title", "").split())
            description = _plain_text(entry.get("summary", ""))
            haystack = f"{title} {description}"
            if not title or not matches_keywords(haystack, self.config.keywords):
                continue

            published = entry.get("published") or entry.get("updated")
            if not published:
                logger.debug("[%s] skipping undated entry: %s", self.name, title[:60])
                continue

            items.append({
                "source": self.config.source,
                "source_name": self.config.source_name,
                "title": title,
                "summary": summarise(description) if description else title,
                "published_at": published,
                "schedule_text": haystack,
                "status": self.config.status,
                "affected_areas": extract_areas(description),
                "verified_by": self.config.verified_by,
                "official_url": entry.get("link") or self.config.url,
                "confidence": self.config.confidence,
            })

        logger.info("[%s] fetched %d feed items (%d entries)", self.name, len(items), len(feed.entries))
        return items
