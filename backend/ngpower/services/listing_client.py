"""HTML listing-page adapter.

Parses a category/notice page (TCN news, DISCO outage-information pages) with
a CSS item selector. Each matching card becomes one candidate; the card text is
used both as summary and as schedule text.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Any
from urllib.parse import urljoin

import httpx
from bs4 import BeautifulSoup, Tag

from ngpower.config import Settings
from ngpower.schemas.ingest import SourceConfig
from ngpower.services.adapters import extract_areas, matches_keywords, summarise
from ngpower.services.fetch import fetch_text

logger = logging.getLogger(__name__)

_DATE_TEXT_PATTERN = re.compile(
    r"\b\d{1,2}\s+[A-Za-z]{3,9},?\s+\d{4}\b|\b[A-Za-z]{3,9}\s+\d{1,2},\s+\d{4}\b|\b\d{4}-\d{2}-\d{2}\b|\b\d{1,2}/\d{1,2}/\d{4}\b"
)


def _text(node: Tag | None) -> str:
    if node is None:
        return ""
    return " ".join(node.get_text(" ").split())


def _published_at(node: Tag) -> str | None:
    time_tag = node.find("time")
    if time_tag is not None:
        value = time_tag.get("datetime") or _text(time_tag)
        if value:
            return value
    match = _DATE_TEXT_PATTERN.search(_text(node))
    return match.group(0) if match else None


class HtmlListingAdapter:
    def __init__(self, config: SourceConfig, settings: Settings):
        self.config = config
        self.settings = settings
        self.name = config.name
        self.source = config.source

    async def fetch(self, client: httpx.AsyncClient) -> list[dict[str, Any]]:
        html = await fetch_text(client, self.config.url, self.settings)
        return self.parse(html, fetched_at=datetime.now(timezone.utc))

    def parse(self, html: str, fetched_at: datetime) -> list[dict[str, Any]]:
        soup = BeautifulSoup(html, "html.parser")
        items = []
        seen_urls: set[str] = set()

        for node in soup.select(self.config.item_selector):
            if len(items) >= self.config.max_items:
                break
            link = node.find("a", href=True)
            title = _text(node.find(["h1", "h2", "h3", "h4"])) or _text(link)
            if not title or not matches_keywords(title, self.config.keywords):
                continue

            url = urljoin(self.config.url, link["href"]) if link else self.config.url
            # nested selectors (article > .post) would otherwise yield the same card twice
            if link and url in seen_urls:
                continue
            seen_urls.add(url)

            body = _text(node)
            published = _published_at(node)
            if published is None:
                logger.debug("[%s] no date on card, using fetch time: %s", self.name, title[:60])
                published = fetched_at

            items.append({
                "source": self.config.source,
                "source_name": self.config.source_name,
                "title": title,
                "summary": summarise(body or title),
                "published_at": published,
                "schedule_text": body,
                "status": self.config.status,
                "affected_areas": extract_areas(body),
                "verified_by": self.config.verified_by,
                "official_url": url,
                "confidence": self.config.confidence,
            })

        logger.info(
            "[%s] items=%d from %s",
            self.name, len(items), self.config.url,
        )
        return items
