"""Tests for the RSS and HTML listing adapters."""

from datetime import datetime, timezone

import httpx
import pytest

from ngpower.schemas.ingest import RawCandidate, SourceConfig
from ngpower.schemas.outage import CIVIL_TZ, OutageSource, VerifiedBy
from ngpower.services.adapters import extract_areas, matches_keywords, summarise
from ngpower.services.listing_client import HtmlListingAdapter
from ngpower.services.rss_client import RssFeedAdapter

_FEED = """<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0">
  <channel>
    <title>Nigerian Tribune</title>
    <link>https://tribuneonlineng.com</link>
    <item>
      <title>AEDC announces planned maintenance in Wuse</title>
      <link>https://tribuneonlineng.com/aedc-maintenance-wuse/</link>
      <pubDate>Sun, 01 Jun 2025 08:00:00 +0100</pubDate>
      <description><![CDATA[<p>Supply will be interrupted from 9am to 4pm.</p><p>AREAS AFFECTED: Wuse 2, Maitama; Garki</p>]]></description>
    </item>
    <item>
      <title>Super Eagles win friendly</title>
      <link>https://tribuneonlineng.com/super-eagles/</link>
      <pubDate>Sun, 01 Jun 2025 07:00:00 +0100</pubDate>
      <description>Sports</description>
    </item>
    <item>
      <title>Load shedding hits Abuja suburbs</title>
      <link>https://tribuneonlineng.com/load-shedding/</link>
      <description>No date on this one</description>
    </item>
  </channel>
</rss>
"""

_LISTING = """
<html><body>
  <article>
    <h2><a href="/2025/06/line-maintenance/">Planned maintenance on Kaduna-Kano 330kV line</a></h2>
    <time datetime="2025-06-02T10:00:00+01:00">2 June 2025</time>
    <p>Outage from 14 June 2025 to 15 June 2025. AREAS AFFECTED: Zaria, Kano</p>
  </article>
  <article>
    <h2><a href="/2025/06/tower-collapse/">Tower collapse causes outage</a></h2>
    <p>Posted 28 May, 2025 by TCN media</p>
  </article>
  <article>
    <h3><a href="/2025/06/staff-award/">Staff award ceremony</a></h3>
  </article>
  <article>
    <h2><a href="/notices/undated/">Transmission line fault notice</a></h2>
  </article>
</body></html>
"""


def _make_config(kind: str, **overrides) -> SourceConfig:
    fields = dict(
        name=f"test-{kind}",
        kind=kind,
        source=OutageSource.AEDC if kind == "rss" else OutageSource.TCN,
        source_name="Test source",
        url="https://example.ng/feed" if kind == "rss" else "https://www.tcn.org.ng/category/latest-news/",
        verified_by=VerifiedBy.MEDIA,
        keywords=["maintenance", "outage", "load shedding", "transmission"],
        confidence=0.6,
    )
    fields.update(overrides)
    return SourceConfig(**fields)


# --- Helpers ---

def test_matches_keywords():
    assert matches_keywords("Anything at all", [])
    assert matches_keywords("TCN announces MAINTENANCE", ["maintenance"])
    assert not matches_keywords("Football results", ["outage"])


def test_extract_areas():
    assert extract_areas("AREAS AFFECTED: Ikeja, Ogba; Agege. Call us") == ["Ikeja", "Ogba", "Agege"]
    assert extract_areas("Area affected Lekki") == ["Lekki"]
    assert extract_areas("No areas listed") == []


def test_summarise_keeps_two_sentences():
    assert summarise("One. Two. Three.") == "One. Two"
    assert len(summarise("x" * 1000)) == 320


# --- RSS ---

def test_rss_parse_filters_and_maps(settings):
    adapter = RssFeedAdapter(_make_config("rss"), settings)
    items = adapter.parse(_FEED)

    assert len(items) == 1
    item = items[0]
    assert item["title"] == "AEDC announces planned maintenance in Wuse"
    assert item["official_url"] == "https://tribuneonlineng.com/aedc-maintenance-wuse/"
    assert item["affected_areas"] == ["Wuse 2", "Maitama", "Garki"]
    assert "<p>" not in item["summary"]
    assert item["source"] is OutageSource.AEDC

    candidate = RawCandidate.model_validate(item)
    assert candidate.published_at == datetime(2025, 6, 1, 7, 0, tzinfo=timezone.utc)
    assert candidate.confidence == 0.6


def test_rss_max_items(settings):
    adapter = RssFeedAdapter(_make_config("rss", keywords=[], max_items=1), settings)
    assert len(adapter.parse(_FEED)) == 1


def test_atom_iso_dates_reach_the_boundary_intact(settings):
    atom = """<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Ikeja Electric notices</title>
  <entry>
    <title>Planned outage in Ogba</title>
    <link href="https://example.ng/ogba"/>
    <id>tag:example.ng,2025:ogba</id>
    <updated>2025-03-04T10:00:00+01:00</updated>
    <summary>Maintenance on the Ogba feeder</summary>
  </entry>
</feed>
"""
    adapter = RssFeedAdapter(_make_config("rss", keywords=[]), settings)
    [item] = adapter.parse(atom)
    candidate = RawCandidate.model_validate(item)
    assert candidate.published_at == datetime(2025, 3, 4, 10, 0, tzinfo=CIVIL_TZ)


def test_rss_unreadable_feed_raises(settings):
    adapter = RssFeedAdapter(_make_config("rss"), settings)
    with pytest.raises(ValueError, match="unreadable feed"):
        adapter.parse("<<< definitely not xml")


@pytest.mark.asyncio
async def test_rss_fetch_over_http(settings):
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url == "https://example.ng/feed"
        return httpx.Response(200, text=_FEED)

    adapter = RssFeedAdapter(_make_config("rss"), settings)
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
        items = await adapter.fetch(client)
    assert [i["title"] for i in items] == ["AEDC announces planned maintenance in Wuse"]


@pytest.mark.asyncio
async def test_rss_fetch_http_error_raises(settings):
    adapter = RssFeedAdapter(_make_config("rss"), settings)
    transport = httpx.MockTransport(lambda request: httpx.Response(503))
    async with httpx.AsyncClient(transport=transport) as client:
        with pytest.raises(httpx.HTTPStatusError):
            await adapter.fetch(client)


# --- HTML listing ---

def test_listing_parse(settings):
    fetched_at = datetime(2025, 6, 3, 12, 0, tzinfo=timezone.utc)
    adapter = HtmlListingAdapter(_make_config("html"), settings)
    items = adapter.parse(_LISTING, fetched_at=fetched_at)

    titles = [i["title"] for i in items]
    assert titles == [
        "Planned maintenance on Kaduna-Kano 330kV line",
        "Tower collapse causes outage",
        "Transmission line fault notice",
    ]
    first, second, third = items
    assert first["official_url"] == "https://www.tcn.org.ng/2025/06/line-maintenance/"
    assert first["affected_areas"] == ["Zaria", "Kano"]
    assert "14 June 2025" in first["schedule_text"]

    published = [RawCandidate.model_validate(item).published_at for item in items]
    assert published == [
        datetime(2025, 6, 2, 10, 0, tzinfo=CIVIL_TZ),
        datetime(2025, 5, 28, 0, 0, tzinfo=CIVIL_TZ),
        fetched_at,
    ]


def test_listing_time_tag_with_small_day(settings):
    html = (
        '<article><h2><a href="/n/">Planned outage notice</a></h2>'
        '<time datetime="2025-03-04T10:00:00+01:00">4 March 2025</time></article>'
    )
    adapter = HtmlListingAdapter(_make_config("html"), settings)
    [item] = adapter.parse(html, fetched_at=datetime(2025, 3, 5, tzinfo=timezone.utc))
    candidate = RawCandidate.model_validate(item)
    assert candidate.published_at == datetime(2025, 3, 4, 10, 0, tzinfo=CIVIL_TZ)


def test_listing_nested_selectors_do_not_duplicate(settings):
    html = '<article><div class="post"><h2><a href="/a/">Outage notice</a></h2></div></article>'
    adapter = HtmlListingAdapter(_make_config("html", item_selector="article, .post"), settings)
    items = adapter.parse(html, fetched_at=datetime(2025, 6, 3, tzinfo=timezone.utc))
    assert len(items) == 1


@pytest.mark.asyncio
async def test_listing_fetch_over_http(settings):
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text=_LISTING))
    adapter = HtmlListingAdapter(_make_config("html", keywords=["collapse"]), settings)
    async with httpx.AsyncClient(transport=transport) as client:
        items = await adapter.fetch(client)
    assert [i["title"] for i in items] == ["Tower collapse causes outage"]
