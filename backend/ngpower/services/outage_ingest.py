"""Outage ingestion: fan out to adapters → normalize → aggregate → validate → publish."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any

import httpx
from pydantic import ValidationError

from ngpower.config import Settings
from ngpower.schemas.ingest import (
    AdapterFailed,
    AdapterOutcome,
    AdapterSucceeded,
    AdapterTimedOut,
    RawCandidate,
    RunReport,
    SourceStats,
)
from ngpower.schemas.outage import CIVIL_TZ, OutageEvent, OutageSource
from ngpower.services import publisher
from ngpower.services.adapters import SourceAdapter
from ngpower.services.aggregator import Aggregate, aggregate
from ngpower.services.ingest_ledger import record_run
from ngpower.services.listing_client import HtmlListingAdapter
from ngpower.services.normalize import build_event
from ngpower.services.retention import filter_recent
from ngpower.services.rss_client import RssFeedAdapter
from ngpower.services.validator import PayloadValidationError, ensure_valid

logger = logging.getLogger(__name__)

_ADAPTER_KINDS = {
    "rss": RssFeedAdapter,
    "html": HtmlListingAdapter,
}


def build_adapters(settings: Settings) -> list[SourceAdapter]:
    return [_ADAPTER_KINDS[cfg.kind](cfg, settings) for cfg in settings.sources]


def _validate_candidates(adapter_name: str, raw_items: list[Any]) -> tuple[list[RawCandidate], int]:
    """Boundary check: only well-formed candidates reach normalization."""
    candidates = []
    rejected = 0
    for item in raw_items:
        try:
            candidates.append(RawCandidate.model_validate(item))
        except ValidationError as e:
            rejected += 1
            first = e.errors()[0]
            logger.warning(
                "[%s] rejected candidate (%s: %s)",
                adapter_name, ".".join(str(p) for p in first["loc"]), first["msg"],
            )
    return candidates, rejected


async def run_adapter(adapter: SourceAdapter, client: httpx.AsyncClient, timeout: float) -> AdapterOutcome:
    """Run one adapter under a timeout; never raises for adapter errors."""
    try:
        raw_items = await asyncio.wait_for(adapter.fetch(client), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning("Adapter %s timed out after %.0fs", adapter.name, timeout)
        return AdapterTimedOut(adapter=adapter.name, source=adapter.source, timeout_seconds=timeout)
    except Exception as e:
        logger.warning("Adapter %s failed: %s", adapter.name, e)
        return AdapterFailed(adapter=adapter.name, source=adapter.source, error=str(e) or type(e).__name__)

    candidates, rejected = _validate_candidates(adapter.name, raw_items or [])
    return AdapterSucceeded(adapter=adapter.name, source=adapter.source, candidates=candidates, rejected=rejected)


def _source_stats(outcomes: list[AdapterOutcome], result: Aggregate) -> list[SourceStats]:
    stats = {source: SourceStats(source=source) for source in OutageSource}
    for outcome in outcomes:
        entry = stats[outcome.source]
        if isinstance(outcome, AdapterSucceeded):
            entry.fetched += len(outcome.candidates) + outcome.rejected
            entry.rejected += outcome.rejected
        elif isinstance(outcome, AdapterTimedOut):
            entry.timed_out += 1
        else:
            entry.failed += 1

    for source, count in result.counts.items():
        stats[source].events = count
    # walk oldest to newest so each source ends on its latest event
    for event in reversed(result.payload.events):
        stats[event.source].last_published_at = event.published_at
    return list(stats.values())


def _errors_by_source(outcomes: list[AdapterOutcome]) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}
    for outcome in outcomes:
        if isinstance(outcome, AdapterFailed):
            errors.setdefault(outcome.source.value, []).append(f"{outcome.adapter}: {outcome.error}")
        elif isinstance(outcome, AdapterTimedOut):
            errors.setdefault(outcome.source.value, []).append(
                f"{outcome.adapter}: timed out after {outcome.timeout_seconds:.0f}s"
            )
    return errors


async def collect(settings: Settings, adapters: list[SourceAdapter]) -> list[AdapterOutcome]:
    """Run every adapter concurrently and wait for all of them."""
    async with httpx.AsyncClient(
        headers={"User-Agent": settings.user_agent},
        timeout=settings.http_timeout_seconds,
        follow_redirects=True,
    ) as client:
        return list(await asyncio.gather(
            *(run_adapter(a, client, settings.adapter_timeout_seconds) for a in adapters)
        ))


async def run_ingestion(
    settings: Settings,
    adapters: list[SourceAdapter] | None = None,
    now: datetime | None = None,
) -> RunReport:
    """One full ingestion cycle. Publishes only when the payload validates."""
    if adapters is None:
        adapters = build_adapters(settings)
    generated_at = (now or datetime.now(timezone.utc)).astimezone(CIVIL_TZ)
    logger.info("Starting outage ingest with %d adapters", len(adapters))

    outcomes = await collect(settings, adapters)

    events: list[OutageEvent] = [
        build_event(candidate)
        for outcome in outcomes
        if isinstance(outcome, AdapterSucceeded)
        for candidate in outcome.candidates
    ]
    events = filter_recent(events, generated_at, settings.max_event_age_days)
    result = aggregate(events, generated_at)

    report = RunReport(
        generated_at=generated_at,
        total_events=len(result.payload.events),
        sources=_source_stats(outcomes, result),
    )
    logger.info(
        "Adapters summary: %s",
        {s.source.value: s.events for s in report.sources if s.fetched or s.failed or s.timed_out},
    )
    failures = sum(s.failed + s.timed_out for s in report.sources)
    if failures:
        logger.warning("%d adapter(s) failed or timed out", failures)

    try:
        payload_json = ensure_valid(result.payload)
    except PayloadValidationError as e:
        logger.error("Validation failed with %d violation(s); publish skipped", len(e.violations))
        report = report.model_copy(update={"violations": e.violations})
    else:
        published = publisher.publish(
            payload_json,
            updated_at=generated_at,
            directory=settings.publish_dir,
            event_count=report.total_events,
        )
        report = report.model_copy(update={"published": True, "output_path": str(published.outages_path)})

    if settings.record_runs:
        record_run(report, settings.database_url, _errors_by_source(outcomes))
    return report
