"""Merge normalized events from every adapter into one payload.

Pure functions only: same input list, same output.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from ngpower.schemas.outage import OutageEvent, OutageSource, OutagesPayload


@dataclass(frozen=True)
class Aggregate:
    payload: OutagesPayload
    counts: dict[OutageSource, int]


def dedupe_by_id(events: Iterable[OutageEvent]) -> list[OutageEvent]:
    """First occurrence of each id wins; later duplicates are dropped unmerged."""
    seen: set[str] = set()
    unique = []
    for event in events:
        if event.id in seen:
            continue
        seen.add(event.id)
        unique.append(event)
    return unique


def sort_by_recency(events: list[OutageEvent]) -> list[OutageEvent]:
    # sorted() is stable with reverse=True, so ties keep input order
    return sorted(events, key=lambda e: e.published_at, reverse=True)


def count_by_source(events: Iterable[OutageEvent]) -> dict[OutageSource, int]:
    counts = {source: 0 for source in OutageSource}
    for event in events:
        counts[event.source] += 1
    return counts


def aggregate(events: Iterable[OutageEvent], generated_at: datetime) -> Aggregate:
    ordered = sort_by_recency(dedupe_by_id(events))
    payload = OutagesPayload(
        events=ordered,
        generated_at=generated_at,
        last_source_update=ordered[0].published_at if ordered else None,
    )
    return Aggregate(payload=payload, counts=count_by_source(ordered))
