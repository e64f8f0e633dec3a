"""Turn validated adapter candidates into publishable outage events."""

import hashlib
import logging
import re
from datetime import timezone

from ngpower.schemas.ingest import RawCandidate
from ngpower.schemas.outage import CIVIL_TZ, OutageEvent, OutageStatus
from ngpower.services.temporal import normalize_schedule
from ngpower.sources.definitions import get_source

logger = logging.getLogger(__name__)

_RESTORED_PATTERN = re.compile(r"\b(restore|restored|restoration)\b", re.IGNORECASE)
_PLANNED_PATTERN = re.compile(r"\b(planned|maintenance|upgrade|preventive|scheduled)\b", re.IGNORECASE)


def collapse_whitespace(text: str | None) -> str | None:
    if text is None:
        return None
    collapsed = " ".join(text.split())
    return collapsed or None


def unique_areas(areas: list[str]) -> list[str]:
    """Drop blanks and case-insensitive repeats, keeping first-seen order."""
    seen: set[str] = set()
    result = []
    for area in areas:
        cleaned = collapse_whitespace(area)
        if not cleaned or cleaned.lower() in seen:
            continue
        seen.add(cleaned.lower())
        result.append(cleaned)
    return result


def classify_status(title: str, body: str | None = None) -> OutageStatus:
    haystack = f"{title} {body or ''}"
    if _RESTORED_PATTERN.search(haystack):
        return OutageStatus.RESTORED
    if _PLANNED_PATTERN.search(haystack):
        return OutageStatus.PLANNED
    return OutageStatus.UNPLANNED


def make_event_id(source: str, title: str, published_at_iso: str) -> str:
    key = "|".join([source, title, published_at_iso])
    return hashlib.sha1(key.encode("utf-8")).hexdigest()[:12]


def _default_source_name(candidate: RawCandidate) -> str:
    definition = get_source(candidate.source)
    return definition.name if definition else candidate.source.value


def build_event(candidate: RawCandidate) -> OutageEvent:
    title = collapse_whitespace(candidate.title) or candidate.title
    summary = collapse_whitespace(candidate.summary)
    published_at = candidate.published_at.astimezone(CIVIL_TZ)
    status = candidate.status or classify_status(title, summary)

    planned_window = None
    if status is OutageStatus.PLANNED:
        schedule_text = candidate.schedule_text or f"{title} {summary or ''}"
        planned_window = normalize_schedule(schedule_text, reference=published_at)

    event_id = candidate.id or make_event_id(
        candidate.source.value,
        title,
        published_at.astimezone(timezone.utc).isoformat(),
    )

    return OutageEvent(
        id=event_id,
        source=candidate.source,
        source_name=collapse_whitespace(candidate.source_name) or _default_source_name(candidate),
        title=title,
        summary=summary,
        published_at=published_at,
        status=status,
        planned_window=planned_window,
        affected_areas=unique_areas(candidate.affected_areas),
        verified_by=candidate.verified_by,
        official_url=candidate.official_url,
        confidence=candidate.confidence,
    )
