"""Drop stale events before aggregation."""

import logging
from datetime import datetime, timedelta

from ngpower.schemas.outage import OutageEvent, OutageStatus

logger = logging.getLogger(__name__)


def filter_recent(events: list[OutageEvent], now: datetime, max_age_days: int) -> list[OutageEvent]:
    """Keep events published within ``max_age_days`` plus planned work that has not started yet."""
    if max_age_days <= 0:
        return list(events)

    cutoff = now - timedelta(days=max_age_days)
    kept = []
    for event in events:
        if event.published_at >= cutoff:
            kept.append(event)
            continue
        window = event.planned_window
        if event.status is OutageStatus.PLANNED and window is not None and window.start >= now:
            logger.debug("Keeping future planned outage: %s", event.title[:60])
            kept.append(event)
            continue
        logger.debug("Removing old item (%s): %s", event.published_at.date(), event.title[:60])

    if len(kept) < len(events):
        logger.info("Retention: dropped %d events older than %d days", len(events) - len(kept), max_age_days)
    return kept
