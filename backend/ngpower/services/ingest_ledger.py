"""Persists per-source run statistics to the ``ingest_runs`` table."""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from ngpower.database import get_session_factory, init_db
from ngpower.models.ingest_run import IngestRunRecord
from ngpower.schemas.ingest import RunReport

logger = logging.getLogger(__name__)


def record_run(report: RunReport, database_url: str, errors: dict[str, list[str]] | None = None):
    """Write one row per source. Failures are logged and never break the run."""
    errors = errors or {}
    try:
        init_db(database_url)
        db: Session = get_session_factory(database_url)()
    except Exception as e:
        logger.error("Failed to open run ledger: %s", e)
        return

    try:
        for stats in report.sources:
            db.add(IngestRunRecord(
                run_at=report.generated_at,
                source=stats.source.value,
                fetched=stats.fetched,
                rejected=stats.rejected,
                events=stats.events,
                failed=stats.failed,
                timed_out=stats.timed_out,
                errors="\n".join(errors.get(stats.source.value, [])) or None,
                published=report.published,
            ))
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error("Failed to persist run ledger: %s", e)
    finally:
        db.close()


def recent_runs(database_url: str, limit: int = 50) -> list[IngestRunRecord]:
    init_db(database_url)
    db: Session = get_session_factory(database_url)()
    try:
        stmt = select(IngestRunRecord).order_by(IngestRunRecord.id.desc()).limit(limit)
        return list(db.scalars(stmt))
    finally:
        db.close()
