"""APScheduler setup for periodic outage ingestion in serve mode."""

import asyncio
import logging
from typing import Callable

from apscheduler.schedulers.background import BackgroundScheduler

from ngpower.config import Settings
from ngpower.schemas.ingest import RunReport

logger = logging.getLogger(__name__)


def _run_outage_ingest(settings: Settings, on_report: Callable[[RunReport], None] | None = None):
    from ngpower.services.outage_ingest import run_ingestion
    loop = asyncio.new_event_loop()
    try:
        report = loop.run_until_complete(run_ingestion(settings))
        if not report.published:
            logger.error("Scheduled ingest did not publish: %d violation(s)", len(report.violations))
        if on_report is not None:
            on_report(report)
    except Exception as e:
        logger.error("Outage ingest job failed: %s", e)
    finally:
        loop.close()


def start_scheduler(
    settings: Settings,
    on_report: Callable[[RunReport], None] | None = None,
) -> BackgroundScheduler:
    scheduler = BackgroundScheduler()
    scheduler.add_job(
        _run_outage_ingest,
        "interval",
        minutes=settings.ingest_interval_minutes,
        args=[settings, on_report],
        id="outage_ingest",
        name="Outage data ingestion",
        max_instances=1,
    )
    scheduler.start()
    logger.info("Scheduler started: outages every %d min", settings.ingest_interval_minutes)
    return scheduler


def stop_scheduler(scheduler: BackgroundScheduler | None):
    if scheduler:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
