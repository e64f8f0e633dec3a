"""``ngpower-ingest``: run one ingestion cycle and exit.

Exit status is 0 when the payload was published, 1 when validation blocked the
publish or the run died on an unexpected error.
"""

import asyncio
import logging
import sys

from ngpower.config import Settings
from ngpower.services.outage_ingest import run_ingestion

logger = logging.getLogger("ngpower.cli")


def main() -> int:
    settings = Settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        report = asyncio.run(run_ingestion(settings))
    except Exception:
        logger.exception("Ingest run failed")
        return 1

    if not report.published:
        logger.error("Publish aborted: %d schema violation(s)", len(report.violations))
        return 1
    logger.info("Published %d events to %s", report.total_events, report.output_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
