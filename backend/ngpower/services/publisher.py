"""Writes the published artifact and its version marker.

Files are written to a temporary sibling and swapped in with ``os.replace`` so a
poller never reads a half-written file.
"""

import logging
import os
import tempfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from ngpower.schemas.outage import VersionMarker

logger = logging.getLogger(__name__)

OUTAGES_FILENAME = "outages.json"
VERSION_FILENAME = "version.json"


@dataclass(frozen=True)
class PublishResult:
    outages_path: Path
    version_path: Path
    event_count: int


def _atomic_write(path: Path, content: str):
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        # leave the previous artifact untouched
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise


def publish(payload_json: str, updated_at: datetime, directory: str | Path, event_count: int) -> PublishResult:
    """Publish an already-validated payload.

    Each file is replaced atomically on its own; the pair is not. ``outages.json``
    goes first, so a failure writing ``version.json`` leaves the new payload live
    behind a stale marker.
    """
    out_dir = Path(directory)
    out_dir.mkdir(parents=True, exist_ok=True)

    if event_count == 0:
        logger.warning("No data from adapters, writing empty %s", OUTAGES_FILENAME)

    outages_path = out_dir / OUTAGES_FILENAME
    version_path = out_dir / VERSION_FILENAME
    _atomic_write(outages_path, payload_json)
    marker = VersionMarker(updated_at=updated_at)
    _atomic_write(version_path, marker.model_dump_json(by_alias=True, indent=2))

    logger.info("Generated %d outages @ %s -> %s", event_count, updated_at.isoformat(), outages_path)
    return PublishResult(outages_path=outages_path, version_path=version_path, event_count=event_count)
