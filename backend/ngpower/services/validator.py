"""Schema gate in front of the publisher.

The payload is checked in its serialized JSON form, exactly as the front end
will read it: required fields, enum values, RFC 3339 date-times, no unknown
keys. Cross-field invariants are checked on top of that. Any violation blocks
the publish; callers get the complete list, not just the first problem.
"""

import logging

from pydantic import ValidationError

from ngpower.schemas.ingest import SchemaViolation
from ngpower.schemas.outage import CIVIL_TZ_NAME, OutageStatus, OutagesPayload

logger = logging.getLogger(__name__)


class PayloadValidationError(Exception):
    def __init__(self, violations: list[SchemaViolation]):
        self.violations = violations
        super().__init__(f"Payload failed validation with {len(violations)} violation(s)")


def _path(loc: tuple) -> str:
    return ".".join(str(part) for part in loc) or "$"


def _check_invariants(payload: OutagesPayload) -> list[SchemaViolation]:
    violations = []
    first_seen: dict[str, int] = {}

    for i, event in enumerate(payload.events):
        if event.id in first_seen:
            violations.append(SchemaViolation(
                path=f"events.{i}.id",
                reason=f"duplicate id {event.id!r} (first at events.{first_seen[event.id]})",
            ))
        else:
            first_seen[event.id] = i

        window = event.planned_window
        if window is None:
            continue
        if event.status is not OutageStatus.PLANNED:
            violations.append(SchemaViolation(
                path=f"events.{i}.plannedWindow",
                reason=f"planned window on a {event.status.value} event",
            ))
        if window.timezone != CIVIL_TZ_NAME:
            violations.append(SchemaViolation(
                path=f"events.{i}.plannedWindow.timezone",
                reason=f"expected {CIVIL_TZ_NAME!r}, got {window.timezone!r}",
            ))
        if window.end is not None and window.end < window.start:
            violations.append(SchemaViolation(
                path=f"events.{i}.plannedWindow.end",
                reason="end is before start",
            ))

    expected_latest = max((e.published_at for e in payload.events), default=None)
    if payload.last_source_update != expected_latest:
        violations.append(SchemaViolation(
            path="lastSourceUpdate",
            reason=f"expected {expected_latest.isoformat() if expected_latest else None}",
        ))
    return violations


def validate_payload_json(payload_json: str | bytes) -> list[SchemaViolation]:
    """Return every violation found in a serialized payload (empty list = valid)."""
    try:
        payload = OutagesPayload.model_validate_json(payload_json, strict=True)
    except ValidationError as e:
        return [SchemaViolation(path=_path(err["loc"]), reason=err["msg"]) for err in e.errors()]
    return _check_invariants(payload)


def serialize_payload(payload: OutagesPayload) -> str:
    return payload.model_dump_json(by_alias=True, indent=2)


def ensure_valid(payload: OutagesPayload) -> str:
    """Serialize and validate; return the JSON text to publish or raise."""
    payload_json = serialize_payload(payload)
    violations = validate_payload_json(payload_json)
    if violations:
        for v in violations:
            logger.error("Schema violation at %s: %s", v.path, v.reason)
        raise PayloadValidationError(violations)
    return payload_json
