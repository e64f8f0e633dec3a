from datetime import datetime
from typing import Annotated, Literal, Union

from dateutil import parser as dtparser
from pydantic import AwareDatetime, BaseModel, Field, field_validator

from ngpower.schemas.outage import (
    CIVIL_TZ,
    OutageSource,
    OutageStatus,
    VerifiedBy,
    WireModel,
)


def _parse_timestamp(value: str) -> datetime:
    text = value.strip()
    try:
        return dtparser.isoparse(text)
    except (ValueError, OverflowError):
        pass
    try:
        return dtparser.parse(text, dayfirst=True)
    except (ValueError, OverflowError) as e:
        raise ValueError(f"unparseable timestamp {value!r}") from e


class SourceConfig(BaseModel):
    """One configured feed or listing page."""

    name: str  # stable adapter key, e.g. "tcn-public-notice"
    kind: Literal["rss", "html"]
    source: OutageSource
    source_name: str
    url: str
    verified_by: VerifiedBy = VerifiedBy.UNKNOWN
    keywords: list[str] = []  # empty = accept every item
    item_selector: str = "article"  # html only
    status: OutageStatus | None = None  # None = classify from text
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)
    max_items: int = 50


class RawCandidate(BaseModel):
    """What an adapter hands to the pipeline, before normalization."""

    model_config = {"str_strip_whitespace": True}

    source: OutageSource
    source_name: str
    title: str = Field(min_length=1)
    summary: str | None = None
    published_at: AwareDatetime
    schedule_text: str | None = None
    status: OutageStatus | None = None
    affected_areas: list[str] = []
    verified_by: VerifiedBy = VerifiedBy.UNKNOWN
    official_url: str | None = None
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)
    id: str | None = None

    @field_validator("published_at", mode="before")
    @classmethod
    def _parse_published_at(cls, value):
        # Sources publish everything from ISO 8601 and RFC 822 to "12/05/2025 10:30".
        # ISO is tried first so dayfirst never swaps its month and day.
        # Naive values are Lagos wall-clock time.
        if isinstance(value, str):
            value = _parse_timestamp(value)
        if isinstance(value, datetime) and value.tzinfo is None:
            value = value.replace(tzinfo=CIVIL_TZ)
        return value


class AdapterSucceeded(BaseModel):
    kind: Literal["succeeded"] = "succeeded"
    adapter: str
    source: OutageSource
    candidates: list[RawCandidate] = []
    rejected: int = 0


class AdapterFailed(BaseModel):
    kind: Literal["failed"] = "failed"
    adapter: str
    source: OutageSource
    error: str


class AdapterTimedOut(BaseModel):
    kind: Literal["timed_out"] = "timed_out"
    adapter: str
    source: OutageSource
    timeout_seconds: float


AdapterOutcome = Annotated[
    Union[AdapterSucceeded, AdapterFailed, AdapterTimedOut],
    Field(discriminator="kind"),
]


class SchemaViolation(WireModel):
    path: str  # dotted, e.g. "events.3.plannedWindow.end"
    reason: str


class SourceStats(WireModel):
    source: OutageSource
    fetched: int = 0  # raw candidates returned by adapters
    rejected: int = 0  # candidates that failed boundary validation
    events: int = 0  # surviving events after dedup
    failed: int = 0
    timed_out: int = 0
    last_published_at: AwareDatetime | None = None


class RunReport(WireModel):
    generated_at: AwareDatetime
    published: bool = False
    total_events: int = 0
    sources: list[SourceStats] = []
    violations: list[SchemaViolation] = []
    output_path: str | None = None


class IngestRunRow(WireModel):
    """Read model for one ``ingest_runs`` ledger row."""

    model_config = {"from_attributes": True}

    id: int
    run_at: datetime
    source: OutageSource
    fetched: int = 0
    rejected: int = 0
    events: int = 0
    failed: int = 0
    timed_out: int = 0
    errors: str | None = None
    published: bool = False
