from enum import Enum
from zoneinfo import ZoneInfo

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

CIVIL_TZ_NAME = "Africa/Lagos"
CIVIL_TZ = ZoneInfo(CIVIL_TZ_NAME)


class OutageSource(str, Enum):
    TCN = "TCN"
    EKEDC = "EKEDC"
    IKEJA = "IKEJA"
    KADUNA = "KADUNA"
    JED = "JED"
    AEDC = "AEDC"
    IBEDC = "IBEDC"
    NERC = "NERC"
    MEDIA = "MEDIA"
    OTHER = "OTHER"


class OutageStatus(str, Enum):
    PLANNED = "PLANNED"
    UNPLANNED = "UNPLANNED"
    RESTORED = "RESTORED"


class VerifiedBy(str, Enum):
    DISCO = "DISCO"
    TCN = "TCN"
    MEDIA = "MEDIA"
    UNKNOWN = "UNKNOWN"


class WireModel(BaseModel):
    """Base for everything the front end reads: camelCase keys, no unknown fields."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class PlannedWindow(WireModel):
    start: AwareDatetime
    end: AwareDatetime | None = None  # open-ended maintenance
    timezone: str = CIVIL_TZ_NAME


class OutageEvent(WireModel):
    id: str = Field(min_length=1)
    source: OutageSource
    source_name: str
    title: str = Field(min_length=1)
    summary: str | None = None
    published_at: AwareDatetime
    status: OutageStatus
    planned_window: PlannedWindow | None = None
    affected_areas: list[str] = []
    verified_by: VerifiedBy = VerifiedBy.UNKNOWN
    official_url: str | None = None
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)


class OutagesPayload(WireModel):
    events: list[OutageEvent]
    generated_at: AwareDatetime
    last_source_update: AwareDatetime | None


class VersionMarker(WireModel):
    updated_at: AwareDatetime
