from dataclasses import dataclass

from ngpower.schemas.ingest import SourceConfig
from ngpower.schemas.outage import OutageSource, VerifiedBy


@dataclass(frozen=True)
class SourceDefinition:
    source: OutageSource
    name: str
    verified_by: VerifiedBy
    region: str  # coverage, informational only


# Known origins. Per-source stats are reported for every entry, even with zero events.
ALL_SOURCES = [
    SourceDefinition(
        source=OutageSource.TCN,
        name="Transmission Company of Nigeria",
        verified_by=VerifiedBy.TCN,
        region="National grid",
    ),
    SourceDefinition(
        source=OutageSource.EKEDC,
        name="Eko Electricity Distribution Company",
        verified_by=VerifiedBy.DISCO,
        region="Lagos (Eko)",
    ),
    SourceDefinition(
        source=OutageSource.IKEJA,
        name="Ikeja Electric",
        verified_by=VerifiedBy.DISCO,
        region="Lagos (Ikeja)",
    ),
    SourceDefinition(
        source=OutageSource.KADUNA,
        name="Kaduna Electric",
        verified_by=VerifiedBy.DISCO,
        region="Kaduna, Kebbi, Sokoto, Zamfara",
    ),
    SourceDefinition(
        source=OutageSource.JED,
        name="Jos Electricity Distribution",
        verified_by=VerifiedBy.DISCO,
        region="Plateau, Bauchi, Benue, Gombe",
    ),
    SourceDefinition(
        source=OutageSource.AEDC,
        name="Abuja Electricity Distribution Company",
        verified_by=VerifiedBy.DISCO,
        region="FCT, Kogi, Niger, Nasarawa",
    ),
    SourceDefinition(
        source=OutageSource.IBEDC,
        name="Ibadan Electricity Distribution Company",
        verified_by=VerifiedBy.DISCO,
        region="Oyo, Ogun, Osun, Kwara",
    ),
    SourceDefinition(
        source=OutageSource.NERC,
        name="Nigerian Electricity Regulatory Commission",
        verified_by=VerifiedBy.UNKNOWN,
        region="National",
    ),
    SourceDefinition(
        source=OutageSource.MEDIA,
        name="Nigerian media",
        verified_by=VerifiedBy.MEDIA,
        region="National",
    ),
    SourceDefinition(
        source=OutageSource.OTHER,
        name="Other",
        verified_by=VerifiedBy.UNKNOWN,
        region="",
    ),
]

_SOURCE_INDEX = {s.source: s for s in ALL_SOURCES}

_POWER_KEYWORDS = [
    "outage", "maintenance", "fault", "shutdown", "transmission", "blackout",
    "collapse", "restoration", "restored", "load shedding", "feeder", "tcn", "disco",
]


DEFAULT_SOURCE_CONFIGS = [
    SourceConfig(
        name="tcn-latest-news",
        kind="html",
        source=OutageSource.TCN,
        source_name="Transmission Company of Nigeria",
        url="https://www.tcn.org.ng/category/latest-news/",
        verified_by=VerifiedBy.TCN,
        keywords=_POWER_KEYWORDS + ["tower", "132kv", "330kv", "upgrade", "line"],
        item_selector="article, .post, .td_module_wrap, .blog-post",
        confidence=0.9,
    ),
    SourceConfig(
        name="tcn-public-notice",
        kind="html",
        source=OutageSource.TCN,
        source_name="Transmission Company of Nigeria",
        url="https://www.tcn.org.ng/category/public-notice/",
        verified_by=VerifiedBy.TCN,
        keywords=_POWER_KEYWORDS + ["tower", "132kv", "330kv", "upgrade", "line"],
        item_selector="article, .post, .td_module_wrap, .blog-post",
        confidence=0.9,
    ),
    SourceConfig(
        name="kaduna-outage-information",
        kind="html",
        source=OutageSource.KADUNA,
        source_name="Kaduna Electric",
        url="https://kadunaelectric.com/category/outage-information/",
        verified_by=VerifiedBy.DISCO,
        item_selector="article",
        confidence=0.85,
    ),
    SourceConfig(
        name="tribune-feed",
        kind="rss",
        source=OutageSource.AEDC,
        source_name="Abuja Electricity Distribution Company (media relay)",
        url="https://tribuneonlineng.com/feed",
        verified_by=VerifiedBy.MEDIA,
        keywords=["aedc", "abuja", "power outage", "load shedding", "transmission", "tcn", "maintenance"],
        confidence=0.5,
    ),
    SourceConfig(
        name="premium-times-feed",
        kind="rss",
        source=OutageSource.MEDIA,
        source_name="Premium Times",
        url="https://www.premiumtimesng.com/feed",
        verified_by=VerifiedBy.MEDIA,
        keywords=_POWER_KEYWORDS,
        confidence=0.4,
    ),
    SourceConfig(
        name="guardian-feed",
        kind="rss",
        source=OutageSource.MEDIA,
        source_name="The Guardian Nigeria",
        url="https://guardian.ng/feed/",
        verified_by=VerifiedBy.MEDIA,
        keywords=_POWER_KEYWORDS,
        confidence=0.4,
    ),
]


def get_source(source: OutageSource) -> SourceDefinition | None:
    return _SOURCE_INDEX.get(source)
