from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings

from ngpower.schemas.ingest import SourceConfig
from ngpower.sources.definitions import DEFAULT_SOURCE_CONFIGS


class Settings(BaseSettings):
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "NGPOWER_",
        "frozen": True,
    }

    # Published artifact location (outages.json + version.json)
    publish_dir: str = Field(default="public/live")

    # Sources (JSON list in NGPOWER_SOURCES)
    sources: list[SourceConfig] = Field(default_factory=lambda: list(DEFAULT_SOURCE_CONFIGS))

    # Outbound HTTP
    user_agent: str = Field(default="NaijaInfo-Ingest/1.0 (+https://ng-power-exams.local)")
    http_timeout_seconds: float = Field(default=20.0)
    fetch_attempts: int = Field(default=2, ge=1)
    fetch_retry_delay_seconds: float = Field(default=1.5, ge=0.0)

    # Per-adapter wall clock budget; a slower adapter counts as zero events
    adapter_timeout_seconds: float = Field(default=60.0, gt=0.0)

    # Events older than this are dropped unless their planned window is still ahead.
    # 0 disables the filter.
    max_event_age_days: int = Field(default=30)

    # Run ledger
    database_url: str = Field(default="sqlite:///./ngpower.db")
    record_runs: bool = Field(default=True)

    # Scheduler (serve mode only)
    scheduler_enabled: bool = Field(default=True)
    ingest_interval_minutes: int = Field(default=30)

    log_level: str = Field(default="INFO")

    # CORS
    cors_origins: str = Field(default="http://localhost:5173,http://localhost:3000")

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",")]


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings, built once on first use."""
    return Settings()
