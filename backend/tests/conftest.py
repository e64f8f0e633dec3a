import pytest

from ngpower.config import Settings


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Isolated settings: no configured sources, artifacts and ledger under tmp_path."""
    return Settings(
        _env_file=None,
        publish_dir=str(tmp_path / "live"),
        database_url=f"sqlite:///{tmp_path / 'ledger.db'}",
        sources=[],
        record_runs=False,
        scheduler_enabled=False,
        adapter_timeout_seconds=0.5,
        fetch_retry_delay_seconds=0.0,
        max_event_age_days=0,
    )
