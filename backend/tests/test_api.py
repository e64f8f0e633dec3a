import pytest
from httpx import ASGITransport, AsyncClient

from ngpower.config import get_settings
from ngpower.main import app


@pytest.fixture
async def client(settings):
    app.dependency_overrides[get_settings] = lambda: settings
    app.state.last_report = None
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def recording_settings(settings):
    return settings.model_copy(update={"record_runs": True})


@pytest.mark.asyncio
async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_live_files_404_before_first_publish(client):
    resp = await client.get("/live/outages.json")
    assert resp.status_code == 404
    resp = await client.get("/live/version.json")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_last_run_404_before_any_run(client):
    resp = await client.get("/api/v1/ingest/last-run")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_trigger_ingest_then_serve(client):
    resp = await client.post("/api/v1/admin/ingest")
    assert resp.status_code == 200
    report = resp.json()
    assert report["published"] is True
    assert report["totalEvents"] == 0
    assert len(report["sources"]) == 10

    resp = await client.get("/live/outages.json")
    assert resp.status_code == 200
    assert resp.headers["cache-control"] == "no-store"
    data = resp.json()
    assert data["events"] == []
    assert data["lastSourceUpdate"] is None

    resp = await client.get("/live/version.json")
    assert resp.status_code == 200
    assert resp.json()["updatedAt"] == data["generatedAt"]

    resp = await client.get("/api/v1/ingest/last-run")
    assert resp.status_code == 200
    assert resp.json()["generatedAt"] == report["generatedAt"]


@pytest.mark.asyncio
async def test_runs_ledger_endpoint(client, recording_settings):
    app.dependency_overrides[get_settings] = lambda: recording_settings
    await client.post("/api/v1/admin/ingest")

    resp = await client.get("/api/v1/ingest/runs", params={"limit": 3})
    assert resp.status_code == 200
    rows = resp.json()
    assert len(rows) == 3
    assert all(r["published"] for r in rows)
    assert {"runAt", "timedOut", "fetched"} <= set(rows[0])


@pytest.mark.asyncio
async def test_runs_limit_is_bounded(client):
    resp = await client.get("/api/v1/ingest/runs", params={"limit": 0})
    assert resp.status_code == 422
