from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from ngpower.config import Settings, get_settings
from ngpower.schemas.ingest import IngestRunRow, RunReport
from ngpower.services.ingest_ledger import recent_runs
from ngpower.services.outage_ingest import run_ingestion

router = APIRouter(tags=["ingest"])


@router.get("/ingest/last-run", response_model=RunReport)
async def last_run(request: Request):
    """Report of the most recent ingestion cycle in this process."""
    report = getattr(request.app.state, "last_report", None)
    if report is None:
        raise HTTPException(status_code=404, detail="No ingestion run yet")
    return report


@router.get("/ingest/runs", response_model=list[IngestRunRow])
async def list_runs(
    limit: int = Query(50, ge=1, le=500),
    settings: Settings = Depends(get_settings),
):
    """Per-source ledger rows, newest first."""
    return [IngestRunRow.model_validate(row) for row in recent_runs(settings.database_url, limit)]


@router.post("/admin/ingest", response_model=RunReport)
async def trigger_ingest(request: Request, settings: Settings = Depends(get_settings)):
    """Run one ingestion cycle now."""
    report = await run_ingestion(settings)
    request.app.state.last_report = report
    if not report.published:
        return JSONResponse(status_code=422, content=report.model_dump(mode="json", by_alias=True))
    return report
