from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ngpower.config import get_settings
from ngpower.database import init_db
from ngpower.schemas.ingest import RunReport


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    app.state.last_report = None
    if settings.record_runs:
        init_db(settings.database_url)
    scheduler = None
    if settings.scheduler_enabled:
        from ngpower.tasks.scheduler import start_scheduler

        def _keep_report(report: RunReport):
            app.state.last_report = report

        scheduler = start_scheduler(settings, on_report=_keep_report)
    yield
    if scheduler is not None:
        from ngpower.tasks.scheduler import stop_scheduler
        stop_scheduler(scheduler)


app = FastAPI(
    title="ngpower",
    description="Power-outage ingestion and live feed for Nigeria",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

from ngpower.routers import ingest, live  # noqa: E402

app.include_router(live.router)
app.include_router(ingest.router, prefix="/api/v1")


@app.get("/health")
async def health():
    return {"status": "ok"}
