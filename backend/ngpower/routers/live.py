from pathlib import Path

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse

from ngpower.config import Settings, get_settings
from ngpower.services.publisher import OUTAGES_FILENAME, VERSION_FILENAME

router = APIRouter(tags=["live"])

_NO_STORE = {"Cache-Control": "no-store"}


def _published_file(settings: Settings, filename: str) -> FileResponse:
    path = Path(settings.publish_dir) / filename
    if not path.is_file():
        raise HTTPException(status_code=404, detail=f"{filename} has not been published yet")
    return FileResponse(path, media_type="application/json", headers=_NO_STORE)


@router.get("/live/outages.json")
async def live_outages(settings: Settings = Depends(get_settings)):
    """The last published outages payload."""
    return _published_file(settings, OUTAGES_FILENAME)


@router.get("/live/version.json")
async def live_version(settings: Settings = Depends(get_settings)):
    return _published_file(settings, VERSION_FILENAME)
