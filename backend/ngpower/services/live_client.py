"""Consumer-side loader for the published artifact.

Mirrors what the site does when polling ``/live/outages.json``: cache-busting
query, no HTTP caching, a 404 means "not published yet" and any other failure
is retried once before falling back to the last-known-good payload.
"""

import logging
import time

import httpx

from ngpower.schemas.outage import OutagesPayload
from ngpower.services.fetch import fetch_with_retries

logger = logging.getLogger(__name__)


async def load_live_payload(
    client: httpx.AsyncClient,
    url: str,
    fallback: OutagesPayload,
    attempts: int = 2,
    delay: float = 1.5,
) -> OutagesPayload:
    async def _get() -> OutagesPayload:
        resp = await client.get(
            url,
            params={"v": int(time.time() * 1000)},
            headers={"Cache-Control": "no-store"},
        )
        resp.raise_for_status()
        return OutagesPayload.model_validate_json(resp.content)

    return await fetch_with_retries(
        _get,
        attempts=attempts,
        delay=delay,
        fallback=fallback.model_copy(deep=True),
        label=f"live payload {url}",
    )
