"""Bounded-retry fetching shared by adapters and the live payload client."""

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

import httpx

from ngpower.config import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

_RAISE = object()

ACCEPT_HTML = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"


def _is_not_found(error: Exception) -> bool:
    return isinstance(error, httpx.HTTPStatusError) and error.response.status_code == 404


async def fetch_with_retries(
    fetch: Callable[[], Awaitable[T]],
    *,
    attempts: int = 2,
    delay: float = 1.5,
    fallback=_RAISE,
    label: str = "fetch",
) -> T:
    """Call ``fetch`` up to ``attempts`` times, sleeping ``delay`` seconds between tries.

    A 404 is final and is not retried. When every attempt fails, ``fallback`` is
    returned if one was given, otherwise the last error is re-raised.
    """
    last_error: Exception | None = None
    for attempt in range(1, max(attempts, 1) + 1):
        try:
            return await fetch()
        except Exception as e:
            last_error = e
            if _is_not_found(e):
                logger.warning("%s: not found (%s)", label, e)
                break
            if attempt < attempts:
                logger.info("%s: attempt %d/%d failed (%s), retrying in %.1fs", label, attempt, attempts, e, delay)
                await asyncio.sleep(delay)

    if fallback is not _RAISE:
        logger.warning("%s: giving up, using fallback (%s)", label, last_error)
        return fallback
    raise last_error


async def fetch_text(client: httpx.AsyncClient, url: str, settings: Settings) -> str:
    """GET ``url`` as text with the configured retry policy; raises when it never succeeds."""

    async def _get() -> str:
        resp = await client.get(url, headers={"Accept": ACCEPT_HTML})
        resp.raise_for_status()
        return resp.text

    return await fetch_with_retries(
        _get,
        attempts=settings.fetch_attempts,
        delay=settings.fetch_retry_delay_seconds,
        label=url,
    )
