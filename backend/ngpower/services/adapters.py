"""Shared adapter contract and text helpers.

An adapter fetches one configured source and returns raw candidate records
(plain dicts or ``RawCandidate``). It raises on failure; the pipeline turns
exceptions and timeouts into per-source failure counts.
"""

import re
from typing import Any, Protocol

import httpx

from ngpower.schemas.ingest import RawCandidate
from ngpower.schemas.outage import OutageSource

_AREAS_PATTERN = re.compile(r"AREAS?\s+AFFECTED\s*:?\s*([^\n.]+)", re.IGNORECASE)


class SourceAdapter(Protocol):
    name: str
    source: OutageSource

    async def fetch(self, client: httpx.AsyncClient) -> list[dict[str, Any] | RawCandidate]:
        ...


def matches_keywords(text: str, keywords: list[str]) -> bool:
    if not keywords:
        return True
    haystack = text.lower()
    return any(k.lower() in haystack for k in keywords)


def extract_areas(text: str) -> list[str]:
    """``"... AREAS AFFECTED: Ikeja, Ogba; Agege"`` → ``["Ikeja", "Ogba", "Agege"]``."""
    match = _AREAS_PATTERN.search(text)
    if not match:
        return []
    return [part.strip() for part in re.split(r"[,;]+", match.group(1)) if part.strip()]


def summarise(text: str, limit: int = 320) -> str:
    """First two sentences, capped at ``limit`` characters."""
    return ". ".join(text.split(". ")[:2])[:limit]
