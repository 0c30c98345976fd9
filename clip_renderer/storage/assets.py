"""Concurrent download of job input assets (artwork, audio).

WHY: The artwork and audio URLs point at arbitrary public hosts, not at
the Supabase project, so they must be fetched without our service-role
headers. They are independent, so there is no reason to wait for one
before starting the other.

HOW: One unauthenticated httpx.AsyncClient per batch; each URL is a GET,
and the batch runs under asyncio.gather so downloads overlap.

RULES:
- Results are returned in the same order as the URLs
- Any non-200 status or transport error raises AssetDownloadError
- The first failure cancels the batch; no partial results are returned
"""

from __future__ import annotations

import asyncio
from typing import List, Optional

import httpx


class AssetDownloadError(Exception):
    """Raised when an input asset cannot be downloaded."""

    def __init__(self, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to download {url}: {reason}")


async def fetch_asset(client: httpx.AsyncClient, url: str) -> bytes:
    """GET one asset and return its body."""
    try:
        resp = await client.get(url, follow_redirects=True)
    except httpx.HTTPError as exc:
        raise AssetDownloadError(url, str(exc)) from exc
    if resp.status_code != 200:
        raise AssetDownloadError(url, f"HTTP {resp.status_code}")
    return resp.content


async def fetch_assets(
    *urls: str,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> List[bytes]:
    """Download all ``urls`` concurrently, preserving order."""
    async with httpx.AsyncClient(
        timeout=httpx.Timeout(120.0, connect=30.0),
        transport=transport,
    ) as client:
        return list(await asyncio.gather(*(fetch_asset(client, url) for url in urls)))
