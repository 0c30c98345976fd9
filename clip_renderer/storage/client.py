"""Async HTTP client for the Supabase REST and Storage APIs.

WHY: Job records live in a Supabase Postgres table and finished clips go
to a Supabase Storage bucket. The renderer needs exactly three things
from the platform: patch a row, upload an object, and know the object's
public URL. This module wraps those behind a single client class so
callers (pipeline, tests) don't need to know HTTP details.

HOW: Uses httpx.AsyncClient against the project URL with the
service-role key sent as both ``apikey`` and Bearer token. The client is
an async context manager; enter it to open the connection pool, exit to
close it.

RULES:
- Always use the async context manager (async with SupabaseClient() as client:)
- Credentials default to load_supabase_credentials() from .env
- Row filters use PostgREST ``eq.`` syntax
- Non-2xx responses raise SupabaseAPIError with the status and body
- public_url() is pure string building; it never hits the network
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote

import httpx

from clip_renderer.config import load_supabase_credentials


class SupabaseAPIError(Exception):
    """Raised when Supabase returns an error response.

    RULES:
    - Always include status_code and message
    - message is the response body text or a summary
    """

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"Supabase API error {status_code}: {message}")


class SupabaseClient:
    """Async client for the subset of Supabase the renderer uses.

    RULES:
    - Use as: async with SupabaseClient() as client: ...
    - url/service_role_key default to load_supabase_credentials()
    - transport is injectable for tests (httpx.MockTransport)
    """

    def __init__(
        self,
        url: Optional[str] = None,
        service_role_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if url is None or service_role_key is None:
            default_url, default_key = load_supabase_credentials()
            url = url or default_url
            service_role_key = service_role_key or default_key
        self._base_url = url.rstrip("/")
        self._key = service_role_key
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> SupabaseClient:
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers={
                "apikey": self._key,
                "Authorization": f"Bearer {self._key}",
            },
            timeout=httpx.Timeout(120.0, connect=30.0),
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        if self._client:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> httpx.AsyncClient:
        """Return the active httpx client, raising if not in context manager."""
        if self._client is None:
            raise RuntimeError(
                "SupabaseClient must be used as an async context manager: "
                "async with SupabaseClient() as client: ..."
            )
        return self._client

    # ------------------------------------------------------------------
    # Database (PostgREST)
    # ------------------------------------------------------------------

    async def update_rows(
        self,
        table: str,
        match: Mapping[str, Any],
        values: Dict[str, Any],
    ) -> None:
        """PATCH every row of ``table`` matching all ``match`` columns.

        Args:
            table: Table name, e.g. ``"video_jobs"``.
            match: Column → value equality filters.
            values: Columns to set.
        """
        client = self._ensure_client()
        params = {column: f"eq.{value}" for column, value in match.items()}
        resp = await client.patch(
            f"/rest/v1/{table}",
            params=params,
            json=values,
            headers={"Prefer": "return=minimal"},
        )
        if resp.status_code not in (200, 204):
            raise SupabaseAPIError(resp.status_code, resp.text)

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    async def upload_object(
        self,
        bucket: str,
        path: str,
        data: bytes,
        content_type: str,
        upsert: bool = False,
    ) -> str:
        """Upload ``data`` to ``bucket/path`` and return the storage key.

        Raises:
            SupabaseAPIError: On non-2xx responses (e.g. 409 when the
                object exists and upsert is False).
        """
        client = self._ensure_client()
        resp = await client.post(
            f"/storage/v1/object/{bucket}/{quote(path)}",
            content=data,
            headers={
                "Content-Type": content_type,
                "x-upsert": "true" if upsert else "false",
            },
        )
        if resp.status_code not in (200, 201):
            raise SupabaseAPIError(resp.status_code, resp.text)
        # The object is stored at this point; an unexpected body only loses the key.
        try:
            body = resp.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("Key"):
            return body["Key"]
        return f"{bucket}/{path}"

    def public_url(self, bucket: str, path: str) -> str:
        """Public download URL for an object in a public bucket."""
        return f"{self._base_url}/storage/v1/object/public/{bucket}/{quote(path)}"
