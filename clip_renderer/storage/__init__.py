"""Supabase and asset I/O — everything that talks to the network.

WHY: The renderer reads inputs from public URLs and writes results to a
backend-as-a-service. Keeping all HTTP in this package means the core and
the encoder never import httpx.

HOW: client.py wraps the Supabase REST/Storage APIs; assets.py downloads
job inputs concurrently.

RULES:
- All Supabase calls go through SupabaseClient (no direct httpx usage elsewhere)
- Asset downloads never carry Supabase credentials
"""

from clip_renderer.storage.assets import AssetDownloadError, fetch_assets
from clip_renderer.storage.client import SupabaseAPIError, SupabaseClient

__all__ = ["AssetDownloadError", "SupabaseAPIError", "SupabaseClient", "fetch_assets"]
