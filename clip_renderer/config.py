"""Configuration constants, render defaults, and .env loading.

WHY: Centralizes all configurable values so they are easy to find,
update, and override. Supabase table and bucket names, FFmpeg location,
and the video/subtitle geometry are plain data, not buried in logic,
so both humans and coding agents can modify them confidently.

HOW: python-dotenv loads the .env file on import. Constants are defined
as module-level values read from the environment with defaults. The
load_supabase_credentials() function provides a clear error when the
backend is not configured.

RULES:
- Secrets (service-role key) are loaded from .env, never hardcoded
- All defaults can be overridden via environment variables
- Numeric settings are parsed once at import time
"""

from __future__ import annotations

import os
from typing import Tuple

from dotenv import load_dotenv

# Load .env from the project root (where the script is run from)
load_dotenv()

# ---------------------------------------------------------------------------
# Supabase (job table + storage bucket)
# ---------------------------------------------------------------------------

SUPABASE_URL = os.getenv("SUPABASE_URL", "")
JOBS_TABLE = os.getenv("JOBS_TABLE", "video_jobs")
CLIPS_BUCKET = os.getenv("CLIPS_BUCKET", "viral-clips")

# ---------------------------------------------------------------------------
# Encoder
# ---------------------------------------------------------------------------

CLIP_ENCODER = os.getenv("CLIP_ENCODER", "ffmpeg")
FFMPEG_PATH = os.getenv("FFMPEG_PATH", "")
FFMPEG_INSTALL_DIR = os.getenv("FFMPEG_INSTALL_DIR", "/tmp/ffmpeg")
FFMPEG_STATIC_URL = os.getenv(
    "FFMPEG_STATIC_URL",
    "https://johnvansickle.com/ffmpeg/builds/ffmpeg-git-amd64-static.tar.xz",
)
FFMPEG_TIMEOUT_S = float(os.getenv("FFMPEG_TIMEOUT_S", "600"))

# ---------------------------------------------------------------------------
# Output geometry and burned-in subtitle overrides
# ---------------------------------------------------------------------------

VIDEO_WIDTH = int(os.getenv("VIDEO_WIDTH", "720"))
VIDEO_HEIGHT = int(os.getenv("VIDEO_HEIGHT", "1280"))
SUBTITLE_FONT_SIZE = int(os.getenv("SUBTITLE_FONT_SIZE", "48"))
SUBTITLE_ALIGNMENT = int(os.getenv("SUBTITLE_ALIGNMENT", "8"))  # top-center
SUBTITLE_MARGIN_V = int(os.getenv("SUBTITLE_MARGIN_V", "100"))

# ---------------------------------------------------------------------------
# HTTP server
# ---------------------------------------------------------------------------

API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8000"))


def load_supabase_credentials() -> Tuple[str, str]:
    """Load the Supabase project URL and service-role key from the environment.

    WHY: Every status update and upload needs admin access to the project.
    Loading both values from the environment (via .env) keeps the key out
    of source code.

    RULES:
    - Raises ValueError if either value is missing or empty
    - Trailing slashes are stripped from the URL
    - Never returns a default/placeholder key
    """
    url = os.getenv("SUPABASE_URL", SUPABASE_URL).strip().rstrip("/")
    key = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "").strip()
    if not url:
        raise ValueError(
            "Supabase URL not configured. "
            "Add SUPABASE_URL to the .env file in the app folder."
        )
    if not key:
        raise ValueError(
            "Supabase service role key not configured. "
            "Add SUPABASE_SERVICE_ROLE_KEY to the .env file in the app folder."
        )
    return url, key
