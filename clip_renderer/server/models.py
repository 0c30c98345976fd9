"""Pydantic request/response models for the HTTP API.

WHY: The webhook endpoint receives Supabase database-webhook bodies and
must validate the embedded job payload before any work starts. Pydantic
models enforce field types at runtime and generate the JSON Schema shown
in the /docs UI.

HOW: Request models mirror the ``video_jobs`` row layout (record →
job_payload → dialogue). Response models mirror what existing callers
expect (``success``/``videoUrl`` on success, ``error`` on failure).

RULES:
- All models use Field(description=...) for OpenAPI documentation
- Unknown webhook fields (type, table, schema, old_record) are ignored
- Response field names are part of the wire contract; keep the aliases
- Python 3.9+ compatible (no PEP 604 unions, use Optional from typing)
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class DialogueLine(BaseModel):
    """One spoken line of the clip's dialogue."""

    line: str = Field(default="", description="Text spoken in this segment.")


class JobPayload(BaseModel):
    """Render inputs stored in the ``job_payload`` column.

    RULES:
    - audio_url/artwork_url must be publicly downloadable
    - dialogue is in playback order
    - audio_duration is the audio length in seconds
    """

    audio_url: str = Field(description="Public URL of the audio track.")
    artwork_url: str = Field(description="Public URL of the background artwork image.")
    dialogue: List[DialogueLine] = Field(
        default_factory=list,
        description="Dialogue lines in playback order; one caption per line.",
    )
    audio_duration: float = Field(description="Audio duration in seconds.")
    user_id: str = Field(description="Owner of the job; used as the storage folder.")


class ClipJob(BaseModel):
    """A ``video_jobs`` row as delivered in the webhook ``record`` field."""

    id: Union[int, str] = Field(description="Primary key of the job row.")
    job_payload: JobPayload = Field(description="Render inputs for this job.")


class WebhookPayload(BaseModel):
    """Supabase database webhook body.

    WHY: Supabase posts ``{type, table, schema, record, old_record}``.
    Only ``record`` matters here. It is optional so a body without one can
    be answered with the documented 400, and it stays a plain mapping so
    the handler can validate it into ClipJob itself: a row with a usable
    ``id`` but a bad ``job_payload`` must still be marked failed.
    """

    record: Optional[Dict[str, Any]] = Field(
        default=None,
        description="The inserted job row (validated as a ClipJob).",
    )


class CaptionPreviewRequest(BaseModel):
    """Body for the caption preview endpoint."""

    dialogue: List[DialogueLine] = Field(
        default_factory=list,
        description="Dialogue lines in playback order.",
    )
    audio_duration: float = Field(description="Audio duration in seconds.")


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class RenderResponse(BaseModel):
    """Returned when a job has been rendered and published."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = Field(default=True, description="Always true on this response.")
    video_url: str = Field(
        alias="videoUrl",
        description="Public URL of the uploaded clip.",
    )


class ErrorResponse(BaseModel):
    """Standard error response body.

    RULES:
    - error is always a human-readable error message
    """

    error: str = Field(description="Human-readable error description.")


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = Field(description="Service health status.", json_schema_extra={"example": "ok"})
    version: str = Field(description="API version string.", json_schema_extra={"example": "0.1.0"})
