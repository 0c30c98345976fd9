"""FastAPI application exposing the job webhook and caption preview.

WHY: Supabase delivers new ``video_jobs`` rows as database webhooks; the
renderer needs an HTTP endpoint to receive them and answer with the
outcome. A caption-only endpoint lets front ends preview timing without
rendering video.

HOW: A single FastAPI app exposes three endpoints grouped by tags. The
webhook endpoint validates the record, opens a SupabaseClient, and awaits
render_clip(); the response reports the public URL or the error.

RULES:
- Missing ``record`` → 400 with the documented error body
- A record that is not a valid ClipJob → 422 ``{"error": ...}``, and the
  row is marked failed when the record carries an ``id``
- Any pipeline failure → 500 ``{"error": ...}``; the job row is already
  marked failed by the pipeline
- The webhook call is synchronous from the caller's point of view: the
  response is sent only after the job reaches a terminal state
- Python 3.9+ compatible (no match/case, no PEP 604 unions)
"""

from __future__ import annotations

import logging
from typing import Union

from fastapi import FastAPI
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError

from clip_renderer import __version__
from clip_renderer.config import API_HOST, API_PORT
from clip_renderer.core.document import generate_caption_document
from clip_renderer.encoder import get_encoder
from clip_renderer.server.jobs import JobStatusStore
from clip_renderer.server.models import (
    CaptionPreviewRequest,
    ClipJob,
    ErrorResponse,
    HealthResponse,
    RenderResponse,
    WebhookPayload,
)
from clip_renderer.server.pipeline import render_clip
from clip_renderer.storage.client import SupabaseClient

logger = logging.getLogger(__name__)

INVALID_PAYLOAD_MESSAGE = "Invalid payload from Supabase webhook."

app = FastAPI(
    title="Clip Renderer API",
    description=(
        "Renders short vertical clips (artwork + audio + karaoke captions) "
        "for jobs delivered by Supabase database webhooks, uploads them to "
        "storage, and records the outcome on the job row."
    ),
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)


async def process_job(job: ClipJob) -> str:
    """Run the full pipeline for one job and return the clip's public URL."""
    async with SupabaseClient() as storage:
        return await render_clip(job, storage, get_encoder())


async def fail_job(job_id: Union[int, str], error_message: str) -> None:
    """Mark a job failed without rendering it."""
    async with SupabaseClient() as storage:
        await JobStatusStore(storage).mark_failed(job_id, error_message)


def describe_validation_error(exc: ValidationError) -> str:
    """One-line summary of a ClipJob validation failure, safe to store on the row."""
    problems = [
        "{}: {}".format(".".join(str(part) for part in error["loc"]) or "record", error["msg"])
        for error in exc.errors()
    ]
    return "Invalid job record: " + "; ".join(problems)


# ---------------------------------------------------------------------------
# Endpoints: Jobs
# ---------------------------------------------------------------------------


@app.post(
    "/api/process-job",
    response_model=RenderResponse,
    tags=["jobs"],
    summary="Process a clip job from a Supabase webhook",
    description=(
        "Receives the Supabase database webhook for a new video_jobs row, "
        "renders the clip, uploads it, and marks the job complete. "
        "Responds once the job has completed or failed."
    ),
    responses={
        400: {"model": ErrorResponse, "description": "Webhook body has no record"},
        422: {"model": ErrorResponse, "description": "Job record is invalid; the row is marked failed"},
        500: {"model": ErrorResponse, "description": "Rendering or upload failed"},
    },
)
async def process_job_webhook(payload: WebhookPayload):
    record = payload.record
    if record is None:
        return JSONResponse(status_code=400, content={"error": INVALID_PAYLOAD_MESSAGE})

    try:
        job = ClipJob.model_validate(record)
    except ValidationError as exc:
        message = describe_validation_error(exc)
        job_id = record.get("id")
        logger.error("Rejected job %s: %s", job_id, message)
        if isinstance(job_id, (int, str)) and not isinstance(job_id, bool):
            try:
                await fail_job(job_id, message)
            except Exception:
                logger.exception("Could not mark job %s as failed", job_id)
        return JSONResponse(status_code=422, content={"error": message})

    logger.info("Received job %s for user %s", job.id, job.job_payload.user_id)

    try:
        video_url = await process_job(job)
    except Exception as exc:
        logger.error("Video processing error for job %s: %s", job.id, exc)
        return JSONResponse(status_code=500, content={"error": str(exc)})

    return RenderResponse(video_url=video_url)


# ---------------------------------------------------------------------------
# Endpoints: Captions
# ---------------------------------------------------------------------------


@app.post(
    "/captions",
    tags=["captions"],
    summary="Preview the karaoke subtitle document",
    description=(
        "Returns the ASS subtitle document that would be burned into the "
        "clip for the given dialogue and audio duration. No video is rendered."
    ),
    responses={200: {"content": {"text/x-ssa": {}}, "description": "ASS document"}},
)
async def preview_captions(request: CaptionPreviewRequest) -> Response:
    document = generate_caption_document(
        [line.model_dump() for line in request.dialogue],
        request.audio_duration,
    )
    return Response(content=document, media_type="text/x-ssa")


# ---------------------------------------------------------------------------
# Endpoints: Health
# ---------------------------------------------------------------------------


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["health"],
    summary="Health check",
    description="Liveness and readiness check for load balancers and orchestrators.",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok", version=__version__)


def run_api(host: str = API_HOST, port: int = API_PORT) -> None:
    """Entry point for the clip-renderer-api console script."""
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    uvicorn.run(app, host=host, port=port)
