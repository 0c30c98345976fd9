"""Clip rendering pipeline — one job from webhook record to public URL.

WHY: A job is only useful once its clip is rendered, uploaded, and the
row says so. This is the background work behind the webhook: mark the
job processing, fetch inputs, write captions, encode, upload, and record
the outcome.

HOW: render_clip() runs the stages in order inside a temporary working
directory. Downloads run concurrently; the blocking encoder call runs in
a worker thread so the event loop stays responsive. Collaborators
(Supabase client, encoder, asset fetcher, clock) are passed in so tests
can substitute fakes.

RULES:
- Status goes processing → complete (with video_url) or failed (with
  error_message); there is no retry or resumption
- Any exception at any stage marks the job failed and is re-raised as
  RenderError carrying the original message
- Storage path is {user_id}/clips/{epoch_ms}-viral-clip.mp4
- The working directory is always removed, success or failure
"""

from __future__ import annotations

import asyncio
import logging
import tempfile
import time
from pathlib import Path
from typing import Awaitable, Callable, List

from clip_renderer.config import CLIPS_BUCKET
from clip_renderer.core.document import generate_caption_document
from clip_renderer.encoder.base import BaseEncoder, EncodeInputs
from clip_renderer.encoder.filters import build_filter_graph
from clip_renderer.server.jobs import JobStatusStore
from clip_renderer.server.models import ClipJob
from clip_renderer.storage.assets import fetch_assets
from clip_renderer.storage.client import SupabaseClient

logger = logging.getLogger(__name__)

AssetFetcher = Callable[..., Awaitable[List[bytes]]]

AUDIO_FILENAME = "audio.mp3"
ARTWORK_FILENAME = "artwork.png"
SUBTITLE_FILENAME = "subs.ass"
OUTPUT_FILENAME = "output.mp4"


class RenderError(Exception):
    """Raised when any stage of the pipeline fails; the job is already marked failed."""


def build_storage_path(user_id: str, now_ms: int) -> str:
    """Object path for a user's rendered clip."""
    return "{}/clips/{}-viral-clip.mp4".format(user_id, now_ms)


async def render_clip(
    job: ClipJob,
    storage: SupabaseClient,
    encoder: BaseEncoder,
    bucket: str = CLIPS_BUCKET,
    fetch: AssetFetcher = fetch_assets,
    clock: Callable[[], float] = time.time,
) -> str:
    """Render, upload, and publish the clip for ``job``.

    Args:
        job: The webhook record.
        storage: An entered SupabaseClient.
        encoder: Encoder used for the render.
        bucket: Destination storage bucket.
        fetch: Coroutine downloading URLs in order (default fetch_assets).
        clock: Epoch-seconds clock used for the object name.

    Returns:
        Public URL of the uploaded clip.

    Raises:
        RenderError: If any stage failed (the job row is marked failed).
    """
    jobs = JobStatusStore(storage)
    payload = job.job_payload

    try:
        await jobs.mark_processing(job.id)

        with tempfile.TemporaryDirectory(prefix="clip_job_") as tmp:
            work_dir = Path(tmp)
            audio_data, artwork_data = await fetch(payload.audio_url, payload.artwork_url)

            inputs = EncodeInputs(
                artwork_path=work_dir / ARTWORK_FILENAME,
                audio_path=work_dir / AUDIO_FILENAME,
                subtitle_path=work_dir / SUBTITLE_FILENAME,
            )
            inputs.audio_path.write_bytes(audio_data)
            inputs.artwork_path.write_bytes(artwork_data)
            inputs.subtitle_path.write_text(
                generate_caption_document(
                    [line.model_dump() for line in payload.dialogue],
                    payload.audio_duration,
                ),
                encoding="utf-8",
            )

            filter_graph = build_filter_graph(inputs.subtitle_path)
            logger.info("Encoding job %s with %s", job.id, encoder.name)
            output_path = await asyncio.to_thread(
                encoder.encode, inputs, filter_graph, work_dir / OUTPUT_FILENAME
            )
            video_data = Path(output_path).read_bytes()

        object_path = build_storage_path(payload.user_id, int(clock() * 1000))
        await storage.upload_object(bucket, object_path, video_data, "video/mp4")
        public_url = storage.public_url(bucket, object_path)

        await jobs.mark_complete(job.id, public_url)
        return public_url

    except Exception as exc:
        logger.exception("Video processing failed for job %s", job.id)
        try:
            await jobs.mark_failed(job.id, str(exc))
        except Exception:
            logger.exception("Could not mark job %s as failed", job.id)
        raise RenderError(str(exc)) from exc
