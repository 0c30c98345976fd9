"""Job status values and the remote job-status store.

WHY: Clients watch the ``video_jobs`` row to learn when their clip is
ready. The renderer moves each job through a small linear lifecycle
(processing → complete | failed) and must record the public URL or the
error message alongside the final state.

HOW: Two components work together:
  JobStatus       — enum of valid job states
  JobStatusStore  — thin wrapper that writes status transitions to the
                    jobs table through SupabaseClient

RULES:
- The row is keyed by its ``id`` column
- complete always carries video_url; failed always carries error_message
- The store holds no state of its own; Supabase is the source of truth
"""

from __future__ import annotations

import enum
import logging
from typing import Any, Dict

from clip_renderer.config import JOBS_TABLE
from clip_renderer.storage.client import SupabaseClient

logger = logging.getLogger(__name__)


class JobStatus(str, enum.Enum):
    """Valid states for a clip rendering job.

    HOW: Inherits from str so values serialize cleanly to JSON.

    RULES:
    - processing: picked up by the renderer, work in progress
    - complete: clip uploaded, video_url set
    - failed: unrecoverable error at any stage, error_message set
    """

    PROCESSING = "processing"
    COMPLETE = "complete"
    FAILED = "failed"


class JobStatusStore:
    """Writes job status transitions to the Supabase jobs table."""

    def __init__(self, client: SupabaseClient, table: str = JOBS_TABLE) -> None:
        self._client = client
        self._table = table

    async def set_status(self, job_id: Any, status: JobStatus, **fields: Any) -> None:
        """Set ``status`` (plus any extra columns) on the job row."""
        values: Dict[str, Any] = {"status": status.value}
        values.update(fields)
        await self._client.update_rows(self._table, {"id": job_id}, values)
        logger.info("Job %s -> %s", job_id, status.value)

    async def mark_processing(self, job_id: Any) -> None:
        await self.set_status(job_id, JobStatus.PROCESSING)

    async def mark_complete(self, job_id: Any, video_url: str) -> None:
        await self.set_status(job_id, JobStatus.COMPLETE, video_url=video_url)

    async def mark_failed(self, job_id: Any, error_message: str) -> None:
        await self.set_status(job_id, JobStatus.FAILED, error_message=error_message)
