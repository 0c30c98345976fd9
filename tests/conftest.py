"""Shared test fixtures for the clip_renderer test suite.

WHY: Caption, pipeline, and API tests all need the same sample dialogue,
a job record shaped like the Supabase webhook delivers it, an encoder
that never launches FFmpeg, and a Supabase endpoint that never leaves the
process. Centralizing them here avoids duplication.

HOW: Pytest fixtures provide plain data (dialogue, job dicts), a
RecordingEncoder that writes a fake MP4 and remembers what it was given,
and an httpx.MockTransport that records every Supabase request.

RULES:
- No fixture touches the network or runs a subprocess
- The worked example (3 words over 3.0s) is the canonical timing case
"""

import json
from pathlib import Path
from typing import Any, Dict, List

import httpx
import pytest

from clip_renderer.encoder.base import BaseEncoder, EncodeInputs, EncoderError
from clip_renderer.storage.client import SupabaseClient

SUPABASE_URL = "https://project.supabase.co"
SERVICE_ROLE_KEY = "service-role-test-key"


# ---------------------------------------------------------------------------
# Dialogue and job records
# ---------------------------------------------------------------------------


@pytest.fixture
def example_dialogue() -> List[Dict[str, str]]:
    """Two lines, three words: 1.0s per word over 3.0s of audio."""
    return [{"line": "hello world"}, {"line": "goodbye"}]


@pytest.fixture
def job_record(example_dialogue) -> Dict[str, Any]:
    """A video_jobs row as it appears in the webhook ``record`` field."""
    return {
        "id": 42,
        "status": "pending",
        "job_payload": {
            "audio_url": "https://cdn.example.com/audio.mp3",
            "artwork_url": "https://cdn.example.com/artwork.png",
            "dialogue": example_dialogue,
            "audio_duration": 3.0,
            "user_id": "user-123",
        },
    }


# ---------------------------------------------------------------------------
# Encoder
# ---------------------------------------------------------------------------


class RecordingEncoder(BaseEncoder):
    """Encoder that writes a placeholder MP4 and records each call."""

    def __init__(self, fail_with: str = "") -> None:
        self.fail_with = fail_with
        self.calls: List[Dict[str, Any]] = []

    @property
    def name(self) -> str:
        return "Recording encoder"

    def encode(self, inputs: EncodeInputs, filter_graph: str, output_path: Path) -> Path:
        self.calls.append({
            "inputs": inputs,
            "filter_graph": filter_graph,
            "output_path": output_path,
            "subtitle_text": inputs.subtitle_path.read_text(encoding="utf-8"),
            "audio_bytes": inputs.audio_path.read_bytes(),
            "artwork_bytes": inputs.artwork_path.read_bytes(),
        })
        if self.fail_with:
            raise EncoderError(self.fail_with, stderr="fake stderr")
        Path(output_path).write_bytes(b"fake mp4 bytes")
        return Path(output_path)


@pytest.fixture
def recording_encoder() -> RecordingEncoder:
    return RecordingEncoder()


@pytest.fixture
def failing_encoder() -> RecordingEncoder:
    return RecordingEncoder(fail_with="FFmpeg failed with exit code 1")


# ---------------------------------------------------------------------------
# Supabase
# ---------------------------------------------------------------------------


class SupabaseRecorder:
    """MockTransport handler standing in for a Supabase project."""

    def __init__(self) -> None:
        self.requests: List[httpx.Request] = []
        self.upload_status = 200
        self.patch_status = 204

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if request.method == "PATCH" and path.startswith("/rest/v1/"):
            return httpx.Response(self.patch_status, text="" if self.patch_status == 204 else "patch error")
        if request.method == "POST" and path.startswith("/storage/v1/object/"):
            if self.upload_status != 200:
                return httpx.Response(self.upload_status, json={"error": "Duplicate"})
            key = path[len("/storage/v1/object/"):]
            return httpx.Response(200, json={"Key": key})
        return httpx.Response(404, text="not found")

    @property
    def patches(self) -> List[Dict[str, Any]]:
        """JSON bodies of all PATCH requests, in order."""
        return [json.loads(r.content) for r in self.requests if r.method == "PATCH"]

    @property
    def uploads(self) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == "POST"]


@pytest.fixture
def supabase() -> SupabaseRecorder:
    return SupabaseRecorder()


@pytest.fixture
def supabase_transport(supabase) -> httpx.MockTransport:
    return httpx.MockTransport(supabase)


@pytest.fixture
def supabase_client(supabase_transport):
    """An un-entered SupabaseClient wired to the recording transport."""
    return SupabaseClient(
        url=SUPABASE_URL,
        service_role_key=SERVICE_ROLE_KEY,
        transport=supabase_transport,
    )
