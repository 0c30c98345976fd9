"""Tests for static FFmpeg provisioning.

HOW: A tiny .tar.xz shaped like a static build is created in tmp_path and
served through httpx.MockTransport, so nothing is downloaded.
"""

import io
import os
import tarfile
from pathlib import Path

import httpx
import pytest

from clip_renderer.encoder.base import EncoderError
from clip_renderer.encoder.install import extract_binaries, install_ffmpeg

ARCHIVE_URL = "https://builds.example.com/ffmpeg-static.tar.xz"


def _build_archive(members) -> bytes:
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:xz") as archive:
        for name, data in members.items():
            info = tarfile.TarInfo(name=name)
            info.size = len(data)
            info.mode = 0o644
            archive.addfile(info, io.BytesIO(data))
    return buf.getvalue()


STATIC_BUILD = {
    "ffmpeg-7.0-amd64-static/ffmpeg": b"ffmpeg-binary",
    "ffmpeg-7.0-amd64-static/ffprobe": b"ffprobe-binary",
    "ffmpeg-7.0-amd64-static/readme.txt": b"read me",
    "ffmpeg-7.0-amd64-static/model/ffmpeg": b"nested, must be skipped",
}


def _client_serving(body: bytes, status: int = 200) -> httpx.Client:
    def handler(request: httpx.Request) -> httpx.Response:
        assert str(request.url) == ARCHIVE_URL
        return httpx.Response(status, content=body)

    return httpx.Client(transport=httpx.MockTransport(handler))


class TestExtractBinaries:

    def test_strips_root_folder(self, tmp_path):
        archive = tmp_path / "build.tar.xz"
        archive.write_bytes(_build_archive(STATIC_BUILD))
        dest = tmp_path / "bin"

        binary = extract_binaries(archive, dest)

        assert binary == dest / "ffmpeg"
        assert binary.read_bytes() == b"ffmpeg-binary"
        assert (dest / "ffprobe").read_bytes() == b"ffprobe-binary"
        assert os.access(binary, os.X_OK)

    def test_only_binaries_extracted(self, tmp_path):
        archive = tmp_path / "build.tar.xz"
        archive.write_bytes(_build_archive(STATIC_BUILD))
        dest = tmp_path / "bin"

        extract_binaries(archive, dest)

        assert sorted(p.name for p in dest.iterdir()) == ["ffmpeg", "ffprobe"]

    def test_archive_without_ffmpeg(self, tmp_path):
        archive = tmp_path / "build.tar.xz"
        archive.write_bytes(_build_archive({"root/readme.txt": b"nothing here"}))
        with pytest.raises(EncoderError, match="No ffmpeg binary"):
            extract_binaries(archive, tmp_path / "bin")


class TestInstallFFmpeg:

    def test_download_and_install(self, tmp_path):
        client = _client_serving(_build_archive(STATIC_BUILD))
        binary = install_ffmpeg(dest_dir=tmp_path / "ffmpeg", url=ARCHIVE_URL, client=client)
        assert binary == tmp_path / "ffmpeg" / "ffmpeg"
        assert binary.read_bytes() == b"ffmpeg-binary"

    def test_http_error_status(self, tmp_path):
        client = _client_serving(b"gone", status=404)
        with pytest.raises(EncoderError, match="404"):
            install_ffmpeg(dest_dir=tmp_path / "ffmpeg", url=ARCHIVE_URL, client=client)
        assert not (tmp_path / "ffmpeg" / "ffmpeg").exists()

    def test_transport_error(self, tmp_path):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = httpx.Client(transport=httpx.MockTransport(handler))
        with pytest.raises(EncoderError, match="download failed"):
            install_ffmpeg(dest_dir=tmp_path / "ffmpeg", url=ARCHIVE_URL, client=client)
