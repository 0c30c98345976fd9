"""Provision a static FFmpeg build for hosts without a system ffmpeg.

WHY: Serverless and slim container images rarely ship ffmpeg. A static
Linux x64 build is a single self-contained binary that can be fetched at
deploy time into a writable directory (``/tmp/ffmpeg`` by default).

HOW: Streams the .tar.xz archive with httpx into a temporary file, then
pulls the top-level ``ffmpeg`` and ``ffprobe`` binaries out of the
archive's single root folder and marks them executable.

RULES:
- Only ``<root>/ffmpeg`` and ``<root>/ffprobe`` are extracted; nothing
  else in the archive touches the filesystem
- Raises EncoderError if the download fails or no ffmpeg is in the archive
- Returns the path of the installed ffmpeg binary
"""

from __future__ import annotations

import logging
import os
import stat
import tarfile
import tempfile
from pathlib import Path
from typing import Optional

import httpx

from clip_renderer.config import FFMPEG_INSTALL_DIR, FFMPEG_STATIC_URL
from clip_renderer.encoder.base import EncoderError

logger = logging.getLogger(__name__)

_BINARIES = ("ffmpeg", "ffprobe")
_EXECUTABLE = stat.S_IRWXU | stat.S_IRGRP | stat.S_IXGRP | stat.S_IROTH | stat.S_IXOTH


def _download(url: str, target: Path, client: httpx.Client) -> None:
    with client.stream("GET", url, follow_redirects=True) as resp:
        if resp.status_code != 200:
            raise EncoderError(
                "FFmpeg download failed ({}) from {}".format(resp.status_code, url)
            )
        with open(target, "wb") as f:
            for chunk in resp.iter_bytes():
                f.write(chunk)


def extract_binaries(archive_path: Path, dest_dir: Path) -> Path:
    """Copy the root-level ffmpeg/ffprobe from a static-build archive.

    Static builds are laid out as ``ffmpeg-<version>-amd64-static/ffmpeg``;
    the version folder is dropped on extraction.
    """
    dest_dir.mkdir(parents=True, exist_ok=True)
    installed = []
    with tarfile.open(archive_path, mode="r:*") as archive:
        for member in archive.getmembers():
            parts = Path(member.name).parts
            if not member.isfile() or len(parts) != 2 or parts[1] not in _BINARIES:
                continue
            source = archive.extractfile(member)
            if source is None:
                continue
            target = dest_dir / parts[1]
            with source, open(target, "wb") as out:
                out.write(source.read())
            os.chmod(target, _EXECUTABLE)
            installed.append(parts[1])

    if "ffmpeg" not in installed:
        raise EncoderError("No ffmpeg binary found in {}".format(archive_path.name))
    return dest_dir / "ffmpeg"


def install_ffmpeg(
    dest_dir: Optional[Path] = None,
    url: Optional[str] = None,
    client: Optional[httpx.Client] = None,
) -> Path:
    """Download and install a static FFmpeg build.

    Args:
        dest_dir: Install directory (default FFMPEG_INSTALL_DIR).
        url: Archive URL (default FFMPEG_STATIC_URL).
        client: Optional httpx.Client, mainly for tests.

    Returns:
        Path to the executable ffmpeg binary.
    """
    dest = Path(dest_dir or FFMPEG_INSTALL_DIR)
    source_url = url or FFMPEG_STATIC_URL
    logger.info("Downloading FFmpeg static build from %s", source_url)

    owns_client = client is None
    http = client or httpx.Client(timeout=httpx.Timeout(600.0, connect=30.0))
    try:
        with tempfile.TemporaryDirectory(prefix="ffmpeg_dl_") as tmp:
            archive_path = Path(tmp) / "ffmpeg.tar.xz"
            try:
                _download(source_url, archive_path, http)
            except httpx.HTTPError as exc:
                raise EncoderError("FFmpeg download failed: {}".format(exc))
            binary = extract_binaries(archive_path, dest)
    finally:
        if owns_client:
            http.close()

    logger.info("FFmpeg installed and made executable at %s", binary)
    return binary
