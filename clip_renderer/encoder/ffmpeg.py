"""FFmpeg encoder — renders clips by running the ffmpeg binary as a subprocess.

WHY: FFmpeg does all the real work (decode, filter, encode, mux). Running
the stock binary keeps us on the fast native build instead of a WASM or
bindings layer, and makes the command trivially reproducible by hand.

HOW: resolve_ffmpeg_binary() finds the executable (explicit setting,
provisioned static build, then PATH). FFmpegEncoder.build_command()
produces the argv; encode() runs it with subprocess.run and converts any
failure into EncoderError.

RULES:
- Output: H.264 (stillimage tune) + AAC 192k, yuv420p, faststart MP4
- ``-shortest`` so the clip ends with the audio, not the still image
- Non-zero exit, timeout, or missing binary all raise EncoderError
- Only the last _STDERR_TAIL_CHARS of stderr are kept on the error
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional

from clip_renderer.config import FFMPEG_INSTALL_DIR, FFMPEG_PATH, FFMPEG_TIMEOUT_S
from clip_renderer.encoder.base import BaseEncoder, EncodeInputs, EncoderError

logger = logging.getLogger(__name__)

_STDERR_TAIL_CHARS = 2000


def resolve_ffmpeg_binary(
    explicit_path: Optional[str] = None,
    install_dir: Optional[str] = None,
) -> Optional[str]:
    """Locate an executable ffmpeg.

    Lookup order: ``explicit_path`` (or FFMPEG_PATH), the static build
    provisioned under ``install_dir`` (or FFMPEG_INSTALL_DIR), then PATH.
    An explicit setting may be a file path or a bare command name; a bare
    name is looked up on PATH.

    Returns:
        The binary path, or None if no ffmpeg could be found.
    """
    explicit = explicit_path or FFMPEG_PATH
    if explicit:
        if os.path.isfile(explicit) and os.access(explicit, os.X_OK):
            return explicit
        return shutil.which(explicit)

    provisioned = Path(install_dir or FFMPEG_INSTALL_DIR) / "ffmpeg"
    if provisioned.is_file() and os.access(provisioned, os.X_OK):
        return str(provisioned)

    return shutil.which("ffmpeg")


class FFmpegEncoder(BaseEncoder):
    """Encoder that shells out to the ffmpeg binary."""

    def __init__(
        self,
        binary: Optional[str] = None,
        timeout_s: float = FFMPEG_TIMEOUT_S,
    ) -> None:
        self._binary = binary
        self._timeout_s = timeout_s

    @property
    def name(self) -> str:
        return "FFmpeg (subprocess)"

    def build_command(
        self,
        binary: str,
        inputs: EncodeInputs,
        filter_graph: str,
        output_path: Path,
    ) -> List[str]:
        """Full argv for one render."""
        return [
            binary,
            "-y",
            "-i", str(inputs.artwork_path),
            "-i", str(inputs.audio_path),
            "-vf", filter_graph,
            "-c:v", "libx264",
            "-tune", "stillimage",
            "-c:a", "aac",
            "-b:a", "192k",
            "-pix_fmt", "yuv420p",
            "-shortest",
            "-movflags", "+faststart",
            str(output_path),
        ]

    def encode(self, inputs: EncodeInputs, filter_graph: str, output_path: Path) -> Path:
        binary = self._binary or resolve_ffmpeg_binary()
        if not binary:
            raise EncoderError(
                "FFmpeg not found. Set FFMPEG_PATH, run "
                "'python -m clip_renderer install-ffmpeg', or install ffmpeg on PATH."
            )

        output_path = Path(output_path)
        cmd = self.build_command(binary, inputs, filter_graph, output_path)
        logger.info("Running ffmpeg: %s", " ".join(cmd))

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self._timeout_s,
            )
        except subprocess.TimeoutExpired:
            raise EncoderError(
                "FFmpeg timed out after {:.0f}s".format(self._timeout_s)
            )
        except OSError as exc:
            raise EncoderError("Failed to start FFmpeg: {}".format(exc))

        if result.returncode != 0:
            stderr_tail = (result.stderr or "")[-_STDERR_TAIL_CHARS:]
            logger.error("ffmpeg exited with %d: %s", result.returncode, stderr_tail)
            raise EncoderError(
                "FFmpeg failed with exit code {}".format(result.returncode),
                stderr=stderr_tail,
            )

        if not output_path.is_file():
            raise EncoderError("FFmpeg reported success but {} was not written".format(output_path))

        return output_path
