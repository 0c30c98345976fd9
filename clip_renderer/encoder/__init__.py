"""Encoder registry — pluggable video rendering backends.

WHY: The pipeline and CLI need a single lookup to find the configured
encoder by name, so the rendering backend can change without touching
callers.

HOW: ENCODERS maps string keys to encoder *classes* (not instances).
get_encoder() instantiates the one named by CLIP_ENCODER unless told
otherwise.

RULES:
- Keys are snake_case identifiers (used in config and CLI flags)
- Values are BaseEncoder subclasses (not instances)
- Every encoder listed here must be importable without side effects
"""

from __future__ import annotations

from typing import Dict, Optional, Type

from clip_renderer.config import CLIP_ENCODER
from clip_renderer.encoder.base import BaseEncoder, EncodeInputs, EncoderError
from clip_renderer.encoder.ffmpeg import FFmpegEncoder

ENCODERS: Dict[str, Type[BaseEncoder]] = {
    "ffmpeg": FFmpegEncoder,
}


def get_encoder(key: Optional[str] = None) -> BaseEncoder:
    """Instantiate the encoder registered under ``key`` (default CLIP_ENCODER).

    Raises:
        ValueError: If no encoder is registered under that key.
    """
    name = key or CLIP_ENCODER
    if name not in ENCODERS:
        raise ValueError(
            "Unknown encoder '{}'. Available: {}".format(name, ", ".join(sorted(ENCODERS)))
        )
    return ENCODERS[name]()


__all__ = ["BaseEncoder", "ENCODERS", "EncodeInputs", "EncoderError", "FFmpegEncoder", "get_encoder"]
