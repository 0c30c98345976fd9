"""FFmpeg video filter graph for vertical karaoke clips.

WHY: The artwork is an arbitrary still image; the clip must be a 9:16
frame with the captions burned in near the top. That is one ``-vf``
chain, and the subtitle path inside it needs filter-graph escaping.

HOW: scale the artwork into the frame (keeping aspect), blur it, reset
the sample aspect ratio, then draw the ASS file with a force_style
override for size, alignment and vertical margin.

RULES:
- Defaults come from config (720x1280, Fontsize=48, Alignment=8, MarginV=100)
- Backslash, colon and single quote in the subtitle path are escaped
"""

from __future__ import annotations

from pathlib import Path
from typing import Union

from clip_renderer.config import (
    SUBTITLE_ALIGNMENT,
    SUBTITLE_FONT_SIZE,
    SUBTITLE_MARGIN_V,
    VIDEO_HEIGHT,
    VIDEO_WIDTH,
)


def force_style(
    font_size: int = SUBTITLE_FONT_SIZE,
    alignment: int = SUBTITLE_ALIGNMENT,
    margin_v: int = SUBTITLE_MARGIN_V,
) -> str:
    """ASS style override string for the ``subtitles`` filter."""
    return "Fontsize={},Alignment={},MarginV={}".format(font_size, alignment, margin_v)


def escape_filter_path(path: Union[str, Path]) -> str:
    """Escape a filesystem path for use as a filter-graph option value."""
    return (
        str(path)
        .replace("\\", "\\\\")
        .replace(":", "\\:")
        .replace("'", "\\'")
    )


def build_filter_graph(
    subtitle_path: Union[str, Path],
    width: int = VIDEO_WIDTH,
    height: int = VIDEO_HEIGHT,
    style: str = "",
) -> str:
    """Build the ``-vf`` chain that frames the artwork and burns in captions.

    Args:
        subtitle_path: Path of the ASS document as the encoder will see it.
        width: Output frame width in pixels.
        height: Output frame height in pixels.
        style: force_style override; defaults to force_style().

    Returns:
        The filter graph string.
    """
    return (
        "scale={w}:{h}:force_original_aspect_ratio=decrease,"
        "boxblur=30:5,setsar=1,"
        "subtitles={path}:force_style='{style}'"
    ).format(
        w=width,
        h=height,
        path=escape_filter_path(subtitle_path),
        style=style or force_style(),
    )
