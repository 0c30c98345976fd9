"""Word-timing allocation and ASS timestamp formatting.

WHY: We know how long the audio is and what is said, but not when each
word is spoken. Captions still need a highlight duration per word and a
start/end for every line. This module supplies both numbers.

HOW: The allocator divides the total duration evenly across all words in
the transcript (a uniform approximation, not forced alignment, so long and
short words get the same slice). The formatter turns seconds into the
``H:MM:SS.CC`` clock used by ASS event lines.

RULES:
- Words are whitespace-delimited; empty tokens never count
- Zero words means an average duration of 0.0, never NaN or Inf
- Non-finite or negative seconds are treated as 0 before formatting, and
  so is a finite value too large to scale to milliseconds
- Hours are unbounded and unpadded; MM, SS and CC are always 2 digits
- Centiseconds are truncated from the rounded millisecond count
- All rounding goes through round_half_up() so karaoke tags and event
  boundaries agree
"""

from __future__ import annotations

import math
from typing import Any, Iterable, List

from clip_renderer.core.ir import DialogueSegment

_MS_PER_HOUR = 3_600_000
_MS_PER_MINUTE = 60_000
_MS_PER_SECOND = 1000


def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties away from zero for positives.

    Python's round() uses banker's rounding (round(0.5) == 0); caption
    renderers expect 0.5 to round up. A value that is not finite (a huge
    duration scaled to ms overflows to inf) rounds to 0.
    """
    shifted = value + 0.5
    if not math.isfinite(shifted):
        return 0
    return int(math.floor(shifted))


def sanitize_seconds(value: Any) -> float:
    """Coerce a seconds value to a finite, non-negative float (or 0.0)."""
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(seconds) or seconds < 0:
        return 0.0
    return seconds


def split_words(line: str) -> List[str]:
    """Split a dialogue line on whitespace, dropping empty tokens."""
    return line.split()


def count_words(segments: Iterable[DialogueSegment]) -> int:
    """Total number of words across all segments."""
    return sum(len(split_words(segment.line)) for segment in segments)


def average_word_duration(
    segments: Iterable[DialogueSegment],
    total_duration_s: float,
) -> float:
    """Evenly divide the total duration across every word in the transcript.

    Args:
        segments: Dialogue in playback order.
        total_duration_s: Length of the audio in seconds.

    Returns:
        Seconds per word, or 0.0 when the transcript has no words. The
        result is always finite and non-negative.
    """
    total_words = count_words(segments)
    if total_words == 0:
        return 0.0
    return sanitize_seconds(total_duration_s) / total_words


def format_timestamp(seconds: Any) -> str:
    """Format seconds as an ASS timestamp ``H:MM:SS.CC``.

    Examples:
        >>> format_timestamp(0)
        '0:00:00.00'
        >>> format_timestamp(3661.255)
        '1:01:01.25'
    """
    total_ms = round_half_up(sanitize_seconds(seconds) * _MS_PER_SECOND)

    hours = total_ms // _MS_PER_HOUR
    minutes = (total_ms // _MS_PER_MINUTE) % 60
    secs = (total_ms // _MS_PER_SECOND) % 60
    centiseconds = (total_ms % _MS_PER_SECOND) // 10

    return "{:d}:{:02d}:{:02d}.{:02d}".format(hours, minutes, secs, centiseconds)
