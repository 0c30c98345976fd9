"""Intermediate representation dataclasses for caption generation.

WHY: The webhook delivers dialogue as loose JSON dicts, while the markup
builder and the assembler want well-typed values. The IR sits between
them so the core never has to guess at field names.

HOW: Two frozen dataclasses:
  DialogueSegment — one spoken line, in playback order
  CaptionEvent    — one timed caption produced from a DialogueSegment

RULES:
- All times are float seconds from the start of the audio
- Both types are immutable; generation builds new values, never mutates
- Segment order is the only ordering information; there is no index field
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class DialogueSegment:
    """One line of dialogue as delivered in the job payload.

    RULES:
    - line: the spoken text; may be empty or whitespace-only
    """

    line: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DialogueSegment:
        """Build a segment from a ``{"line": ...}`` mapping.

        A missing or null ``line`` becomes the empty string so that a
        sparse payload still yields one (zero-length) caption per entry.
        """
        line = data.get("line")
        return cls(line="" if line is None else str(line))


@dataclass(frozen=True)
class CaptionEvent:
    """A caption with its display window and karaoke-tagged text.

    RULES:
    - start_s: cursor value before the segment's words were consumed
    - end_s: cursor value after; equal to start_s for empty segments
    - text: ``{\\kNN}word`` pairs separated by single spaces
    """

    start_s: float
    end_s: float
    text: str
