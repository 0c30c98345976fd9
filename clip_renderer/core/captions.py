"""Karaoke caption markup — segments in, timed ASS dialogue lines out.

WHY: Each dialogue line becomes one on-screen caption whose words light
up one after another. The renderer needs the caption's display window
and a ``{\\k}`` highlight duration in front of every word.

HOW: build_caption_events() is a left fold over the segments. The
accumulator is ``(cursor, events)``: the cursor starts at 0.0 and is
advanced by the average word duration once per word. Each step appends
one CaptionEvent spanning the cursor before and after its words.
render_dialogue_line() turns an event into a ``Dialogue:`` row.

RULES:
- One event per segment, in input order, including empty segments
- Events are contiguous: event i's end_s is event i+1's start_s
- Every word gets the same ``{\\kNN}`` tag, NN = centiseconds rounded half-up
- Source text is not escaped; a literal ``{`` or ``\\`` in dialogue
  reaches the renderer as-is
"""

from __future__ import annotations

from functools import reduce
from typing import Iterable, List, Tuple

from clip_renderer.core.ir import CaptionEvent, DialogueSegment
from clip_renderer.core.timing import format_timestamp, round_half_up, split_words

STYLE_NAME = "DefaultV2"
"""Style referenced by every event; defined in the document header."""

_FoldState = Tuple[float, Tuple[CaptionEvent, ...]]


def karaoke_tag(duration_s: float) -> str:
    """ASS karaoke override for a word highlighted for ``duration_s`` seconds."""
    return "{\\k%d}" % round_half_up(duration_s * 100)


def _append_segment(
    state: _FoldState,
    segment: DialogueSegment,
    word_duration_s: float,
) -> _FoldState:
    cursor, events = state
    start_s = cursor
    tag = karaoke_tag(word_duration_s)
    parts = []
    for word in split_words(segment.line):
        parts.append("{}{} ".format(tag, word))
        cursor += word_duration_s
    event = CaptionEvent(start_s=start_s, end_s=cursor, text="".join(parts).strip())
    return cursor, events + (event,)


def build_caption_events(
    segments: Iterable[DialogueSegment],
    word_duration_s: float,
) -> List[CaptionEvent]:
    """Fold dialogue segments into contiguous, karaoke-tagged caption events.

    Args:
        segments: Dialogue in playback order.
        word_duration_s: Seconds allotted to every word (see
            timing.average_word_duration).

    Returns:
        One CaptionEvent per segment.
    """
    _, events = reduce(
        lambda state, segment: _append_segment(state, segment, word_duration_s),
        segments,
        (0.0, ()),
    )
    return list(events)


def render_dialogue_line(event: CaptionEvent) -> str:
    """Render an event as an ASS ``Dialogue:`` row (no trailing newline).

    Fields: layer, start, end, style, name, MarginL, MarginR, MarginV,
    effect, text.
    """
    return "Dialogue: 0,{},{},{},,0,0,0,,{}".format(
        format_timestamp(event.start_s),
        format_timestamp(event.end_s),
        STYLE_NAME,
        event.text,
    )
