"""ASS subtitle document assembly.

WHY: FFmpeg's ``subtitles`` filter reads a complete .ass file, not bare
event rows. Existing renderers depend on the exact header below, so it is
reproduced byte-for-byte rather than generated.

HOW: SCRIPT_HEADER is a module constant. assemble_document() appends one
newline-terminated row per event. generate_caption_document() is the
public entry point that runs allocation, markup, and assembly in order.

RULES:
- The header is never parameterised by the input; restyling is done with
  FFmpeg's force_style override, not by editing this template
- Exactly one [Script Info], [V4+ Styles] and [Events] section
- One ``Dialogue:`` row per dialogue entry, even for empty lines
- An empty transcript yields the header alone
"""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Union

from clip_renderer.core.captions import build_caption_events, render_dialogue_line
from clip_renderer.core.ir import DialogueSegment
from clip_renderer.core.timing import average_word_duration

SCRIPT_HEADER = (
    "[Script Info]\n"
    "Title: Viral Clip Subtitles\n"
    "ScriptType: v4.00+\n"
    "[V4+ Styles]\n"
    "Style: DefaultV2,Arial,48,&H00FFFFFF,&H0000FFFF,&H00000000,&H99000000,"
    "-1,0,0,0,100,100,0,0,1,2,1,8,10,10,100,1\n"
    "[Events]\n"
    "Format: Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text\n"
)

DialogueInput = Union[DialogueSegment, Mapping[str, Any]]


def assemble_document(lines: Iterable[str]) -> str:
    """Prefix rendered ``Dialogue:`` rows with the fixed header."""
    return SCRIPT_HEADER + "".join("{}\n".format(line) for line in lines)


def to_segments(dialogue: Iterable[DialogueInput]) -> List[DialogueSegment]:
    """Normalise payload dicts and DialogueSegment objects to segments."""
    return [
        item if isinstance(item, DialogueSegment) else DialogueSegment.from_dict(item)
        for item in dialogue
    ]


def generate_caption_document(
    dialogue: Iterable[DialogueInput],
    total_duration_s: float,
) -> str:
    """Build a complete karaoke ASS document for the given dialogue.

    Args:
        dialogue: Lines in playback order, as DialogueSegment objects or
            ``{"line": ...}`` mappings straight from the job payload.
        total_duration_s: Audio length in seconds; spread evenly across
            all words.

    Returns:
        The full .ass file body, ready to write to disk.
    """
    segments = to_segments(dialogue)
    word_duration_s = average_word_duration(segments, total_duration_s)
    events = build_caption_events(segments, word_duration_s)
    return assemble_document(render_dialogue_line(event) for event in events)
