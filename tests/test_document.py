"""Tests for ASS document assembly and the public generator.

WHY: The document is handed straight to FFmpeg's subtitle filter and to
existing renderers that expect this exact layout. These tests pin the
header byte-for-byte and check the structure for arbitrary input.
"""

from clip_renderer.core import generate_caption_document
from clip_renderer.core.document import SCRIPT_HEADER, assemble_document, to_segments
from clip_renderer.core.ir import DialogueSegment

EXPECTED_HEADER = """[Script Info]
Title: Viral Clip Subtitles
ScriptType: v4.00+
[V4+ Styles]
Style: DefaultV2,Arial,48,&H00FFFFFF,&H0000FFFF,&H00000000,&H99000000,-1,0,0,0,100,100,0,0,1,2,1,8,10,10,100,1
[Events]
Format: Layer, Start, End, Style, Name, MarginL, MarginR, MarginV, Effect, Text
"""


class TestHeader:

    def test_header_is_byte_exact(self):
        assert SCRIPT_HEADER == EXPECTED_HEADER

    def test_assemble_without_lines(self):
        assert assemble_document([]) == SCRIPT_HEADER

    def test_assemble_terminates_each_line(self):
        assert assemble_document(["a", "b"]) == SCRIPT_HEADER + "a\nb\n"


class TestGenerateCaptionDocument:

    def test_worked_example(self, example_dialogue):
        document = generate_caption_document(example_dialogue, 3.0)
        assert document == EXPECTED_HEADER + (
            "Dialogue: 0,0:00:00.00,0:00:02.00,DefaultV2,,0,0,0,,{\\k100}hello {\\k100}world\n"
            "Dialogue: 0,0:00:02.00,0:00:03.00,DefaultV2,,0,0,0,,{\\k100}goodbye\n"
        )

    def test_empty_transcript_is_header_only(self):
        assert generate_caption_document([], 12.0) == SCRIPT_HEADER

    def test_section_and_dialogue_counts(self):
        dialogue = [{"line": "one"}, {"line": ""}, {"line": "two three"}, {"line": "four"}]
        document = generate_caption_document(dialogue, 8.0)
        lines = document.splitlines()
        assert lines.count("[Script Info]") == 1
        assert lines.count("[V4+ Styles]") == 1
        assert lines.count("[Events]") == 1
        assert sum(1 for line in lines if line.startswith("Dialogue:")) == len(dialogue)

    def test_zero_word_transcript_has_zero_times(self):
        document = generate_caption_document([{"line": ""}, {"line": "  "}], 5.0)
        dialogue_lines = [l for l in document.splitlines() if l.startswith("Dialogue:")]
        assert dialogue_lines == [
            "Dialogue: 0,0:00:00.00,0:00:00.00,DefaultV2,,0,0,0,,",
            "Dialogue: 0,0:00:00.00,0:00:00.00,DefaultV2,,0,0,0,,",
        ]

    def test_zero_duration_gives_zero_tags(self):
        document = generate_caption_document([{"line": "a b"}], 0.0)
        assert "{\\k0}a {\\k0}b" in document

    def test_idempotent(self, example_dialogue):
        first = generate_caption_document(example_dialogue, 4.2)
        second = generate_caption_document(example_dialogue, 4.2)
        assert first == second

    def test_segments_and_dicts_are_equivalent(self, example_dialogue):
        segments = [DialogueSegment(line=d["line"]) for d in example_dialogue]
        assert generate_caption_document(segments, 3.0) == generate_caption_document(
            example_dialogue, 3.0
        )

    def test_missing_line_key_is_an_empty_caption(self):
        document = generate_caption_document([{}, {"line": None}, {"line": "hi"}], 1.0)
        assert document.endswith(
            "Dialogue: 0,0:00:00.00,0:00:00.00,DefaultV2,,0,0,0,,\n"
            "Dialogue: 0,0:00:00.00,0:00:00.00,DefaultV2,,0,0,0,,\n"
            "Dialogue: 0,0:00:00.00,0:00:01.00,DefaultV2,,0,0,0,,{\\k100}hi\n"
        )

    def test_negative_duration_is_clamped(self, example_dialogue):
        assert generate_caption_document(example_dialogue, -3.0) == generate_caption_document(
            example_dialogue, 0.0
        )


class TestToSegments:

    def test_mixed_input(self):
        segments = to_segments([DialogueSegment("a"), {"line": "b"}])
        assert segments == [DialogueSegment("a"), DialogueSegment("b")]

    def test_non_string_lines_are_stringified(self):
        assert to_segments([{"line": 42}]) == [DialogueSegment("42")]
