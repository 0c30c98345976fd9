"""Caption generation core — pure functions from dialogue to ASS text.

WHY: The only part of the renderer with real logic is deciding when each
caption shows up and how long each karaoke word is highlighted. Keeping
it free of I/O makes it trivially testable and safe to call repeatedly.

HOW: ir.py defines the data structures, timing.py allocates durations
and formats timestamps, captions.py folds segments into timed events,
document.py wraps the events in the fixed ASS header.

RULES:
- No module in core performs network, file, or process operations
- No module-level mutable state; every call starts from scratch
"""

from clip_renderer.core.document import generate_caption_document
from clip_renderer.core.ir import CaptionEvent, DialogueSegment

__all__ = ["CaptionEvent", "DialogueSegment", "generate_caption_document"]
