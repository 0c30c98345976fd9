"""Clip Renderer — webhook-driven karaoke clip rendering service.

WHY: Short vertical clips (artwork + audio + word-by-word captions) are
requested by inserting a row into a Supabase ``video_jobs`` table. Someone
has to pick that job up, time the captions against the audio, burn them
into a video, and publish the result. This package is that someone.

HOW: Three-stage pipeline: caption generation (core, pure functions),
encoding (pluggable encoder, FFmpeg by default), and publishing (Supabase
storage + job status). Each stage is independently testable.

RULES:
- The core never does I/O; it maps (dialogue, duration) to an ASS document
- Encoders are swappable behind BaseEncoder without touching the core
- Job status always ends in 'complete' or 'failed'
"""

__version__ = "0.1.0"
