"""Command-line interface for the Clip Renderer.

WHY: Caption timing and encoder settings are much easier to tune from a
terminal than through webhooks. The CLI exposes the same core and encoder
the server uses, plus helpers to provision FFmpeg and start the API.

HOW: argparse with four subcommands:
  captions        — dialogue JSON + duration → ASS document
  render          — artwork + audio + dialogue → local MP4 (no upload)
  install-ffmpeg  — download a static FFmpeg build
  serve           — run the FastAPI app under uvicorn
Status messages go to stderr; the ASS document goes to stdout when no
output file is given, so it can be piped.

RULES:
- Dialogue JSON may be a list of {"line": ...} objects, or an object with
  a "dialogue" list (a job_payload), whose "audio_duration" is used when
  --duration is omitted
- Exit status 0 on success, 1 on any handled error
- Python 3.9.6 compatible: no match/case, no X | Y unions
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import tempfile
from pathlib import Path
from typing import Any, List, Optional, Tuple

from clip_renderer.config import API_HOST, API_PORT, CLIP_ENCODER, FFMPEG_INSTALL_DIR
from clip_renderer.core.document import generate_caption_document
from clip_renderer.encoder import ENCODERS, EncodeInputs, EncoderError, get_encoder
from clip_renderer.encoder.filters import build_filter_graph

logger = logging.getLogger(__name__)


def _status(msg: str) -> None:
    """Print a status message to stderr."""
    print(msg, file=sys.stderr, flush=True)


def load_dialogue(path: Path) -> Tuple[List[Any], Optional[float]]:
    """Read dialogue (and an optional duration) from a JSON file.

    Returns:
        (dialogue entries, audio_duration or None)

    Raises:
        ValueError: If the JSON is neither a list nor an object with a
            "dialogue" list, or if any entry is not a {"line": ...} object.
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if isinstance(data, list):
        dialogue, duration = data, None
    elif isinstance(data, dict) and isinstance(data.get("dialogue"), list):
        dialogue, duration = data["dialogue"], data.get("audio_duration")
    else:
        raise ValueError(
            "{}: expected a list of {{\"line\": ...}} objects or an object "
            "with a \"dialogue\" list".format(path)
        )

    for index, entry in enumerate(dialogue):
        if not isinstance(entry, dict):
            raise ValueError(
                "{}: dialogue entry {} is not a {{\"line\": ...}} object".format(path, index)
            )
    if duration is None:
        return dialogue, None
    try:
        return dialogue, float(duration)
    except (TypeError, ValueError):
        raise ValueError("{}: audio_duration must be a number".format(path))


def _resolve_duration(args: argparse.Namespace, payload_duration: Optional[float]) -> float:
    if args.duration is not None:
        return args.duration
    if payload_duration is not None:
        return payload_duration
    raise ValueError("--duration is required when the dialogue file has no audio_duration")


# ---------------------------------------------------------------------------
# Subcommands
# ---------------------------------------------------------------------------


def _cmd_captions(args: argparse.Namespace) -> int:
    dialogue, payload_duration = load_dialogue(args.dialogue)
    document = generate_caption_document(dialogue, _resolve_duration(args, payload_duration))

    if args.output:
        Path(args.output).write_text(document, encoding="utf-8")
        _status("Wrote {} ({} captions)".format(args.output, len(dialogue)))
    else:
        sys.stdout.write(document)
    return 0


def _cmd_render(args: argparse.Namespace) -> int:
    dialogue, payload_duration = load_dialogue(args.dialogue)
    duration = _resolve_duration(args, payload_duration)
    encoder = get_encoder(args.encoder)
    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.TemporaryDirectory(prefix="clip_render_") as tmp:
        subtitle_path = Path(tmp) / "subs.ass"
        subtitle_path.write_text(generate_caption_document(dialogue, duration), encoding="utf-8")
        inputs = EncodeInputs(
            artwork_path=Path(args.artwork),
            audio_path=Path(args.audio),
            subtitle_path=subtitle_path,
        )
        _status("Rendering with {}...".format(encoder.name))
        encoder.encode(inputs, build_filter_graph(subtitle_path), output_path)

    _status("Saved: {}".format(output_path))
    return 0


def _cmd_install_ffmpeg(args: argparse.Namespace) -> int:
    from clip_renderer.encoder.install import install_ffmpeg

    binary = install_ffmpeg(dest_dir=Path(args.dest), url=args.url)
    _status("FFmpeg installed at {}".format(binary))
    return 0


def _cmd_serve(args: argparse.Namespace) -> int:
    from clip_renderer.server.app import run_api

    run_api(host=args.host, port=args.port)
    return 0


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="clip_renderer",
        description="Render vertical karaoke clips and their ASS captions.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    captions = subparsers.add_parser(
        "captions",
        help="Write the karaoke ASS document for a dialogue file.",
    )
    captions.add_argument("dialogue", type=Path, help="Dialogue JSON file.")
    captions.add_argument(
        "--duration",
        type=float,
        default=None,
        help="Audio duration in seconds (default: audio_duration from the file).",
    )
    captions.add_argument(
        "-o", "--output",
        default=None,
        help="Output .ass path (default: stdout).",
    )
    captions.set_defaults(func=_cmd_captions)

    render = subparsers.add_parser(
        "render",
        help="Render a clip locally (no upload, no job status).",
    )
    render.add_argument("--artwork", required=True, help="Background image file.")
    render.add_argument("--audio", required=True, help="Audio file.")
    render.add_argument("--dialogue", required=True, type=Path, help="Dialogue JSON file.")
    render.add_argument(
        "--duration",
        type=float,
        default=None,
        help="Audio duration in seconds (default: audio_duration from the file).",
    )
    render.add_argument("-o", "--output", required=True, help="Output .mp4 path.")
    render.add_argument(
        "--encoder",
        default=CLIP_ENCODER,
        choices=sorted(ENCODERS),
        help="Encoder to use (default: %(default)s).",
    )
    render.set_defaults(func=_cmd_render)

    install = subparsers.add_parser(
        "install-ffmpeg",
        help="Download a static FFmpeg build.",
    )
    install.add_argument(
        "--dest",
        default=FFMPEG_INSTALL_DIR,
        help="Install directory (default: %(default)s).",
    )
    install.add_argument("--url", default=None, help="Override the archive URL.")
    install.set_defaults(func=_cmd_install_ffmpeg)

    serve = subparsers.add_parser("serve", help="Run the webhook API server.")
    serve.add_argument("--host", default=API_HOST, help="Bind address (default: %(default)s).")
    serve.add_argument("--port", type=int, default=API_PORT, help="Port (default: %(default)s).")
    serve.set_defaults(func=_cmd_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        return args.func(args)
    except (EncoderError, ValueError, OSError) as exc:
        _status("Error: {}".format(exc))
        return 1


if __name__ == "__main__":
    sys.exit(main())
