"""Abstract base encoder and its input bundle.

WHY: The renderer only needs "turn these files plus this filter graph into
an MP4". Whether that happens by shelling out to a static FFmpeg binary
or through some embedded engine is a deployment detail. One interface
keeps that choice out of the pipeline and out of the caption core.

HOW: BaseEncoder is an ABC with a ``name`` property and an ``encode()``
method. EncodeInputs bundles the three input files. Failures of any kind
surface as EncoderError.

To add a new encoder:
1. Create a new module in encoder/
2. Subclass BaseEncoder
3. Implement encode() and name
4. Register it in ENCODERS in encoder/__init__.py
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path


class EncoderError(Exception):
    """Raised when an encoder cannot produce the output file.

    RULES:
    - message is human-readable and safe to store on the job record
    - stderr holds the tail of the tool's diagnostic output, if any
    """

    def __init__(self, message: str, stderr: str = "") -> None:
        self.stderr = stderr
        super().__init__(message)


@dataclass(frozen=True)
class EncodeInputs:
    """Files the encoder consumes.

    Attributes:
        artwork_path: Still image used as the video background.
        audio_path: Audio track; its length bounds the output.
        subtitle_path: ASS document referenced by the filter graph.
    """

    artwork_path: Path
    audio_path: Path
    subtitle_path: Path


class BaseEncoder(ABC):
    """Abstract base for all encoders."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable encoder name, e.g. 'FFmpeg (subprocess)'."""

    @abstractmethod
    def encode(self, inputs: EncodeInputs, filter_graph: str, output_path: Path) -> Path:
        """Render ``inputs`` through ``filter_graph`` into ``output_path``.

        Returns:
            The path of the written artifact (normally ``output_path``).

        Raises:
            EncoderError: If the output could not be produced.
        """
