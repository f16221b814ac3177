"""Transcription layer - Note-level segmentation from audio.

This layer converts a recorded buffer into discrete note events:
- Sliding-window YIN pitch track
- Median denoising and semitone quantization
- Run-length merging into notes
"""

from .base import Transcriber
from .monophonic import (
    MonophonicTranscriber,
    SegmenterConfig,
    quantize_track,
    segment_notes,
)

__all__ = [
    "Transcriber",
    "MonophonicTranscriber",
    "SegmenterConfig",
    "quantize_track",
    "segment_notes",
]
