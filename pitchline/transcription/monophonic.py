"""Monophonic transcription: YIN pitch track -> median filter -> notes."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from .base import Transcriber
from ..analysis import PitchAnalyzer, YinConfig
from ..core import ConfigurationError, Note, f0_to_midi
from ..core.constants import FRAME_SIZE, HOP_SIZE, MEDIAN_WINDOW, MIN_NOTE_DURATION
from ..processing import median_filter

logger = logging.getLogger(__name__)


@dataclass
class SegmenterConfig:
    """Configuration for offline melody segmentation.

    Attributes:
        frame_size: Analysis window in samples (default: 2048)
        hop_length: Samples between windows (default: 512)
        median_window: Median filter width in frames (default: 7)
        min_note_duration: Shortest note kept, in seconds (default: 0.08)
        yin: YIN settings; the sample rate is taken from the buffer
        n_jobs: Worker threads for per-window estimation (default: 1)
    """

    frame_size: int = FRAME_SIZE
    hop_length: int = HOP_SIZE
    median_window: int = MEDIAN_WINDOW
    min_note_duration: float = MIN_NOTE_DURATION
    yin: YinConfig = field(default_factory=YinConfig)
    n_jobs: int = 1

    def __post_init__(self):
        if self.median_window < 1:
            raise ConfigurationError(
                f"median_window must be positive, got {self.median_window}"
            )
        if self.min_note_duration < 0:
            raise ConfigurationError(
                f"min_note_duration must not be negative, got {self.min_note_duration}"
            )


def quantize_track(f0: np.ndarray) -> np.ndarray:
    """Round an f0 track to the nearest semitone (NaN stays unvoiced)."""
    midi = f0_to_midi(f0)
    # floor(x + 0.5) rounds halves up, matching note name lookup
    return np.floor(midi + 0.5)


def segment_notes(
    pitches: np.ndarray,
    frame_duration: float,
    min_duration: float = MIN_NOTE_DURATION,
) -> List[Note]:
    """
    Merge runs of equal quantized pitch into notes.

    Args:
        pitches: Quantized MIDI pitch per frame, NaN where unvoiced
        frame_duration: Seconds between frame starts (hop / sr)
        min_duration: Runs shorter than this are dropped

    Returns:
        Notes in time order; runs never overlap
    """
    notes: List[Note] = []
    cur_start = 0.0
    cur_midi: Optional[int] = None

    def close(end: float) -> None:
        duration = end - cur_start
        if duration >= min_duration and duration > 0:
            notes.append(Note(start=cur_start, duration=duration, midi=cur_midi))

    for i, value in enumerate(np.asarray(pitches, dtype=float)):
        t = i * frame_duration

        if not np.isfinite(value):
            if cur_midi is not None:
                close(t)
                cur_midi = None
            continue

        q = int(value)
        if cur_midi is None:
            cur_midi = q
            cur_start = t
        elif q != cur_midi:
            close(t)
            cur_midi = q
            cur_start = t

    if cur_midi is not None:
        close(len(pitches) * frame_duration)

    return notes


class MonophonicTranscriber(Transcriber):
    """Transcribes a monophonic buffer into semitone-quantized notes."""

    def __init__(self, config: Optional[SegmenterConfig] = None):
        """
        Initialize MonophonicTranscriber.

        Args:
            config: Segmentation settings (defaults: 2048/512 window/hop,
                median of 7 frames, 80 ms minimum note)
        """
        self.config = config or SegmenterConfig()
        self.analyzer = PitchAnalyzer(
            config=self.config.yin,
            frame_size=self.config.frame_size,
            hop_length=self.config.hop_length,
            n_jobs=self.config.n_jobs,
        )

    def transcribe(self, audio: np.ndarray, sr: int) -> List[Note]:
        """
        Transcribe monophonic audio to notes.

        Args:
            audio: Audio array (mono)
            sr: Sample rate

        Returns:
            List of detected notes
        """
        if sr <= 0:
            raise ConfigurationError(f"Sample rate must be positive, got {sr}")

        f0, _ = self.analyzer.detect_f0(audio, sr)
        smoothed = median_filter(f0, self.config.median_window)
        pitches = quantize_track(smoothed)

        notes = segment_notes(
            pitches,
            frame_duration=self.config.hop_length / sr,
            min_duration=self.config.min_note_duration,
        )

        logger.info(
            "Segmented %.2fs of audio into %d notes (%d frames)",
            len(audio) / sr,
            len(notes),
            len(pitches),
        )
        return notes
