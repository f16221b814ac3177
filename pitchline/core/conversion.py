"""Pitch and time conversions (A4 = 440 Hz, 12-tone equal temperament)."""

import math
from typing import Optional

import numpy as np

from .constants import A4_HZ, A4_MIDI, PITCH_NAMES, SOLFEGE_NAMES


def hz_to_midi(hz: Optional[float]) -> Optional[float]:
    """
    Convert a frequency to a (fractional) MIDI note number.

    Args:
        hz: Frequency in Hz, or None for an unvoiced frame

    Returns:
        MIDI number as a float (not rounded), or None when hz is absent,
        NaN, zero or negative
    """
    if hz is None or not math.isfinite(hz) or hz <= 0:
        return None
    return A4_MIDI + 12.0 * math.log2(hz / A4_HZ)


def midi_to_hz(midi: float) -> float:
    """Convert a MIDI note number to frequency (Hz)."""
    return A4_HZ * (2.0 ** ((midi - A4_MIDI) / 12.0))


def _pitch_index(midi: float) -> int:
    # Round half up, so 60.5 belongs to C#4 rather than to an even neighbour
    return int(math.floor(midi + 0.5))


def midi_to_note_name(midi: float) -> str:
    """Get the sharp-spelled note name with octave (60 -> 'C4')."""
    m = _pitch_index(midi)
    octave = m // 12 - 1
    return f"{PITCH_NAMES[m % 12]}{octave}"


def midi_to_solfege(midi: float) -> str:
    """Get the fixed-do solfege syllable, without octave (60 -> 'Do')."""
    return SOLFEGE_NAMES[_pitch_index(midi) % 12]


def f0_to_midi(f0: np.ndarray) -> np.ndarray:
    """Convert an f0 track to fractional MIDI numbers (NaN where unvoiced)."""
    f0 = np.asarray(f0, dtype=float)
    with np.errstate(divide="ignore", invalid="ignore"):
        midi = A4_MIDI + 12.0 * np.log2(f0 / A4_HZ)
    return np.where(np.isfinite(midi) & (f0 > 0), midi, np.nan)


def seconds_to_ms(seconds: float) -> float:
    return seconds * 1000.0


def ms_to_seconds(ms: float) -> float:
    return ms / 1000.0
