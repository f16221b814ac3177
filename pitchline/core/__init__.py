"""Core types, constants and pitch math for pitchline."""

from .note import Note, new_note_id
from .errors import ConfigurationError
from .conversion import (
    hz_to_midi,
    midi_to_hz,
    midi_to_note_name,
    midi_to_solfege,
    f0_to_midi,
    seconds_to_ms,
    ms_to_seconds,
)
from .constants import (
    PITCH_NAMES,
    SOLFEGE_NAMES,
    DEFAULT_SR,
    FRAME_SIZE,
    HOP_SIZE,
    MIN_NOTE_DURATION,
)

__all__ = [
    "Note",
    "new_note_id",
    "ConfigurationError",
    "hz_to_midi",
    "midi_to_hz",
    "midi_to_note_name",
    "midi_to_solfege",
    "f0_to_midi",
    "seconds_to_ms",
    "ms_to_seconds",
    "PITCH_NAMES",
    "SOLFEGE_NAMES",
    "DEFAULT_SR",
    "FRAME_SIZE",
    "HOP_SIZE",
    "MIN_NOTE_DURATION",
]
