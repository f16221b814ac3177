"""Note data class - the unit of a segmented melody."""

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict

from .conversion import midi_to_hz, midi_to_note_name, midi_to_solfege

NOTE_FIELDS = ("id", "start", "duration", "midi")


def new_note_id() -> str:
    """Generate a fresh, unique note identifier."""
    return uuid.uuid4().hex


@dataclass(frozen=True)
class Note:
    """A committed melody note."""

    start: float  # Start time in seconds
    duration: float  # Length in seconds
    midi: int  # Quantized MIDI pitch
    id: str = field(default_factory=new_note_id)

    @property
    def end(self) -> float:
        """End time in seconds."""
        return self.start + self.duration

    @property
    def pitch_name(self) -> str:
        """Get note name (e.g., 'C4', 'A#3')."""
        return midi_to_note_name(self.midi)

    @property
    def solfege(self) -> str:
        """Get solfege syllable (e.g., 'Do')."""
        return midi_to_solfege(self.midi)

    @property
    def frequency(self) -> float:
        """Nominal frequency of the quantized pitch in Hz."""
        return midi_to_hz(self.midi)

    def overlaps(self, other: "Note") -> bool:
        return self.start < other.end and other.start < self.end

    def to_dict(self) -> Dict[str, Any]:
        """Plain four-field record."""
        return {
            "id": self.id,
            "start": self.start,
            "duration": self.duration,
            "midi": self.midi,
        }

    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> "Note":
        """
        Build a Note from a four-field record.

        Raises:
            ValueError: If the record is not an object, a field is missing or
                not numeric, or the duration is not positive
        """
        if not isinstance(record, dict):
            raise ValueError(f"Note record must be an object, got {type(record).__name__}")

        missing = [key for key in NOTE_FIELDS if key not in record]
        if missing:
            raise ValueError(f"Note record missing fields: {', '.join(missing)}")

        try:
            start = float(record["start"])
            duration = float(record["duration"])
            midi = int(round(float(record["midi"])))
        except (TypeError, ValueError, OverflowError) as e:
            raise ValueError(f"Invalid note record {record!r}: {e}") from e

        if duration <= 0:
            raise ValueError(f"Note duration must be positive, got {duration}")

        return cls(start=start, duration=duration, midi=midi, id=str(record["id"]))
