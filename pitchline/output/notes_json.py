"""Note lists as plain JSON arrays of {id, start, duration, midi} records.

This is the reference-score format consumed by the overlay view.  There is
no version marker; any record with the four fields is accepted.
"""

import json
from pathlib import Path
from typing import Any, Dict, List

from ..core import Note


def notes_to_records(notes: List[Note]) -> List[Dict[str, Any]]:
    """Convert notes to plain records, preserving order."""
    return [note.to_dict() for note in notes]


def records_to_notes(records: List[Dict[str, Any]]) -> List[Note]:
    """
    Convert plain records back to notes.

    Raises:
        ValueError: If the payload is not a list or a record is malformed
    """
    if not isinstance(records, list):
        raise ValueError("Note file must contain a JSON array of records")
    return [Note.from_dict(record) for record in records]


def save_notes(notes: List[Note], output_path: str, indent: int = 2) -> None:
    """Write notes to a JSON file, creating parent directories."""
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(notes_to_records(notes), indent=indent), encoding="utf-8")


def load_notes(path: str) -> List[Note]:
    """Read notes from a JSON file."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    return records_to_notes(data)
