"""Output layer - Export note lists.

This layer handles exporting segmented melodies to:
- Plain JSON note records (reference score format)
- MIDI files
"""

from .notes_json import notes_to_records, records_to_notes, save_notes, load_notes
from .midi import MIDIExporter

__all__ = [
    "notes_to_records",
    "records_to_notes",
    "save_notes",
    "load_notes",
    "MIDIExporter",
]
