"""Link editing over a single note's outgoing link list.

All functions are pure: they return new lists and never touch the note. The
caller merges the result back (``note.touch(linked_notes=...)``) and saves it.
"""

from __future__ import annotations

from collections.abc import Sequence

from .models import Note, NoteLink


def add_link(linked_notes: Sequence[str], note_id: str) -> list[str]:
    """Append ``note_id`` unless it is already linked."""
    if note_id in linked_notes:
        return list(linked_notes)
    return [*linked_notes, note_id]


def remove_link(linked_notes: Sequence[str], note_id: str) -> list[str]:
    """Drop every occurrence of ``note_id``."""
    return [linked_id for linked_id in linked_notes if linked_id != note_id]


def link_candidates(note: Note, notes: Sequence[Note]) -> list[NoteLink]:
    """Notes that ``note`` could link to next.

    Excludes the note itself and anything it already links to.
    """
    excluded = {note.id, *note.linked_notes}
    return [other.as_link() for other in notes if other.id not in excluded]
