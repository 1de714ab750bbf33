"""Text filtering for the note list view."""

from __future__ import annotations

from collections.abc import Sequence

from .models import Note


def filter_notes(notes: Sequence[Note], term: str) -> list[Note]:
    """Case-insensitive substring match on title, content or category."""
    needle = term.strip().lower()
    if not needle:
        return list(notes)
    return [
        note
        for note in notes
        if needle in note.title.lower()
        or needle in note.content.lower()
        or needle in note.category.lower()
    ]
