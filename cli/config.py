"""Configuration and storage utilities for CLI client."""

import os
from pathlib import Path

# Configuration
API_URL = os.getenv("NOTESVAULT_API_URL", "http://localhost:8000")
ACTIVE_NOTE_FILE = Path(
    os.getenv("NOTESVAULT_HOME", str(Path.home() / ".notesvault"))
) / "active_note"


def save_active_note(note_id: str):
    """Remember the selected note between runs."""
    ACTIVE_NOTE_FILE.parent.mkdir(parents=True, exist_ok=True)
    ACTIVE_NOTE_FILE.write_text(note_id)


def load_active_note() -> str | None:
    """Load the remembered note ID, if any."""
    if ACTIVE_NOTE_FILE.exists():
        return ACTIVE_NOTE_FILE.read_text().strip() or None
    return None


def delete_active_note():
    """Forget the remembered note."""
    if ACTIVE_NOTE_FILE.exists():
        ACTIVE_NOTE_FILE.unlink()
