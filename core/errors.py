"""Error kinds surfaced by the note store, the API connector and the session.

Every failure that crosses a component boundary is one of these, so callers
can handle a missing note the same way whether it came from MongoDB or HTTP.
"""

from __future__ import annotations

from typing import Any


class NoteError(Exception):
    """Base exception for all note errors.

    Attributes:
        message: Human-readable error message
        details: Additional context about the error
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dict for error payloads."""
        return {"error": type(self).__name__, "message": self.message, "details": self.details}


class NotFoundError(NoteError):
    """Raised on read or delete of an unknown note ID."""

    def __init__(self, note_id: str):
        super().__init__(f"Note not found: {note_id}", {"note_id": note_id})
        self.note_id = note_id


class ValidationError(NoteError):
    """Raised when a note cannot be saved as given."""


class SelfLinkError(ValidationError):
    """Raised when a note would link to itself."""

    def __init__(self, note_id: str):
        super().__init__(f"Note cannot link to itself: {note_id}", {"note_id": note_id})
        self.note_id = note_id


class StoreUnavailableError(NoteError):
    """Raised when the backing store or the transport to it fails."""
