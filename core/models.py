"""Note domain models."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

Priority = Literal["low", "medium", "high"]
Status = Literal["draft", "in-progress", "complete"]

DEFAULT_TITLE = "Untitled Note"


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    # MongoDB hands back naive datetimes that are UTC by convention
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class Note(BaseModel):
    """A titled text document with metadata and outgoing links.

    Attributes:
        id: Client-generated identifier, stable for the note's lifetime
        title: Note title
        content: Free text body
        created_date: Set once at creation
        modified_date: Stamped on every mutation
        mood: 1-10 scale
        priority: low, medium or high
        category: Free text, may be empty
        status: draft, in-progress or complete
        linked_notes: IDs of notes this note points to
    """

    id: str
    title: str
    content: str = ""
    created_date: datetime
    modified_date: datetime
    mood: int = Field(default=5, ge=1, le=10)
    priority: Priority = "medium"
    category: str = ""
    status: Status = "draft"
    linked_notes: list[str] = Field(default_factory=list)

    @field_validator("created_date", "modified_date")
    @classmethod
    def _as_utc(cls, value: datetime) -> datetime:
        return as_utc(value)

    def touch(self, **changes: Any) -> Note:
        """Return a validated copy with ``changes`` applied and a fresh ``modified_date``."""
        return Note.model_validate({**self.model_dump(), **changes, "modified_date": utcnow()})

    def as_link(self) -> NoteLink:
        return NoteLink(id=self.id, title=self.title)


class NoteLink(BaseModel):
    """Lightweight reference to a note, used in link pickers."""

    id: str
    title: str


def new_note(title: str = DEFAULT_TITLE, **fields: Any) -> Note:
    """Create a note with a fresh ID and default field values.

    ``created_date`` and ``modified_date`` start out equal.
    """
    now = utcnow()
    return Note(
        id=str(uuid.uuid4()),
        title=title,
        created_date=now,
        modified_date=now,
        **fields,
    )
