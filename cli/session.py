"""Client session: cached notes, the active note and every note mutation.

All edits go through here so that each one is persisted first and only then
invalidates the cached collection. Nothing is applied locally before the store
accepts it, so a failed call leaves the session exactly as it was.
"""

from __future__ import annotations

from typing import Protocol

from pydantic import ValidationError as ModelValidationError

from core.errors import NotFoundError, SelfLinkError, ValidationError
from core.graph import Graph, connect, incoming_links, materialize
from core.links import add_link, link_candidates, remove_link
from core.models import DEFAULT_TITLE, Note, NoteLink, new_note
from core.search import filter_notes

from .cache import NoteCollectionCache


class NoteRepository(Protocol):
    """What the session needs from a note store client."""

    async def list_notes(self) -> list[Note]: ...

    async def get_note(self, note_id: str) -> Note: ...

    async def save_note(self, note: Note) -> Note: ...

    async def delete_note(self, note_id: str) -> None: ...


class NoteSession:
    """State behind the editing surface.

    Save responses are tagged with a per-note generation and the current
    selection generation. A response that comes back after a newer save of the
    same note, or after the user selected something else, is still returned to
    its caller but never replaces ``active_note``.
    """

    def __init__(self, repository: NoteRepository):
        self.repository = repository
        self.cache = NoteCollectionCache(repository.list_notes)
        self.active_note: Note | None = None
        self._generations: dict[str, int] = {}
        self._selection = 0

    @property
    def active_note_id(self) -> str | None:
        return self.active_note.id if self.active_note else None

    def _begin(self, note_id: str) -> tuple[int, int]:
        generation = self._generations.get(note_id, 0) + 1
        self._generations[note_id] = generation
        return generation, self._selection

    def _is_current(self, note_id: str, token: tuple[int, int]) -> bool:
        return token == (self._generations.get(note_id), self._selection)

    async def notes(self) -> list[Note]:
        return await self.cache.get()

    async def find(self, note_id: str) -> Note:
        """Look a note up in the cached collection.

        Raises:
            NotFoundError: no such note in the collection
        """
        for note in await self.notes():
            if note.id == note_id:
                return note
        raise NotFoundError(note_id)

    async def search(self, term: str) -> list[Note]:
        return filter_notes(await self.notes(), term)

    async def select(self, note_id: str | None) -> Note | None:
        """Make ``note_id`` the active note, or clear the selection."""
        note = await self.find(note_id) if note_id else None
        self._selection += 1
        self.active_note = note
        return note

    async def _persist(self, note: Note) -> Note:
        token = self._begin(note.id)
        try:
            saved = await self.repository.save_note(note)
        except Exception:
            # Only a successful save supersedes earlier ones
            if self._generations.get(note.id) == token[0]:
                self._generations[note.id] = token[0] - 1
            raise
        self.cache.invalidate()
        if self._is_current(note.id, token):
            self.active_note = saved
        return saved

    async def create_note(self, title: str = DEFAULT_TITLE) -> Note:
        """Create, persist and activate a new note."""
        return await self._persist(new_note(title or DEFAULT_TITLE))

    async def save(self, note: Note) -> Note:
        """Persist an edited note, stamping its modified date."""
        return await self._persist(note.touch())

    async def update_fields(self, note_id: str, **changes) -> Note:
        """Apply field changes to a note and persist it.

        Raises:
            ValidationError: a value is out of range for its field
        """
        note = await self.find(note_id)
        try:
            updated = note.touch(**changes)
        except ModelValidationError as e:
            raise ValidationError(
                f"Invalid value for {', '.join(changes)}",
                {"errors": e.errors(include_url=False)},
            ) from e
        return await self._persist(updated)

    async def link(self, note_id: str, target_id: str) -> Note:
        """Add an outgoing link from ``note_id`` to ``target_id``."""
        if note_id == target_id:
            raise SelfLinkError(note_id)
        note = await self.find(note_id)
        await self.find(target_id)

        linked = add_link(note.linked_notes, target_id)
        if linked == note.linked_notes:
            return note
        return await self.update_fields(note_id, linked_notes=linked)

    async def unlink(self, note_id: str, target_id: str) -> Note:
        """Remove the link from ``note_id`` to ``target_id`` if present."""
        note = await self.find(note_id)
        linked = remove_link(note.linked_notes, target_id)
        if linked == note.linked_notes:
            return note
        return await self.update_fields(note_id, linked_notes=linked)

    async def connect(self, source_id: str, target_id: str) -> Note:
        """Link two notes the way the map view does when an edge is drawn."""
        notes = await self.notes()
        updated = connect(source_id, target_id, notes)
        if updated.linked_notes == (await self.find(source_id)).linked_notes:
            return updated
        return await self.save(updated)

    async def candidates(self, note_id: str) -> list[NoteLink]:
        """Notes that ``note_id`` can still link to."""
        return link_candidates(await self.find(note_id), await self.notes())

    async def backlinks(self, note_id: str) -> list[NoteLink]:
        return incoming_links(note_id, await self.notes())

    async def delete(self, note_id: str) -> None:
        """Delete a note; the first remaining note becomes active if it was selected.

        The deleted note is deselected before the collection is refetched, so a
        failed refetch leaves nothing active rather than the deleted note.
        """
        await self.repository.delete_note(note_id)
        self.cache.invalidate()
        # Any save still in flight for this note must not resurrect it locally
        self._begin(note_id)

        if self.active_note_id != note_id:
            return

        self._selection += 1
        self.active_note = None
        selection = self._selection
        remaining = await self.notes()
        if selection == self._selection:
            self.active_note = remaining[0] if remaining else None

    async def graph(self) -> Graph:
        """Node/edge graph of the current collection."""
        return materialize(await self.notes(), self.active_note_id)
