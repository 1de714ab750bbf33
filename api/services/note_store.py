"""MongoDB-backed note store.

Notes live in the ``notes`` collection keyed by their client-generated ID.
Links are kept apart in ``note_links``, one document per directed link, so a
delete can clean up references in both directions with a single query.
"""

from __future__ import annotations

from collections import defaultdict
from time import time
from typing import Any

import structlog
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from core.errors import NotFoundError, SelfLinkError, StoreUnavailableError, ValidationError
from core.models import Note, as_utc

from ..observability import get_app_metrics, get_tracer

logger = structlog.get_logger(__name__)

tracer = get_tracer(__name__)


def validate_note(note: Note) -> None:
    """Check a note can be persisted.

    Raises:
        ValidationError: blank ``id`` or ``title``, or duplicate link IDs
        SelfLinkError: the note links to itself
    """
    if not note.id or not note.id.strip():
        raise ValidationError("Note ID is required", {"field": "id"})
    if not note.title or not note.title.strip():
        raise ValidationError("Note title is required", {"field": "title", "note_id": note.id})
    if note.id in note.linked_notes:
        raise SelfLinkError(note.id)
    if len(set(note.linked_notes)) != len(note.linked_notes):
        raise ValidationError(
            "Linked notes must not contain duplicates",
            {"field": "linked_notes", "note_id": note.id},
        )


def _to_document(note: Note) -> dict[str, Any]:
    doc = note.model_dump(exclude={"id", "linked_notes"})
    doc["_id"] = note.id
    return doc


def _from_document(doc: dict[str, Any], linked_notes: list[str]) -> Note:
    fields = {key: value for key, value in doc.items() if key != "_id"}
    return Note(id=doc["_id"], linked_notes=linked_notes, **fields)


class NoteStore:
    """CRUD access to notes and their link rows."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.metrics = get_app_metrics()

    def _record_duration(self, operation: str, started: float) -> None:
        self.metrics.db_query_duration.record(
            (time() - started) * 1000, {"db.operation": operation}
        )

    async def list_notes(self) -> list[Note]:
        """All notes, most recently modified first."""
        with tracer.start_as_current_span("store.list_notes") as span:
            started = time()
            try:
                cursor = self.db.notes.find({}).sort("modified_date", -1)
                docs = await cursor.to_list(length=None)

                link_cursor = self.db.note_links.find({}).sort(
                    [("note_id", 1), ("position", 1)]
                )
                link_docs = await link_cursor.to_list(length=None)
            except PyMongoError as e:
                logger.error("notes_list_failed", error=str(e))
                raise StoreUnavailableError("Failed to fetch notes") from e

            links: dict[str, list[str]] = defaultdict(list)
            for link in link_docs:
                links[link["note_id"]].append(link["linked_note_id"])

            notes = [_from_document(doc, links.get(doc["_id"], [])) for doc in docs]

            self._record_duration("list_notes", started)
            span.set_attribute("notes.count", len(notes))
            logger.info("notes_listed", count=len(notes))
            return notes

    async def get_note(self, note_id: str) -> Note:
        """Fetch one note with its outgoing links.

        Raises:
            NotFoundError: no note with ``note_id``
        """
        with tracer.start_as_current_span("store.get_note") as span:
            span.set_attribute("note.id", note_id)
            try:
                doc = await self.db.notes.find_one({"_id": note_id})
                if doc is None:
                    logger.warning("get_note_not_found", note_id=note_id)
                    raise NotFoundError(note_id)
                link_docs = (
                    await self.db.note_links.find({"note_id": note_id})
                    .sort("position", 1)
                    .to_list(length=None)
                )
            except PyMongoError as e:
                logger.error("get_note_failed", note_id=note_id, error=str(e))
                raise StoreUnavailableError("Failed to fetch note", {"note_id": note_id}) from e

            logger.info("note_retrieved", note_id=note_id)
            return _from_document(doc, [link["linked_note_id"] for link in link_docs])

    async def upsert_note(self, note: Note) -> Note:
        """Create or fully overwrite a note, replacing its link set.

        ``created_date`` of an existing note is kept as first stored.

        Raises:
            ValidationError: see ``validate_note``
        """
        with tracer.start_as_current_span("store.upsert_note") as span:
            span.set_attribute("note.id", note.id)
            span.set_attribute("note.links_count", len(note.linked_notes))

            validate_note(note)

            started = time()
            try:
                existing = await self.db.notes.find_one({"_id": note.id}, {"created_date": 1})
                if existing is not None:
                    note = note.model_copy(update={"created_date": as_utc(existing["created_date"])})

                await self.db.notes.replace_one({"_id": note.id}, _to_document(note), upsert=True)

                await self.db.note_links.delete_many({"note_id": note.id})
                if note.linked_notes:
                    await self.db.note_links.insert_many(
                        [
                            {"note_id": note.id, "linked_note_id": linked_id, "position": position}
                            for position, linked_id in enumerate(note.linked_notes)
                        ]
                    )
            except PyMongoError as e:
                logger.error("note_save_failed", note_id=note.id, error=str(e))
                raise StoreUnavailableError("Failed to save note", {"note_id": note.id}) from e

            self._record_duration("upsert_note", started)
            self.metrics.notes_saved.add(1, {"created": existing is None})
            span.set_attribute("note.created", existing is None)
            logger.info(
                "note_saved",
                note_id=note.id,
                created=existing is None,
                links=len(note.linked_notes),
            )
            return note

    async def delete_note(self, note_id: str) -> None:
        """Remove a note and every link pointing to or from it.

        Links go first, then the note. The two steps are not atomic; readers
        tolerate whatever dangling IDs a failure in between leaves behind.

        Raises:
            NotFoundError: no note with ``note_id``
        """
        with tracer.start_as_current_span("store.delete_note") as span:
            span.set_attribute("note.id", note_id)
            try:
                existing = await self.db.notes.find_one({"_id": note_id}, {"_id": 1})
                if existing is None:
                    logger.warning("delete_note_not_found", note_id=note_id)
                    raise NotFoundError(note_id)

                result = await self.db.note_links.delete_many(
                    {"$or": [{"note_id": note_id}, {"linked_note_id": note_id}]}
                )
                await self.db.notes.delete_one({"_id": note_id})
            except PyMongoError as e:
                logger.error("note_delete_failed", note_id=note_id, error=str(e))
                raise StoreUnavailableError("Failed to delete note", {"note_id": note_id}) from e

            self.metrics.notes_deleted.add(1)
            self.metrics.links_removed.add(result.deleted_count)
            span.set_attribute("note.links_removed", result.deleted_count)
            logger.info(
                "note_deleted_successfully", note_id=note_id, links_removed=result.deleted_count
            )
