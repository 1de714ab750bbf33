"""Tests for the MongoDB note store."""

from datetime import UTC, datetime

import pytest
from pymongo.errors import DuplicateKeyError

from api.services.note_store import validate_note
from core.errors import NotFoundError, SelfLinkError, ValidationError


@pytest.mark.asyncio
class TestNoteStore:
    """Test suite for NoteStore."""

    async def test_collections_and_indexes(self, db):
        """Test initialization creates the link uniqueness index."""
        collections = await db.list_collection_names()
        assert {"notes", "note_links"} <= set(collections)

        await db.note_links.insert_one({"note_id": "A", "linked_note_id": "B", "position": 0})
        with pytest.raises(DuplicateKeyError):
            await db.note_links.insert_one(
                {"note_id": "A", "linked_note_id": "B", "position": 1}
            )

    async def test_upsert_and_get(self, store, make_note):
        note = make_note("A", content="hello", mood=8, linked_notes=[])

        saved = await store.upsert_note(note)
        fetched = await store.get_note("A")

        assert saved == note
        assert fetched.content == "hello"
        assert fetched.mood == 8
        assert fetched.created_date == note.created_date
        assert fetched.created_date.tzinfo is not None

    async def test_get_missing(self, store):
        with pytest.raises(NotFoundError):
            await store.get_note("missing")

    async def test_links_keep_order(self, store, make_note):
        await store.upsert_note(make_note("A", linked_notes=["C", "B", "D"]))

        fetched = await store.get_note("A")

        assert fetched.linked_notes == ["C", "B", "D"]

    async def test_overwrite_replaces_all_fields(self, store, make_note):
        """Test an upsert replaces fields and the link set but keeps created_date."""
        first = make_note("A", linked_notes=["B", "C"])
        await store.upsert_note(first)

        second = make_note(
            "A",
            title="Second",
            linked_notes=["D"],
            created_date=datetime(2030, 1, 1, tzinfo=UTC),
            modified_date=datetime(2030, 1, 1, tzinfo=UTC),
        )
        saved = await store.upsert_note(second)
        fetched = await store.get_note("A")

        assert fetched.title == "Second"
        assert fetched.linked_notes == ["D"]
        assert fetched.created_date == first.created_date
        assert saved.created_date == first.created_date
        assert fetched.modified_date == datetime(2030, 1, 1, tzinfo=UTC)

    async def test_list_orders_by_modified_desc(self, store, make_note):
        await store.upsert_note(make_note("old", modified_date=datetime(2024, 1, 1, tzinfo=UTC)))
        await store.upsert_note(make_note("new", modified_date=datetime(2024, 9, 1, tzinfo=UTC)))
        await store.upsert_note(make_note("mid", modified_date=datetime(2024, 5, 1, tzinfo=UTC)))

        notes = await store.list_notes()

        assert [note.id for note in notes] == ["new", "mid", "old"]

    async def test_list_groups_links(self, store, make_note):
        await store.upsert_note(make_note("A", linked_notes=["B"]))
        await store.upsert_note(make_note("B", linked_notes=["A", "C"]))
        await store.upsert_note(make_note("C"))

        notes = {note.id: note for note in await store.list_notes()}

        assert notes["A"].linked_notes == ["B"]
        assert notes["B"].linked_notes == ["A", "C"]
        assert notes["C"].linked_notes == []

    async def test_delete_cascades_both_directions(self, store, db, make_note):
        """Test deleting B removes A->B and B->A."""
        await store.upsert_note(make_note("A", linked_notes=["B"]))
        await store.upsert_note(make_note("B", linked_notes=["A"]))
        await store.upsert_note(make_note("C", linked_notes=["A", "B"]))

        await store.delete_note("B")

        notes = {note.id: note for note in await store.list_notes()}
        assert set(notes) == {"A", "C"}
        assert notes["A"].linked_notes == []
        assert notes["C"].linked_notes == ["A"]
        assert await db.note_links.count_documents({"linked_note_id": "B"}) == 0
        assert await db.note_links.count_documents({"note_id": "B"}) == 0

    async def test_delete_missing(self, store):
        with pytest.raises(NotFoundError):
            await store.delete_note("missing")

    async def test_upsert_validation(self, store, make_note):
        """Test blank id and title are rejected before touching the database."""
        with pytest.raises(ValidationError):
            await store.upsert_note(make_note("", title="x"))
        with pytest.raises(ValidationError):
            await store.upsert_note(make_note("1").model_copy(update={"title": ""}))

        assert await store.list_notes() == []


class TestValidateNote:
    def test_blank_id(self, make_note):
        with pytest.raises(ValidationError):
            validate_note(make_note("   ", title="x"))

    def test_blank_title(self, make_note):
        with pytest.raises(ValidationError):
            validate_note(make_note("1").model_copy(update={"title": "  "}))

    def test_self_link(self, make_note):
        with pytest.raises(SelfLinkError):
            validate_note(make_note("A", linked_notes=["A"]))

    def test_duplicate_links(self, make_note):
        with pytest.raises(ValidationError):
            validate_note(make_note("A", linked_notes=["B", "B"]))

    def test_valid(self, make_note):
        validate_note(make_note("A", linked_notes=["B", "C"]))
