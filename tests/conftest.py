"""Pytest configuration and shared fixtures."""

import os
from datetime import UTC, datetime

# Keep span and metric exporters quiet during tests
os.environ.setdefault("OTEL_TRACES_EXPORTER", "none")
os.environ.setdefault("OTEL_METRICS_EXPORTER", "none")
os.environ.setdefault("LOG_FORMAT", "console")

import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from api.app import create_app
from api.database import Database
from api.services.note_store import NoteStore
from core.models import Note


@pytest.fixture(scope="session")
def test_db_name():
    """Database name for testing."""
    return "notesvault_test"


@pytest.fixture
def mongo_client():
    """In-memory motor-compatible client."""
    return AsyncMongoMockClient()


@pytest.fixture
async def db(mongo_client, test_db_name):
    """Initialized database with collections and indexes in place."""
    database = Database(db_name=test_db_name, init_db=True, client=mongo_client)
    await database.connect()
    yield database.get_database()


@pytest.fixture
def store(db):
    return NoteStore(db)


@pytest.fixture
def api_client(mongo_client, test_db_name):
    """FastAPI test client fixture with lifespan context."""
    app = create_app(Database(db_name=test_db_name, init_db=True, client=mongo_client))
    with TestClient(app) as client:
        yield client


@pytest.fixture
def make_note():
    """Factory for notes with fixed, millisecond-aligned timestamps."""

    def _make(note_id: str, title: str | None = None, linked_notes=None, **fields) -> Note:
        stamp = fields.pop("stamp", datetime(2024, 5, 1, 12, 0, tzinfo=UTC))
        return Note(
            id=note_id,
            title=title or f"Note {note_id}",
            created_date=fields.pop("created_date", stamp),
            modified_date=fields.pop("modified_date", stamp),
            linked_notes=list(linked_notes or []),
            **fields,
        )

    return _make


@pytest.fixture
def sample_note_data():
    """Sample note payload as it travels over the wire."""
    return {
        "id": "note-1",
        "title": "Test Note",
        "content": "# Test Note\n\nThis is a test note.",
        "created_date": "2024-05-01T12:00:00+00:00",
        "modified_date": "2024-05-01T12:00:00+00:00",
        "mood": 7,
        "priority": "high",
        "category": "work",
        "status": "in-progress",
        "linked_notes": [],
    }
