from tests.fakes.fake_note_repository import FakeNoteRepository

__all__ = ["FakeNoteRepository"]
