"""Tests for REPL command handlers."""

import pytest

import cli.config
from cli.commands import (
    connect_notes,
    create_note,
    delete_note,
    list_notes,
    set_field,
    show_graph,
    view_note,
)
from cli.session import NoteSession
from tests.fakes import FakeNoteRepository


@pytest.fixture(autouse=True)
def active_note_file(tmp_path, monkeypatch):
    path = tmp_path / "active_note"
    monkeypatch.setattr(cli.config, "ACTIVE_NOTE_FILE", path)
    return path


@pytest.fixture
def session(make_note):
    return NoteSession(
        FakeNoteRepository(
            [
                make_note("A", title="Alpha", linked_notes=["B", "gone"]),
                make_note("B", title="Beta", category="work"),
            ]
        )
    )


@pytest.mark.asyncio
class TestNoteCommands:
    async def test_create_remembers_active_note(self, session, active_note_file, capsys):
        await create_note(session, "Groceries")

        assert "New note created" in capsys.readouterr().out
        assert active_note_file.read_text() == session.active_note_id

    async def test_list_with_search(self, session, capsys):
        await list_notes(session, "work")

        out = capsys.readouterr().out
        assert "Beta" in out
        assert "Alpha" not in out

    async def test_list_no_match(self, session, capsys):
        await list_notes(session, "nothing")

        assert "No notes found matching 'nothing'" in capsys.readouterr().out

    async def test_view_shows_links_both_ways(self, session, capsys):
        """Test dangling link IDs are left out of the view."""
        await view_note(session, "B")
        out = capsys.readouterr().out
        assert "Linked from: Alpha" in out
        assert "Links to: none" in out

        await view_note(session, "A")
        assert "Links to: Beta\n" in capsys.readouterr().out

    async def test_view_missing(self, session, capsys):
        await view_note(session, "nope")

        assert "'nope' not found" in capsys.readouterr().out

    async def test_set_mood(self, session, capsys):
        await set_field(session, "B mood 8")

        assert (await session.find("B")).mood == 8
        assert "Mood set to '8'" in capsys.readouterr().out

    async def test_set_rejects_bad_mood(self, session, capsys):
        await set_field(session, "B mood 12")

        assert "Error" in capsys.readouterr().out
        assert (await session.find("B")).mood == 5

    async def test_set_unknown_field(self, session, capsys):
        await set_field(session, "B colour red")

        assert "Usage" in capsys.readouterr().out

    async def test_delete_confirmed(self, session, monkeypatch, active_note_file, capsys):
        await session.select("A")
        monkeypatch.setattr("builtins.input", lambda _prompt: "y")

        await delete_note(session, "A")

        assert "Note deleted" in capsys.readouterr().out
        assert session.active_note_id == "B"
        assert active_note_file.read_text() == "B"

    async def test_delete_cancelled(self, session, monkeypatch, capsys):
        monkeypatch.setattr("builtins.input", lambda _prompt: "n")

        await delete_note(session, "A")

        assert "Deletion cancelled" in capsys.readouterr().out
        assert len(await session.notes()) == 2


@pytest.mark.asyncio
class TestLinkCommands:
    async def test_connect_and_graph(self, session, capsys):
        await connect_notes(session, "B A")
        await session.select("B")
        capsys.readouterr()

        await show_graph(session)

        out = capsys.readouterr().out
        assert "2 notes, 2 links" in out
        assert "Beta → Alpha" in out
        assert "Alpha → Beta" in out

    async def test_connect_self(self, session, capsys):
        await connect_notes(session, "A A")

        assert "cannot link to itself" in capsys.readouterr().out
