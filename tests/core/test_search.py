"""Tests for the note list search filter."""

from core.search import filter_notes


class TestFilterNotes:
    def test_matches_title_content_and_category(self, make_note):
        notes = [
            make_note("A", title="Groceries"),
            make_note("B", content="buy MILK"),
            make_note("C", category="Milk run"),
            make_note("D", title="Other"),
        ]

        assert [note.id for note in filter_notes(notes, "milk")] == ["B", "C"]
        assert [note.id for note in filter_notes(notes, "GROC")] == ["A"]

    def test_empty_term_returns_all(self, make_note):
        notes = [make_note("A"), make_note("B")]

        assert filter_notes(notes, "  ") == notes
