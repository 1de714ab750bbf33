"""CLI command handlers."""

from .links import candidates, connect_notes, link_note, show_graph, unlink_note
from .notes import (
    create_note,
    delete_note,
    edit_note,
    list_notes,
    rename_note,
    select_note,
    set_field,
    view_note,
)

__all__ = [
    "candidates",
    "connect_notes",
    "create_note",
    "delete_note",
    "edit_note",
    "link_note",
    "list_notes",
    "rename_note",
    "select_note",
    "set_field",
    "show_graph",
    "unlink_note",
    "view_note",
]
