"""Domain model and pure note/graph logic shared by the API and the CLI."""

from .errors import NoteError, NotFoundError, SelfLinkError, StoreUnavailableError, ValidationError
from .graph import Graph, GraphEdge, GraphNode, Position, connect, incoming_links, materialize
from .links import add_link, link_candidates, remove_link
from .models import Note, NoteLink, Priority, Status, new_note, utcnow
from .search import filter_notes

__all__ = [
    "Graph",
    "GraphEdge",
    "GraphNode",
    "Note",
    "NoteError",
    "NoteLink",
    "NotFoundError",
    "Position",
    "Priority",
    "SelfLinkError",
    "Status",
    "StoreUnavailableError",
    "ValidationError",
    "add_link",
    "connect",
    "filter_notes",
    "incoming_links",
    "link_candidates",
    "materialize",
    "new_note",
    "remove_link",
    "utcnow",
]
