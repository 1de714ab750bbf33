"""Graph materialization for the note map view.

Nodes and edges are a projection of the note collection. Nothing here is
stored: the graph is rebuilt from scratch whenever the notes or the selected
note change, so positions are a pure function of list order.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .errors import NotFoundError, SelfLinkError
from .models import Note, NoteLink

GRID_COLUMNS = 4
COLUMN_WIDTH = 300
ROW_HEIGHT = 200
GRID_OFFSET = 100


@dataclass(frozen=True)
class Position:
    x: int
    y: int


@dataclass(frozen=True)
class GraphNode:
    id: str
    note: Note
    position: Position
    active: bool = False


@dataclass(frozen=True)
class GraphEdge:
    id: str
    source: str
    target: str


@dataclass(frozen=True)
class Graph:
    nodes: tuple[GraphNode, ...]
    edges: tuple[GraphEdge, ...]

    def node(self, note_id: str) -> GraphNode | None:
        for node in self.nodes:
            if node.id == note_id:
                return node
        return None


def grid_position(index: int) -> Position:
    """Layout slot for the note at ``index`` in a four-column grid."""
    return Position(
        x=(index % GRID_COLUMNS) * COLUMN_WIDTH + GRID_OFFSET,
        y=(index // GRID_COLUMNS) * ROW_HEIGHT + GRID_OFFSET,
    )


def edge_id(source: str, target: str) -> str:
    return f"{source}->{target}"


def materialize(notes: Sequence[Note], active_note_id: str | None = None) -> Graph:
    """Build the positioned node/edge graph for ``notes``.

    Links whose target is not in ``notes`` are skipped, as are self links.
    A link listed twice on the same note yields one edge.
    """
    by_id = {note.id: note for note in notes}

    nodes = tuple(
        GraphNode(
            id=note.id,
            note=note,
            position=grid_position(index),
            active=note.id == active_note_id,
        )
        for index, note in enumerate(notes)
    )

    pairs: list[tuple[str, str]] = []
    for note in notes:
        for target_id in note.linked_notes:
            if target_id == note.id or target_id not in by_id:
                continue
            pairs.append((note.id, target_id))

    edges = tuple(
        GraphEdge(id=edge_id(source, target), source=source, target=target)
        for source, target in dict.fromkeys(pairs)
    )
    return Graph(nodes=nodes, edges=edges)


def connect(source_id: str, target_id: str, notes: Sequence[Note]) -> Note:
    """Link ``source_id`` to ``target_id`` as drawn on the map.

    Returns the updated source note; persisting it is up to the caller. If the
    link already exists the source note comes back unchanged.

    Raises:
        SelfLinkError: source and target are the same note
        NotFoundError: either note is not in ``notes``
    """
    if source_id == target_id:
        raise SelfLinkError(source_id)

    by_id = {note.id: note for note in notes}
    source = by_id.get(source_id)
    if source is None:
        raise NotFoundError(source_id)
    if target_id not in by_id:
        raise NotFoundError(target_id)

    if target_id in source.linked_notes:
        return source
    return source.model_copy(update={"linked_notes": [*source.linked_notes, target_id]})


def incoming_links(note_id: str, notes: Sequence[Note]) -> list[NoteLink]:
    """Notes that link to ``note_id``."""
    return [
        note.as_link()
        for note in notes
        if note.id != note_id and note_id in note.linked_notes
    ]
