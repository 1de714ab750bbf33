"""Notes-related Pydantic models."""

from __future__ import annotations

from pydantic import BaseModel

from core.graph import Graph
from core.models import Note


class NoteListResponse(BaseModel):
    """Response model for listing notes."""

    notes: list[Note]
    total: int


class PositionOut(BaseModel):
    x: int
    y: int


class GraphNodeOut(BaseModel):
    """A positioned note on the map."""

    id: str
    title: str
    position: PositionOut
    active: bool


class GraphEdgeOut(BaseModel):
    id: str
    source: str
    target: str


class GraphResponse(BaseModel):
    """Materialized node/edge graph for renderers."""

    nodes: list[GraphNodeOut]
    edges: list[GraphEdgeOut]

    @classmethod
    def from_graph(cls, graph: Graph) -> GraphResponse:
        return cls(
            nodes=[
                GraphNodeOut(
                    id=node.id,
                    title=node.note.title,
                    position=PositionOut(x=node.position.x, y=node.position.y),
                    active=node.active,
                )
                for node in graph.nodes
            ],
            edges=[
                GraphEdgeOut(id=edge.id, source=edge.source, target=edge.target)
                for edge in graph.edges
            ],
        )
