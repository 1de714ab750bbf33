"""Pydantic models for API requests and responses."""

from core.models import Note

from .notes import GraphEdgeOut, GraphNodeOut, GraphResponse, NoteListResponse, PositionOut

__all__ = [
    "GraphEdgeOut",
    "GraphNodeOut",
    "GraphResponse",
    "Note",
    "NoteListResponse",
    "PositionOut",
]
