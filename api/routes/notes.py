"""Notes endpoints."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request

from core.errors import NotFoundError, StoreUnavailableError, ValidationError
from core.graph import materialize
from core.models import Note

from ..models import GraphResponse, NoteListResponse
from ..observability import get_app_metrics, get_tracer
from ..services.note_store import NoteStore

# Initialize logger
logger = structlog.get_logger(__name__)

# Get tracer
tracer = get_tracer(__name__)

router = APIRouter(prefix="/notes", tags=["notes"])


def get_store(request: Request) -> NoteStore:
    """Build a store over the database handle opened at startup."""
    return NoteStore(request.app.state.database.get_database())


async def _save(note: Note, store: NoteStore) -> Note:
    try:
        return await store.upsert_note(note)
    except ValidationError as e:
        logger.warning("note_save_rejected", note_id=note.id, reason=e.message)
        raise HTTPException(status_code=400, detail=e.message)
    except StoreUnavailableError as e:
        raise HTTPException(status_code=503, detail=e.message)


@router.get("", response_model=NoteListResponse)
async def list_notes(store: NoteStore = Depends(get_store)):
    """
    List all notes, most recently modified first.

    Each note carries its outgoing link IDs.
    """
    with tracer.start_as_current_span("list_notes") as span:
        try:
            notes = await store.list_notes()
        except StoreUnavailableError as e:
            raise HTTPException(status_code=503, detail=e.message)

        span.set_attribute("notes.count", len(notes))
        return NoteListResponse(notes=notes, total=len(notes))


@router.get("/graph", response_model=GraphResponse)
async def note_graph(active_id: str | None = None, store: NoteStore = Depends(get_store)):
    """
    Node/edge projection of all notes for map renderers.

    Links to missing notes are left out.
    """
    with tracer.start_as_current_span("note_graph") as span:
        try:
            notes = await store.list_notes()
        except StoreUnavailableError as e:
            raise HTTPException(status_code=503, detail=e.message)

        graph = materialize(notes, active_id)
        get_app_metrics().graphs_materialized.add(1)

        span.set_attribute("graph.nodes", len(graph.nodes))
        span.set_attribute("graph.edges", len(graph.edges))
        logger.info("graph_materialized", nodes=len(graph.nodes), edges=len(graph.edges))

        return GraphResponse.from_graph(graph)


@router.get("/{note_id}", response_model=Note)
async def get_note(note_id: str, store: NoteStore = Depends(get_store)):
    """Retrieve a specific note by ID."""
    with tracer.start_as_current_span("get_note") as span:
        span.set_attribute("note.id", note_id)
        try:
            return await store.get_note(note_id)
        except NotFoundError:
            raise HTTPException(status_code=404, detail="Note not found")
        except StoreUnavailableError as e:
            raise HTTPException(status_code=503, detail=e.message)


@router.post("", response_model=Note)
async def save_note(note: Note, store: NoteStore = Depends(get_store)):
    """
    Create or update a note.

    The whole note is replaced, including its link set. ``id`` and ``title``
    must be non-empty and a note may not link to itself.
    """
    with tracer.start_as_current_span("save_note") as span:
        span.set_attribute("note.id", note.id)
        logger.info("note_save_attempt", note_id=note.id, title=note.title)
        return await _save(note, store)


@router.put("/{note_id}", response_model=Note)
async def update_note(note_id: str, note: Note, store: NoteStore = Depends(get_store)):
    """Replace a specific note; the body ID must match the path."""
    with tracer.start_as_current_span("update_note") as span:
        span.set_attribute("note.id", note_id)

        if note.id != note_id:
            logger.warning("update_note_id_mismatch", note_id=note_id, body_id=note.id)
            raise HTTPException(status_code=400, detail="Note ID mismatch")

        return await _save(note, store)


@router.delete("/{note_id}", status_code=204)
async def delete_note(note_id: str, store: NoteStore = Depends(get_store)):
    """
    Delete a note permanently.

    Links from other notes to this one are removed as well.
    """
    with tracer.start_as_current_span("delete_note") as span:
        span.set_attribute("note.id", note_id)
        try:
            await store.delete_note(note_id)
        except NotFoundError:
            raise HTTPException(status_code=404, detail="Note not found")
        except StoreUnavailableError as e:
            raise HTTPException(status_code=503, detail=e.message)

        span.set_attribute("note.deleted", True)

        # 204 No Content - no response body needed
        return
