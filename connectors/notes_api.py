"""NotesVault API connector.

Typed async access to the note store's HTTP interface:
- Notes come back as ``Note`` models with ISO-8601 dates parsed to aware datetimes
- HTTP failures are mapped onto ``core.errors`` so callers never see httpx types
- Connection failures are retried once by the transport
- Every call runs in its own OpenTelemetry span
"""

from typing import Any

import httpx
from opentelemetry import trace

from core.errors import NoteError, NotFoundError, StoreUnavailableError, ValidationError
from core.models import Note

tracer = trace.get_tracer(__name__)

DEFAULT_BASE_URL = "http://localhost:8000"


def _detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.reason_phrase
    # Proxies in front of the API may answer with bare strings or lists
    detail = body.get("detail", response.reason_phrase) if isinstance(body, dict) else body
    # FastAPI request validation errors carry a list of problems
    if isinstance(detail, list):
        return "; ".join(
            str(item.get("msg", item)) if isinstance(item, dict) else str(item)
            for item in detail
        )
    return str(detail)


class NotesAPIConnector:
    """Client for the NotesVault note store.

    Example:
        >>> async with NotesAPIConnector("http://localhost:8000") as connector:
        ...     notes = await connector.list_notes()
        ...     saved = await connector.save_note(new_note("Groceries"))
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        max_retries: int = 1,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the connector.

        Args:
            base_url: Root URL of the NotesVault API
            timeout: Request timeout in seconds
            max_retries: Connection retries on transient transport failure
            transport: Custom transport (tests pass ``httpx.MockTransport``)
        """
        self.base_url = base_url.rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport or httpx.AsyncHTTPTransport(retries=max_retries),
        )

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def close(self):
        """Close the underlying HTTP client."""
        await self.client.aclose()

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        span = trace.get_current_span()
        span.set_attribute("http.method", method)
        span.set_attribute("notes.path", path)

        try:
            response = await self.client.request(method, path, **kwargs)
        except httpx.TransportError as e:
            span.record_exception(e)
            raise StoreUnavailableError(
                f"Could not reach note store at {self.base_url}", {"error": str(e)}
            ) from e

        span.set_attribute("http.status_code", response.status_code)
        if response.is_success:
            return response

        detail = _detail(response)
        if response.status_code == 404:
            raise NotFoundError(path.rsplit("/", 1)[-1])
        if response.status_code in (400, 422):
            raise ValidationError(detail, {"status_code": response.status_code})
        if response.status_code >= 500:
            raise StoreUnavailableError(detail, {"status_code": response.status_code})
        raise NoteError(detail, {"status_code": response.status_code})

    @tracer.start_as_current_span("notes_api.list_notes")
    async def list_notes(self) -> list[Note]:
        """Fetch every note in the order the store returns them (most recent first)."""
        response = await self._request("GET", "/notes")
        return [Note.model_validate(item) for item in response.json()["notes"]]

    @tracer.start_as_current_span("notes_api.get_note")
    async def get_note(self, note_id: str) -> Note:
        """Fetch a single note.

        Raises:
            NotFoundError: the store has no such note
        """
        response = await self._request("GET", f"/notes/{note_id}")
        return Note.model_validate(response.json())

    @tracer.start_as_current_span("notes_api.save_note")
    async def save_note(self, note: Note) -> Note:
        """Upsert ``note``; returns the note as persisted.

        Raises:
            ValidationError: blank id/title, self link or duplicate links
        """
        response = await self._request("POST", "/notes", json=note.model_dump(mode="json"))
        return Note.model_validate(response.json())

    @tracer.start_as_current_span("notes_api.update_note")
    async def update_note(self, note: Note) -> Note:
        """Replace an existing note through its own URL."""
        response = await self._request(
            "PUT", f"/notes/{note.id}", json=note.model_dump(mode="json")
        )
        return Note.model_validate(response.json())

    @tracer.start_as_current_span("notes_api.delete_note")
    async def delete_note(self, note_id: str) -> None:
        """Delete a note and every link to or from it.

        Raises:
            NotFoundError: the store has no such note
        """
        await self._request("DELETE", f"/notes/{note_id}")

    @tracer.start_as_current_span("notes_api.health")
    async def health(self) -> dict[str, Any]:
        response = await self._request("GET", "/health")
        return response.json()
