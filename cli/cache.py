"""Client-side cache of the full note collection."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from core.models import Note

NoteLoader = Callable[[], Awaitable[list[Note]]]


class NoteCollectionCache:
    """Holds the last fetched note list until a mutation invalidates it.

    Consistency is at most one round trip stale: a fetch that was already in
    flight when ``invalidate`` ran is returned to its caller but does not mark
    the cache fresh, so the next ``get`` refetches.
    """

    def __init__(self, loader: NoteLoader):
        self._loader = loader
        self._notes: list[Note] | None = None
        self._version = 0

    @property
    def is_stale(self) -> bool:
        return self._notes is None

    def peek(self) -> list[Note] | None:
        """Cached notes without fetching, or None when stale."""
        return None if self._notes is None else list(self._notes)

    async def get(self) -> list[Note]:
        """Cached notes, refetching first when stale."""
        if self._notes is not None:
            return list(self._notes)

        version = self._version
        notes = await self._loader()
        if version == self._version:
            self._notes = notes
        return list(notes)

    def invalidate(self) -> None:
        self._version += 1
        self._notes = None
