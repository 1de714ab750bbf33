"""Shared printing helpers for command handlers."""

from datetime import datetime

from core.errors import NoteError, NotFoundError, StoreUnavailableError, ValidationError


def print_error(error: NoteError):
    """Print a one-off notification for a failed command."""
    if isinstance(error, StoreUnavailableError):
        print("Error: Could not connect to API server.")
        print("Please start the server with: python -m api.server\n")
    elif isinstance(error, NotFoundError):
        print(f"Error: Note with ID '{error.note_id}' not found.\n")
    elif isinstance(error, ValidationError):
        print(f"Error: {error.message}\n")
    else:
        print(f"Error: Request failed: {error.message}\n")


def format_date(value: datetime) -> str:
    return value.astimezone().strftime("%Y-%m-%d %H:%M")
