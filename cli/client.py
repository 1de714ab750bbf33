"""Main CLI client with REPL loop."""

import asyncio
import os

from connectors.notes_api import NotesAPIConnector
from core.errors import NoteError

from .commands import (
    candidates,
    connect_notes,
    create_note,
    delete_note,
    edit_note,
    link_note,
    list_notes,
    rename_note,
    select_note,
    set_field,
    show_graph,
    unlink_note,
    view_note,
)
from .commands.output import print_error
from .config import API_URL, delete_active_note, load_active_note
from .session import NoteSession

COMMANDS = {
    "/new": create_note,
    "/notes": list_notes,
    "/view": view_note,
    "/select": select_note,
    "/edit": edit_note,
    "/rename": rename_note,
    "/set": set_field,
    "/delete": delete_note,
    "/link": link_note,
    "/unlink": unlink_note,
    "/candidates": candidates,
    "/connect": connect_notes,
    "/graph": show_graph,
}


def print_help():
    print("\nNote Commands:")
    print("  /new [title] - Create a new note")
    print("  /notes [search] - List notes, filtered by title, content or category")
    print("  /view <id> - Show a note with its links")
    print("  /select <id> - Make a note the active one")
    print("  /edit <id> - Edit note content in $EDITOR")
    print("  /rename <id> <title> - Change a note's title")
    print("  /set <id> <mood|priority|category|status> <value> - Change metadata")
    print("  /delete <id> - Delete a note and its links")
    print("\nLink Commands:")
    print("  /link <id> <target> - Link a note to another")
    print("  /unlink <id> <target> - Remove a link")
    print("  /candidates <id> - Notes available to link")
    print("  /connect <source> <target> - Draw a connection on the map")
    print("  /graph - Show the note map")
    print("\nUtility Commands:")
    print("  /help - Show this help")
    print("  /clear - Clear the terminal screen")
    print("\nType 'exit' or 'quit' to leave.")


async def restore_selection(session: NoteSession):
    """Reselect the remembered note, falling back to the most recent one."""
    remembered = load_active_note()
    try:
        if remembered:
            try:
                await session.select(remembered)
                return
            except NoteError:
                delete_active_note()
        notes = await session.notes()
        if notes:
            await session.select(notes[0].id)
    except NoteError as e:
        print_error(e)


async def repl(session: NoteSession):
    await restore_selection(session)
    if session.active_note:
        print(f"Active note: {session.active_note.title}\n")

    while True:
        user_input = (await asyncio.to_thread(input, "notes> ")).strip()

        if user_input.lower() in ["exit", "quit"]:
            print("\nGoodbye!")
            break

        if not user_input:
            continue

        command, _, args = user_input.partition(" ")
        command = command.lower()

        if command == "/help":
            print_help()
            continue

        if command == "/clear":
            # Clear terminal screen (cross-platform)
            os.system("cls" if os.name == "nt" else "clear")
            continue

        handler = COMMANDS.get(command)
        if handler is None:
            print(f"Unknown command '{command}'. Type /help for a list of commands.\n")
            continue

        await handler(session, args)


async def run(api_url: str = API_URL):
    async with NotesAPIConnector(api_url) as connector:
        await repl(NoteSession(connector))


def main():
    """CLI client for the NotesVault API."""
    print("Welcome to NotesVault CLI!")
    print_help()
    print(f"Note: Make sure the API server is running at {API_URL} (python -m api.server)\n")

    try:
        asyncio.run(run())
    except (KeyboardInterrupt, EOFError):
        print("\n\nGoodbye!")


if __name__ == "__main__":
    main()
