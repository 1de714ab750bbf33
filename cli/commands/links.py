"""Link and map command handlers."""

from core.errors import NoteError

from ..session import NoteSession
from .output import print_error


def _two_ids(args: str, usage: str) -> tuple[str, str] | None:
    parts = args.split()
    if len(parts) != 2:
        print(f"Error: Usage: {usage}\n")
        return None
    return parts[0], parts[1]


async def link_note(session: NoteSession, args: str):
    """Link one note to another from the note's link list."""
    ids = _two_ids(args, "/link <note_id> <target_id>")
    if ids is None:
        return

    try:
        note = await session.link(*ids)
    except NoteError as e:
        print_error(e)
        return

    print(f"\n✓ '{note.title}' now links to {len(note.linked_notes)} note(s).\n")


async def unlink_note(session: NoteSession, args: str):
    """Remove a link between two notes."""
    ids = _two_ids(args, "/unlink <note_id> <target_id>")
    if ids is None:
        return

    try:
        note = await session.unlink(*ids)
    except NoteError as e:
        print_error(e)
        return

    print(f"\n✓ '{note.title}' now links to {len(note.linked_notes)} note(s).\n")


async def connect_notes(session: NoteSession, args: str):
    """Draw a connection between two notes on the map."""
    ids = _two_ids(args, "/connect <source_id> <target_id>")
    if ids is None:
        return

    try:
        note = await session.connect(*ids)
    except NoteError as e:
        print_error(e)
        return

    print(f"\n✓ Connected '{note.title}' → {ids[1]}\n")


async def candidates(session: NoteSession, args: str):
    """Show the notes a note can still link to."""
    note_id = args.strip()
    if not note_id:
        print("Error: Note ID is required. Usage: /candidates <note_id>\n")
        return

    try:
        available = await session.candidates(note_id)
    except NoteError as e:
        print_error(e)
        return

    if not available:
        print("\nNo other notes available to link.\n")
        return

    print("\n=== Available Notes To Link ===")
    for link in available:
        print(f"  {link.id}  {link.title}")
    print()


async def show_graph(session: NoteSession, args: str = ""):
    """Print the note map: grid positions and links."""
    try:
        graph = await session.graph()
    except NoteError as e:
        print_error(e)
        return

    if not graph.nodes:
        print("\nNo notes yet. Use /new to create one.\n")
        return

    titles = {node.id: node.note.title for node in graph.nodes}

    print(f"\n=== Mind Map ({len(graph.nodes)} notes, {len(graph.edges)} links) ===\n")
    for node in graph.nodes:
        marker = "*" if node.active else " "
        print(f"{marker} ({node.position.x:>4}, {node.position.y:>4})  {node.note.title}")
    if graph.edges:
        print()
        for edge in graph.edges:
            print(f"  {titles[edge.source]} → {titles[edge.target]}")
    print()
