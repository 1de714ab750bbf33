"""Notes command handlers."""

import os
import subprocess
import sys
import tempfile
from pathlib import Path

from core.errors import NoteError, ValidationError

from ..config import delete_active_note, save_active_note
from ..session import NoteSession
from .output import format_date, print_error

MOOD_FACES = ["😢", "😟", "😐", "🙂", "😊", "😃", "😄", "😆", "🤩", "🥳"]

EDITABLE_FIELDS = ("mood", "priority", "category", "status")


async def create_note(session: NoteSession, args: str = ""):
    """Create a new note and make it the active one."""
    try:
        note = await session.create_note(args.strip())
    except NoteError as e:
        print_error(e)
        return

    save_active_note(note.id)
    print("\n✓ New note created!")
    print(f"  Note ID: {note.id}")
    print(f"  Title: {note.title}")
    print(f"  Created: {format_date(note.created_date)}\n")


async def list_notes(session: NoteSession, args: str = ""):
    """List notes, optionally filtered by a search term."""
    term = args.strip()
    try:
        notes = await session.search(term)
    except NoteError as e:
        print_error(e)
        return

    if not notes:
        match_msg = f" matching '{term}'" if term else ""
        print(f"\nNo notes found{match_msg}.\n")
        return

    print(f"\n=== Your Notes ({len(notes)} shown) ===\n")
    for note in notes:
        marker = "→ " if note.id == session.active_note_id else ""
        category = note.category or "uncategorized"
        print(f"{marker}{note.title}")
        print(f"  ID: {note.id}")
        print(
            f"  Category: {category} | Priority: {note.priority} | Status: {note.status}"
            f" | Links: {len(note.linked_notes)}"
        )
        print(f"  Modified: {format_date(note.modified_date)}\n")


async def view_note(session: NoteSession, args: str):
    """View a specific note by ID."""
    note_id = args.strip()
    if not note_id:
        print("Error: Note ID is required. Usage: /view <note_id>\n")
        return

    try:
        note = await session.find(note_id)
        titles = {other.id: other.title for other in await session.notes()}
        backlinks = await session.backlinks(note_id)
    except NoteError as e:
        print_error(e)
        return

    print(f"\n{'=' * 60}")
    print(f"Title: {note.title}")
    print(f"ID: {note.id}")
    print(f"Mood: {MOOD_FACES[note.mood - 1]} {note.mood}/10")
    print(f"Priority: {note.priority} | Status: {note.status}")
    print(f"Category: {note.category or 'uncategorized'}")
    print(f"Created: {format_date(note.created_date)}")
    print(f"Modified: {format_date(note.modified_date)}")
    links_to = [titles[linked_id] for linked_id in note.linked_notes if linked_id in titles]
    print(f"Links to: {', '.join(links_to) or 'none'}")
    print(f"Linked from: {', '.join(link.title for link in backlinks) or 'none'}")
    print(f"{'=' * 60}\n")
    print(note.content)
    print(f"\n{'=' * 60}\n")


async def select_note(session: NoteSession, args: str):
    """Make a note the active one."""
    note_id = args.strip()
    if not note_id:
        print("Error: Note ID is required. Usage: /select <note_id>\n")
        return

    try:
        note = await session.select(note_id)
    except NoteError as e:
        print_error(e)
        return

    save_active_note(note.id)
    print(f"\n✓ Active note: {note.title}\n")


async def rename_note(session: NoteSession, args: str):
    """Rename a note (update its title)."""
    # Parse args: <note_id> <new_title>
    parts = args.strip().split(maxsplit=1)
    if len(parts) < 2:
        print("Error: Usage: /rename <note_id> <new_title>\n")
        return

    note_id, new_title = parts
    try:
        note = await session.update_fields(note_id, title=new_title)
    except NoteError as e:
        print_error(e)
        return

    print("\n✓ Note renamed successfully!")
    print(f"  ID: {note.id}")
    print(f"  New title: {note.title}\n")


async def set_field(session: NoteSession, args: str):
    """Change one metadata field: mood, priority, category or status."""
    parts = args.strip().split(maxsplit=2)
    if len(parts) < 2 or parts[1] not in EDITABLE_FIELDS:
        print(f"Error: Usage: /set <note_id> <{'|'.join(EDITABLE_FIELDS)}> <value>\n")
        return

    note_id, field = parts[0], parts[1]
    value = parts[2] if len(parts) > 2 else ""

    try:
        if field == "mood":
            if not value.isdigit():
                raise ValidationError("Mood must be a number from 1 to 10")
            note = await session.update_fields(note_id, mood=int(value))
        else:
            note = await session.update_fields(note_id, **{field: value})
    except NoteError as e:
        print_error(e)
        return

    print(f"\n✓ {field.capitalize()} set to '{getattr(note, field)}' for '{note.title}'\n")


def _get_editor():
    """Get the user's preferred text editor."""
    editor = os.environ.get("EDITOR") or os.environ.get("VISUAL")
    if editor:
        return editor

    if sys.platform == "win32":
        return "notepad"
    for editor_cmd in ["nano", "vim", "vi"]:
        try:
            subprocess.run(
                ["which", editor_cmd],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=True,
            )
            return editor_cmd
        except (subprocess.CalledProcessError, FileNotFoundError):
            continue

    return "vi"


async def edit_note(session: NoteSession, args: str):
    """Edit note content using an external text editor."""
    note_id = args.strip()
    if not note_id:
        print("Error: Note ID is required. Usage: /edit <note_id>\n")
        return

    try:
        note = await session.find(note_id)
    except NoteError as e:
        print_error(e)
        return

    with tempfile.NamedTemporaryFile(mode="w", suffix=".md", delete=False) as tmp_file:
        tmp_file.write(note.content)
        tmp_path = Path(tmp_file.name)

    try:
        editor = _get_editor()

        print(f"\nOpening note '{note.title}' in {editor}...")
        print("Edit the note, save, and close the editor to update.\n")

        try:
            subprocess.run([editor, str(tmp_path)], check=True)
        except subprocess.CalledProcessError:
            print(f"\nError: Editor '{editor}' exited with an error.\n")
            return
        except FileNotFoundError:
            print(f"\nError: Editor '{editor}' not found.\n")
            print("You can set your preferred editor with: export EDITOR=nano\n")
            return

        edited_content = tmp_path.read_text(encoding="utf-8")
        if edited_content == note.content:
            print("\nNo changes made. Note not updated.\n")
            return

        try:
            updated = await session.update_fields(note_id, content=edited_content)
        except NoteError as e:
            print_error(e)
            return

        print("\n✓ Note updated successfully!")
        print(f"  ID: {updated.id}")
        print(f"  Title: {updated.title}")
        print(f"  Modified: {format_date(updated.modified_date)}\n")

    finally:
        if tmp_path.exists():
            tmp_path.unlink()


async def delete_note(session: NoteSession, args: str):
    """Delete a note and every link to or from it."""
    note_id = args.strip()
    if not note_id:
        print("Error: Note ID is required. Usage: /delete <note_id>\n")
        return

    confirm = input(f"Are you sure you want to delete note '{note_id}'? (y/N): ").strip().lower()
    if confirm not in ["y", "yes"]:
        print("\nDeletion cancelled.\n")
        return

    try:
        await session.delete(note_id)
    except NoteError as e:
        print_error(e)
        return

    if session.active_note_id:
        save_active_note(session.active_note_id)
    else:
        delete_active_note()

    print("\n✓ Note deleted!")
    print(f"  Note ID: {note_id}\n")
