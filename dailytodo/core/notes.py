"""Daily note storage for dailytodo.

Each calendar date maps to exactly one note, ``<vault_root>/YYYY-MM-DD.md``.
"""

from __future__ import annotations

import logging
import os
import tempfile
from datetime import date
from pathlib import Path

from dailytodo.core.templates import create_daily_content, read_template
from dailytodo.core.todos import parse_todos
from dailytodo.models import DailyTodos
from dailytodo.utils.dates import parse_date_from_filename, trailing_window

logger = logging.getLogger(__name__)


class NoteStoreError(Exception):
    """Base exception for daily note storage."""

    pass


class VaultNotConfiguredError(NoteStoreError):
    """Raised when no vault directory is configured."""

    pass


class DailyNoteNotFoundError(NoteStoreError):
    """Raised when the note for a date does not exist."""

    def __init__(self, path: Path):
        super().__init__(f"Daily note not found: {path}")
        self.path = path


class NoteIOError(NoteStoreError):
    """Raised when a note cannot be read or written."""

    def __init__(self, path: Path, error: Exception):
        super().__init__(f"{path}: {error}")
        self.path = path
        self.error = error


def require_vault(vault_root: Path | None) -> Path:
    """Return the vault root, raising if it is not configured."""
    if vault_root is None:
        raise VaultNotConfiguredError("No vault directory configured")
    return vault_root


def get_daily_note_path(dt: date, vault_root: Path | None) -> Path:
    """Get the path for a daily note.

    Daily notes are stored flat in the vault: <vault_root>/YYYY-MM-DD.md
    """
    return require_vault(vault_root) / f"{dt.isoformat()}.md"


def is_daily_note_file(name: str) -> bool:
    """Check if a file name is a daily note name (YYYY-MM-DD.md)."""
    return parse_date_from_filename(name) is not None


def note_exists(path: Path) -> bool:
    return path.is_file()


def read_note(path: Path) -> str:
    """Read a note's content.

    Raises:
        DailyNoteNotFoundError: If the note does not exist.
        NoteIOError: If the note cannot be read or is not valid UTF-8.

    """
    try:
        # newline="" keeps \r\n line endings intact
        with path.open(encoding="utf-8", newline="") as f:
            return f.read()
    except FileNotFoundError:
        raise DailyNoteNotFoundError(path) from None
    except (OSError, UnicodeDecodeError) as e:
        raise NoteIOError(path, e) from e


def write_note(path: Path, content: str) -> None:
    """Atomically replace a note's content.

    The content is written to a temp file next to the note and renamed over
    it, so readers see either the old or the new note, never a partial one.

    Raises:
        NoteIOError: If the note cannot be written.

    """
    temp_name: str | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_name, path)
        temp_name = None
    except OSError as e:
        raise NoteIOError(path, e) from e
    finally:
        if temp_name is not None and os.path.exists(temp_name):
            os.unlink(temp_name)


def ensure_daily_note(
    dt: date,
    vault_root: Path | None,
    section_header: str,
    template_path: Path | None = None,
) -> Path:
    """Ensure a daily note exists, creating it from the template if necessary.

    Returns the path to the note.
    """
    path = get_daily_note_path(dt, vault_root)

    if not note_exists(path):
        content = create_daily_content(read_template(template_path), dt, section_header)
        write_note(path, content)
        logger.info("Created daily note from template: %s", path)

    return path


def list_recent_daily_todos(
    vault_root: Path | None,
    section_header: str,
    days: int = 30,
    today: date | None = None,
) -> list[DailyTodos]:
    """Collect the todos of the last ``days`` daily notes, newest first.

    The window ends at ``today`` (inclusive). Dates without a note, or whose
    todo section is empty, are left out. Unreadable notes are logged and
    skipped.
    """
    root = require_vault(vault_root)
    if today is None:
        today = date.today()

    results: list[DailyTodos] = []
    for dt in trailing_window(days, today):
        path = get_daily_note_path(dt, root)
        try:
            content = read_note(path)
        except DailyNoteNotFoundError:
            continue
        except NoteIOError as e:
            logger.warning("Skipping unreadable daily note %s", e)
            continue

        todos = parse_todos(content, section_header)
        if todos:
            results.append(DailyTodos(date=dt, todos=todos))

    return results
