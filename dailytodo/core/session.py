"""Todo session: the in-memory view of today's and recent daily notes.

A TodoSession owns the todo lists loaded from the vault and is the only
place that writes them back. Every mutation re-reads the note, applies one
change, writes the note atomically and then commits the new list to memory.
If reading or writing fails, the change is dropped and the affected lists
are reloaded from disk so memory never disagrees with the files.

Indices passed to toggle/edit/delete are positions in the most recently
listed todos. They are not stable across edits made outside the session.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from datetime import date
from pathlib import Path

from dailytodo.config import Config, expand_path, save_config
from dailytodo.core.notes import (
    DailyNoteNotFoundError,
    NoteIOError,
    NoteStoreError,
    VaultNotConfiguredError,
    ensure_daily_note,
    get_daily_note_path,
    list_recent_daily_todos,
    note_exists,
    read_note,
    write_note,
)
from dailytodo.core.templates import create_daily_content, read_template
from dailytodo.core.todos import (
    add_todo_to_content,
    parse_todos,
    reconstruct_content,
    renumber,
)
from dailytodo.models import DailyTodos, Todo

logger = logging.getLogger(__name__)

TodoChange = Callable[[list[Todo]], list[Todo]]


def _today() -> date:
    return date.today()


def normalize_todo_text(text: str) -> str:
    """Collapse todo text onto a single line without surrounding whitespace."""
    return " ".join(part.strip() for part in text.splitlines()).strip()


class TodoSession:
    """Load and edit the todo section of daily notes."""

    def __init__(self, config: Config, clock: Callable[[], date] | None = None):
        self.config = config
        self._clock = clock or _today
        self.today_todos: list[Todo] = []
        self.history: list[DailyTodos] | None = None
        self.history_days = config.todo.history_days
        self.loaded_date: date | None = None

    @property
    def section_header(self) -> str:
        return self.config.todo.section_header

    @property
    def vault_root(self) -> Path | None:
        return self.config.vault_root

    def today(self) -> date:
        """Current local date, evaluated on every call."""
        return self._clock()

    def today_path(self) -> Path | None:
        """Path of today's note, or None without a vault."""
        if self.vault_root is None:
            return None
        return get_daily_note_path(self.today(), self.vault_root)

    def load_today(self) -> list[Todo]:
        """Load today's todos, creating today's note from the template if needed."""
        dt = self.today()
        self.loaded_date = dt

        if self.vault_root is None:
            logger.warning("No vault configured; today's todo list is empty")
            self.today_todos = []
            return self.today_todos

        try:
            path = ensure_daily_note(
                dt, self.vault_root, self.section_header, self.config.template_path
            )
            content = read_note(path)
        except NoteStoreError as e:
            logger.warning("Failed to load today's note: %s", e)
            self.today_todos = []
            return self.today_todos

        self.today_todos = parse_todos(content, self.section_header)
        logger.debug("Loaded %d todos for %s", len(self.today_todos), dt)
        return self.today_todos

    def reload(self) -> list[Todo]:
        """Reload today's todos from disk.

        File-change and rollover triggers call this; it is the same path as a
        normal load.
        """
        return self.load_today()

    def load_history(self, days: int | None = None) -> list[DailyTodos]:
        """Load todos from the trailing window of daily notes, newest first."""
        if days is None:
            days = self.config.todo.history_days
        self.history_days = days

        try:
            self.history = list_recent_daily_todos(
                self.vault_root, self.section_header, days=days, today=self.today()
            )
        except VaultNotConfiguredError:
            logger.warning("No vault configured; history is empty")
            self.history = []
        return self.history

    def list_today(self) -> list[Todo]:
        """Today's todos, loading them if the loaded date is not today."""
        if self.loaded_date != self.today():
            self.load_today()
        return list(self.today_todos)

    def list_history(self) -> list[DailyTodos]:
        """Non-empty days of the history window, newest first."""
        if self.history is None:
            self.load_history()
        return list(self.history or [])

    def todos_for(self, day: date) -> list[Todo]:
        """Todos of the note for ``day``; empty if the note does not exist."""
        if day == self.today():
            return self.list_today()
        if self.vault_root is None:
            return []

        try:
            content = read_note(get_daily_note_path(day, self.vault_root))
        except DailyNoteNotFoundError:
            return []
        except NoteIOError as e:
            logger.warning("Failed to read daily note: %s", e)
            return []
        return parse_todos(content, self.section_header)

    def check_rollover(self) -> bool:
        """Return True if the local date moved past the last loaded date."""
        return self.loaded_date is not None and self.today() > self.loaded_date

    def add_today(self, text: str) -> bool:
        """Add a pending todo to today's note.

        Returns True if the note was written.
        """
        text = normalize_todo_text(text)
        if not text:
            logger.warning("Ignoring empty todo")
            return False

        if self.vault_root is None:
            logger.warning("No vault configured; cannot add todo")
            return False

        dt = self.today()
        path = get_daily_note_path(dt, self.vault_root)
        try:
            if note_exists(path):
                content = read_note(path)
            else:
                template = read_template(self.config.template_path)
                content = create_daily_content(template, dt, self.section_header)
            new_content = add_todo_to_content(content, text, self.section_header)
            write_note(path, new_content)
        except NoteStoreError as e:
            logger.warning("Failed to add todo to %s: %s", path, e)
            self._resync(dt)
            return False

        self._commit(dt, parse_todos(new_content, self.section_header))
        logger.info("Added todo to %s: %s", dt, text)
        return True

    def toggle(self, day: date | None, index: int, done: bool) -> bool:
        """Set the done state of the todo at ``index`` in the note for ``day``."""

        def change(todos: list[Todo]) -> list[Todo]:
            todos[index] = replace(todos[index], done=done)
            return todos

        return self._mutate(day, index, change, "toggle")

    def edit(self, day: date | None, index: int, text: str) -> bool:
        """Replace the text of the todo at ``index`` in the note for ``day``."""
        text = normalize_todo_text(text)
        if not text:
            logger.warning("Ignoring edit to empty text")
            return False

        def change(todos: list[Todo]) -> list[Todo]:
            todos[index] = replace(todos[index], text=text)
            return todos

        return self._mutate(day, index, change, "edit")

    def delete(self, day: date | None, index: int) -> bool:
        """Remove the todo at ``index`` from the note for ``day``."""

        def change(todos: list[Todo]) -> list[Todo]:
            del todos[index]
            return renumber(todos)

        return self._mutate(day, index, change, "delete")

    def set_vault_root(self, path: str | Path) -> bool:
        """Point the session at a different vault and reload today's todos."""
        vault = expand_path(path)
        if not vault.is_dir():
            logger.warning("Vault directory does not exist: %s", vault)
            return False

        self.config.vault_root = vault
        self.config.vault_detected = False
        try:
            save_config(self.config)
        except OSError as e:
            logger.warning("Failed to save config: %s", e)

        self.history = None
        self.load_today()
        return True

    def _mutate(self, day: date | None, index: int, change: TodoChange, action: str) -> bool:
        """Apply ``change`` to the todos of ``day`` and write the note back."""
        if self.vault_root is None:
            logger.warning("No vault configured; cannot %s todo", action)
            return False

        dt = day or self.today()
        path = get_daily_note_path(dt, self.vault_root)

        try:
            content = read_note(path)
        except DailyNoteNotFoundError:
            logger.warning("Cannot %s todo: no daily note for %s", action, dt)
            return False
        except NoteIOError as e:
            logger.warning("Failed to read %s: %s", path, e)
            self._resync(dt)
            return False

        todos = parse_todos(content, self.section_header)
        if not 0 <= index < len(todos):
            logger.warning(
                "Cannot %s todo %d on %s: only %d todos", action, index, dt, len(todos)
            )
            return False

        updated = change(list(todos))
        new_content = reconstruct_content(content, updated, self.section_header)

        try:
            write_note(path, new_content)
        except NoteIOError as e:
            logger.warning("Failed to write %s: %s", path, e)
            self._resync(dt)
            return False

        self._commit(dt, updated)
        logger.debug("%s todo %d on %s", action, index, dt)
        return True

    def _commit(self, dt: date, todos: list[Todo]) -> None:
        """Replace the in-memory lists for ``dt`` after a successful write."""
        if dt == self.loaded_date:
            self.today_todos = list(todos)

        if self.history is None:
            return

        entries = [entry for entry in self.history if entry.date != dt]
        if todos and 0 <= (self.today() - dt).days < self.history_days:
            entries.append(DailyTodos(date=dt, todos=list(todos)))
            entries.sort(key=lambda entry: entry.date, reverse=True)
        self.history = entries

    def _resync(self, dt: date) -> None:
        """Reload the lists that show ``dt`` from disk."""
        if dt == self.loaded_date:
            self.load_today()
        if self.history is not None:
            self.load_history()
