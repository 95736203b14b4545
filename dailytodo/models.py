"""Data models for dailytodo."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date


@dataclass
class Todo:
    """A checkbox item inside the todo section of a daily note.

    ``index`` is the item's position within the section at parse time. It is
    recomputed on every parse, so it only identifies an item relative to the
    list it came from.
    """

    index: int
    text: str
    done: bool = False

    @property
    def marker(self) -> str:
        """Return the checkbox marker for this todo."""
        return "x" if self.done else " "

    def to_line(self) -> str:
        """Render the todo as a markdown checkbox line."""
        return f"- [{self.marker}] {self.text}"


@dataclass
class DailyTodos:
    """Todos of a single daily note."""

    date: date
    todos: list[Todo] = field(default_factory=list)

    @property
    def completed_count(self) -> int:
        return sum(1 for t in self.todos if t.done)
