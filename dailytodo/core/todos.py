"""Todo section parsing and editing for daily notes.

All functions here are pure: they take the full text of a note and return
either the parsed todos or the rewritten text. Only todo lines inside the
configured section are ever touched; every other line is copied through
unchanged.
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Sequence

from dailytodo.models import Todo

# Matched against the stripped line. Only " " and lowercase "x" are valid states.
TODO_PATTERN = re.compile(r"^- \[(?P<state>[ x])\] (?P<text>.+)$")

# Any H3 heading ends the todo section
SECTION_BREAK_PREFIX = "### "

# Half-typed todo lines that an insert fills in instead of appending
PLACEHOLDER_LINES = frozenset({"-", "- ", "- []", "- [ ]"})


def split_lines(content: str) -> list[str]:
    """Split note content on newlines, keeping a trailing empty line."""
    return content.split("\n")


def join_lines(lines: Sequence[str]) -> str:
    return "\n".join(lines)


def format_todo_line(text: str, done: bool = False) -> str:
    """Format a todo as a markdown checkbox line."""
    return f"- [{'x' if done else ' '}] {text}"


def match_todo_line(line: str) -> re.Match[str] | None:
    """Match a line against the todo grammar, ignoring surrounding whitespace."""
    return TODO_PATTERN.match(line.strip())


def is_todo_line(line: str) -> bool:
    """Check if a line is a well-formed todo line."""
    return match_todo_line(line) is not None


def is_placeholder_line(line: str) -> bool:
    """Check if a line is an empty todo stub such as ``- [ ]``."""
    return line.strip() in PLACEHOLDER_LINES


def is_section_header(line: str, section_header: str) -> bool:
    return bool(section_header) and line.startswith(section_header)


def is_section_break(line: str, section_header: str) -> bool:
    return line.startswith(SECTION_BREAK_PREFIX) and not is_section_header(
        line, section_header
    )


def iter_section_lines(
    lines: Sequence[str], section_header: str
) -> Iterator[tuple[str, bool]]:
    """Yield ``(line, in_section)`` for every line of a note.

    Header lines and section-breaking headings are always reported as outside
    the section so callers only ever see the section body as inside. A repeated
    header re-enters the section.
    """
    in_section = False
    for line in lines:
        if is_section_header(line, section_header):
            in_section = True
            yield line, False
            continue

        if is_section_break(line, section_header):
            in_section = False
            yield line, False
            continue

        yield line, in_section


def parse_todos(content: str, section_header: str) -> list[Todo]:
    """Extract the todos of the section starting with ``section_header``.

    Lines in the section that do not match the todo grammar are skipped.
    Returns an empty list if the header does not occur.
    """
    todos: list[Todo] = []
    for line, in_section in iter_section_lines(split_lines(content), section_header):
        if not in_section:
            continue
        match = match_todo_line(line)
        if match:
            todos.append(
                Todo(
                    index=len(todos),
                    text=match.group("text"),
                    done=match.group("state") == "x",
                )
            )
    return todos


def _line_ending(line: str) -> str:
    # Lines are split on \n only, so CRLF notes leave a trailing \r
    return "\r" if line.endswith("\r") else ""


def _with_padding_of(original: str, new_line: str) -> str:
    stripped = original.strip()
    start = original.find(stripped)
    return original[:start] + new_line + original[start + len(stripped) :]


def reconstruct_content(
    content: str, todos: Sequence[Todo], section_header: str
) -> str:
    """Write ``todos`` back over the todo lines of the section.

    Todo lines in the section are replaced in order by the entries of
    ``todos`` (their ``index`` is ignored). If ``todos`` runs out, the
    remaining todo lines are removed; surplus entries are never written, so
    new items must go through :func:`add_todo_to_content`.

    A todo line whose text and state are unchanged is kept as-is. A rewritten
    line keeps its original leading and trailing whitespace (including a
    trailing carriage return), so only the checkbox and text can change.
    """
    result: list[str] = []
    consumed = 0

    for line, in_section in iter_section_lines(split_lines(content), section_header):
        match = match_todo_line(line) if in_section else None
        if match is None:
            result.append(line)
            continue

        if consumed >= len(todos):
            # Dropped: the updated list is shorter than the section
            continue

        todo = todos[consumed]
        consumed += 1
        if match.group("text") == todo.text and (match.group("state") == "x") == todo.done:
            result.append(line)
        else:
            result.append(_with_padding_of(line, todo.to_line()))

    return join_lines(result)


def add_todo_to_content(content: str, text: str, section_header: str) -> str:
    """Insert a new pending todo into the note's todo section.

    Resolution order:

    1. The first placeholder line in the section (``-``, ``- []``, ``- [ ]``)
       is replaced by the new todo.
    2. Otherwise the todo goes right after the last todo line in the section,
       or right after the header when the section has no todos yet.
    3. If the header is missing, a new section is appended to the end of the
       note, separated by a blank line when the note is not empty.
    """
    new_line = format_todo_line(text)
    lines = split_lines(content) if content else []

    header_at: int | None = None
    last_todo_at: int | None = None

    for i, (line, in_section) in enumerate(iter_section_lines(lines, section_header)):
        if header_at is None and is_section_header(line, section_header):
            header_at = i
        if not in_section:
            continue
        if is_placeholder_line(line):
            result = list(lines)
            result[i] = new_line + _line_ending(line)
            return join_lines(result)
        if is_todo_line(line):
            last_todo_at = i

    result = list(lines)
    if last_todo_at is not None:
        result.insert(last_todo_at + 1, new_line + _line_ending(lines[last_todo_at]))
    elif header_at is not None:
        result.insert(header_at + 1, new_line + _line_ending(lines[header_at]))
    else:
        if content:
            result.append("")
        result.extend([section_header, new_line])

    return join_lines(result)


def renumber(todos: Sequence[Todo]) -> list[Todo]:
    """Return copies of ``todos`` with indices reset to ``0..n-1``."""
    return [Todo(index=i, text=t.text, done=t.done) for i, t in enumerate(todos)]
