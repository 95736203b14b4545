"""Shared utilities for CLI commands."""

from __future__ import annotations

import sys
from datetime import date
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape

from dailytodo.config import get_config, init_config
from dailytodo.core.session import TodoSession
from dailytodo.utils.dates import get_relative_date_label, parse_fuzzy_date

if TYPE_CHECKING:
    from dailytodo.models import DailyTodos, Todo

# Main console for stdout (user-facing output)
console = Console(highlight=False)

# Maximum stdin size (64KB); a todo is a single line
MAX_STDIN_SIZE = 64 * 1024


def get_stdin_content() -> str | None:
    """Read content from stdin if available.

    Returns:
        Content from stdin stripped of leading/trailing whitespace,
        or None if stdin is a TTY (interactive terminal) or empty.

    Raises:
        SystemExit: If stdin contains binary data or exceeds size limit.
    """
    # If stdin is a TTY, user is typing interactively - no piped input
    if sys.stdin.isatty():
        return None

    try:
        content = sys.stdin.read()
    except UnicodeDecodeError:
        console.print("[red]Error: stdin appears to contain binary data.[/red]")
        raise SystemExit(1) from None

    if not content:
        return None

    if "\x00" in content:
        console.print("[red]Error: stdin appears to contain binary data.[/red]")
        raise SystemExit(1)

    if len(content) > MAX_STDIN_SIZE:
        console.print(
            f"[red]Error: stdin content exceeds size limit ({MAX_STDIN_SIZE // 1024}KB).[/red]"
        )
        raise SystemExit(1)

    stripped = content.strip()
    return stripped if stripped else None


def ensure_setup() -> None:
    """Ensure dailytodo is set up (creates the config file on first run)."""
    config = get_config()
    if not config.config_path.exists():
        init_config(config.config_dir)


def get_session() -> TodoSession:
    """Create a todo session over the current configuration."""
    return TodoSession(get_config())


def require_vault(session: TodoSession) -> None:
    """Exit with an error if no vault is configured."""
    if session.vault_root is None:
        console.print("[red]No vault configured.[/red]")
        console.print("[dim]Set one with: dtd vault <path>[/dim]")
        raise SystemExit(1)


def resolve_date(value: str | None, session: TodoSession) -> date:
    """Resolve a --date option to a date, defaulting to today."""
    if value is None:
        return session.today()

    dt = parse_fuzzy_date(value)
    if dt is None:
        console.print(f"[red]Could not parse date:[/red] {escape(value)}")
        console.print("[dim]Try 'today', 'yesterday', 'last friday' or 2024-01-31.[/dim]")
        raise SystemExit(1)
    return dt


def print_todo(t: Todo) -> None:
    """Print a single todo with its 1-based number."""
    # Checkbox indicator: x=completed, o=pending
    checkbox = "[green]x[/green]" if t.done else "[dim]o[/dim]"
    text = f"[dim]{escape(t.text)}[/dim]" if t.done else escape(t.text)
    console.print(f"  [cyan]{t.index + 1:>3}[/cyan] {checkbox} {text}")


def print_day(dt: date, todos: list[Todo], today: date | None = None) -> None:
    """Print a day heading followed by its todos."""
    label = get_relative_date_label(dt, today)
    done = sum(1 for t in todos if t.done)
    heading = f"[bold]{dt.isoformat()}[/bold]"
    if label != dt.isoformat():
        heading += f" [dim]({label})[/dim]"
    console.print(f"{heading} [dim]{done}/{len(todos)} done[/dim]")

    if not todos:
        console.print("  [dim]No todos.[/dim]")
    for t in todos:
        print_todo(t)


def print_history(history: list[DailyTodos], today: date | None = None) -> None:
    if not history:
        console.print("[dim]No todos in the history window.[/dim]")
        return

    for i, day in enumerate(history):
        if i:
            console.print()
        print_day(day.date, day.todos, today)
