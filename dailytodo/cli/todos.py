"""Todo-related CLI commands."""

from __future__ import annotations

import logging
import signal
import sys
import threading

import click
from rich.markup import escape

from dailytodo.cli.utils import (
    console,
    get_session,
    get_stdin_content,
    print_day,
    print_history,
    require_vault,
    resolve_date,
)
from dailytodo.core.session import TodoSession

logger = logging.getLogger(__name__)

DATE_HELP = "Daily note date (e.g. 'yesterday', 'last friday', 2024-01-31)"


def register_todo_commands(cli: click.Group) -> None:
    """Register all todo-related commands with the CLI."""
    cli.add_command(list_cmd)
    cli.add_command(add_cmd)
    cli.add_command(done_cmd)
    cli.add_command(undone_cmd)
    cli.add_command(edit_cmd)
    cli.add_command(delete_cmd)
    cli.add_command(vault_cmd)
    cli.add_command(watch_cmd)


def show_today(session: TodoSession) -> None:
    """Print today's todos, creating today's note if needed."""
    require_vault(session)
    todos = session.list_today()
    print_day(session.today(), todos, session.today())


def _target_todo(session: TodoSession, date_value: str | None, index: int):
    """Resolve the date option and the 1-based index to (date, todo)."""
    require_vault(session)
    dt = resolve_date(date_value, session)
    todos = session.todos_for(dt)

    if not todos:
        console.print(f"[red]No todos on {dt.isoformat()}.[/red]")
        raise SystemExit(1)
    if index > len(todos):
        console.print(
            f"[red]Todo {index} not found:[/red] {dt.isoformat()} has {len(todos)} todo(s)."
        )
        console.print("[dim]Use 'dtd list' to see todo numbers.[/dim]")
        raise SystemExit(1)
    return dt, todos[index - 1]


def _fail(action: str) -> None:
    console.print(f"[red]Failed to {action} todo.[/red]")
    console.print(
        "[dim]The note could not be updated. Rerun as 'dtd --verbose ...' for details.[/dim]"
    )
    raise SystemExit(1)


@click.command("list")
@click.option("--history", "-H", is_flag=True, help="Show todos from recent days")
@click.option(
    "--days",
    type=click.IntRange(min=1),
    default=None,
    help="Number of days to include with --history",
)
@click.option("--date", "-d", "date_value", help=DATE_HELP)
def list_cmd(history: bool, days: int | None, date_value: str | None) -> None:
    """List todos.

    Shows today's todos by default. Numbers shown next to each todo are
    used by done, undone, edit and delete.

    \b
    Examples:
      dtd list                # Today's todos
      dtd list --history      # Last 30 days (configurable)
      dtd list -H --days 7    # Last week
      dtd list -d yesterday   # A specific day
    """
    session = get_session()
    require_vault(session)

    if history:
        print_history(session.load_history(days), session.today())
    elif date_value:
        dt = resolve_date(date_value, session)
        print_day(dt, session.todos_for(dt), session.today())
    else:
        show_today(session)


@click.command("add")
@click.argument("text", nargs=-1)
def add_cmd(text: tuple[str, ...]) -> None:
    """Add a todo to today's note.

    Text can be passed as arguments or piped via stdin.

    \b
    Examples:
      dtd add Review pull requests
      echo "Call the bank" | dtd add
    """
    content = " ".join(text) if text else get_stdin_content()
    if not content or not content.strip():
        console.print("[yellow]No todo text provided.[/yellow]")
        raise SystemExit(1)

    session = get_session()
    require_vault(session)

    if not session.add_today(content):
        _fail("add")
    console.print(f"[green]Added:[/green] {escape(' '.join(content.split()))}")


@click.command("done")
@click.argument("index", type=click.IntRange(min=1))
@click.option("--date", "-d", "date_value", help=DATE_HELP)
def done_cmd(index: int, date_value: str | None) -> None:
    """Mark a todo as completed."""
    session = get_session()
    dt, todo = _target_todo(session, date_value, index)

    if todo.done:
        console.print(f"[yellow]Already completed:[/yellow] {escape(todo.text)}")
        return
    if not session.toggle(dt, todo.index, True):
        _fail("complete")
    console.print(f"[green]Completed:[/green] {escape(todo.text)}")


@click.command("undone")
@click.argument("index", type=click.IntRange(min=1))
@click.option("--date", "-d", "date_value", help=DATE_HELP)
def undone_cmd(index: int, date_value: str | None) -> None:
    """Mark a completed todo as pending again."""
    session = get_session()
    dt, todo = _target_todo(session, date_value, index)

    if not todo.done:
        console.print(f"[yellow]Not completed:[/yellow] {escape(todo.text)}")
        return
    if not session.toggle(dt, todo.index, False):
        _fail("reopen")
    console.print(f"[green]Reopened:[/green] {escape(todo.text)}")


@click.command("edit")
@click.argument("index", type=click.IntRange(min=1))
@click.argument("text", nargs=-1, required=True)
@click.option("--date", "-d", "date_value", help=DATE_HELP)
def edit_cmd(index: int, text: tuple[str, ...], date_value: str | None) -> None:
    """Replace the text of a todo.

    \b
    Examples:
      dtd edit 2 Review the release notes
      dtd edit 1 "Call the bank" -d yesterday
    """
    new_text = " ".join(text)
    if not new_text.strip():
        console.print("[yellow]No todo text provided.[/yellow]")
        raise SystemExit(1)

    session = get_session()
    dt, todo = _target_todo(session, date_value, index)

    if not session.edit(dt, todo.index, new_text):
        _fail("edit")
    new_text = " ".join(new_text.split())
    console.print(
        f"[green]Updated:[/green] {escape(todo.text)} [dim]->[/dim] {escape(new_text)}"
    )


@click.command("delete")
@click.argument("index", type=click.IntRange(min=1))
@click.option("--date", "-d", "date_value", help=DATE_HELP)
@click.option("--force", "-f", is_flag=True, help="Skip confirmation")
def delete_cmd(index: int, date_value: str | None, force: bool) -> None:
    """Delete a todo from its daily note.

    \b
    Examples:
      dtd delete 3
      dtd delete 1 -d yesterday -f   # Skip confirmation
    """
    from rich.prompt import Confirm

    session = get_session()
    dt, todo = _target_todo(session, date_value, index)

    if not force:
        console.print(f"\n[bold]Delete todo:[/bold] {escape(todo.text)}")
        console.print(f"[dim]Note: {dt.isoformat()}.md[/dim]")
        if not Confirm.ask("Are you sure?", default=False):
            console.print("[dim]Cancelled.[/dim]")
            return

    if not session.delete(dt, todo.index):
        _fail("delete")
    console.print(f"[green]Deleted:[/green] {escape(todo.text)}")


@click.command("vault")
@click.argument("path", required=False)
def vault_cmd(path: str | None) -> None:
    """Show or change the vault directory.

    \b
    Examples:
      dtd vault                        # Show the current vault
      dtd vault ~/Documents/Obsidian   # Use a different vault
    """
    session = get_session()

    if path is None:
        if session.vault_root is None:
            console.print("[yellow]No vault configured.[/yellow]")
            console.print("[dim]Set one with: dtd vault <path>[/dim]")
            raise SystemExit(1)
        console.print(f"Vault: {session.vault_root}")
        return

    if not session.set_vault_root(path):
        console.print(f"[red]Directory does not exist:[/red] {escape(path)}")
        raise SystemExit(1)
    console.print(f"[green]Vault set to:[/green] {session.vault_root}")
    show_today(session)


@click.command("watch")
def watch_cmd() -> None:
    """Watch today's note and print todos whenever it changes.

    Also picks up the new daily note after midnight. Press Ctrl+C to stop.
    """
    from dailytodo.watcher import TodoWatcher

    session = get_session()
    require_vault(session)

    # Log to file as well as the console; --verbose keeps DEBUG
    config = session.config
    verbose = logging.getLogger().isEnabledFor(logging.DEBUG)
    config.config_dir.mkdir(parents=True, exist_ok=True)
    handlers: list[logging.Handler] = [
        logging.FileHandler(config.log_path, encoding="utf-8"),
        logging.StreamHandler(),
    ]
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=handlers,
        force=True,
    )

    print_lock = threading.Lock()

    def reload_and_show() -> None:
        session.reload()
        with print_lock:
            console.print()
            today = session.today()
            print_day(session.loaded_date or today, session.today_todos, today)

    reload_and_show()

    stopping = threading.Event()

    def handle_shutdown(signum, frame):
        logger.info("Received shutdown signal")
        stopping.set()

    signal.signal(signal.SIGTERM, handle_shutdown)
    signal.signal(signal.SIGINT, handle_shutdown)
    if sys.platform == "win32":
        signal.signal(signal.SIGBREAK, handle_shutdown)

    watcher = TodoWatcher(session, on_reload=reload_and_show)
    watcher.start()
    console.print("[dim]Watching for changes. Press Ctrl+C to stop.[/dim]")
    try:
        while not stopping.wait(1.0):
            pass
    finally:
        watcher.stop()
        logger.info("Watcher stopped")
