"""CLI package for dailytodo."""

from __future__ import annotations

import logging
import sys

# Ensure stdout handles Unicode when piped (e.g., `dtd list | less`)
if hasattr(sys.stdout, "reconfigure"):
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")

import click

from dailytodo import __version__
from dailytodo.cli.config_cmd import register_config_commands
from dailytodo.cli.todos import register_todo_commands, show_today
from dailytodo.cli.utils import ensure_setup, get_session


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="dtd")
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Manage the todo section of your daily notes.

    Run 'dtd' without arguments to list today's todos.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )

    ensure_setup()
    if ctx.invoked_subcommand is None:
        # Default action: list today's todos
        show_today(get_session())


# Register all command groups
register_todo_commands(cli)
register_config_commands(cli)


def main() -> None:
    """Entry point for the CLI."""
    cli()


__all__ = ["cli", "main"]
