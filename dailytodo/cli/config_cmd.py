"""Config-related CLI commands."""

from __future__ import annotations

import click
from rich.markup import escape

from dailytodo.cli.utils import console
from dailytodo.config import get_config


def register_config_commands(cli: click.Group) -> None:
    """Register all config-related commands with the CLI."""
    cli.add_command(config_cmd)


@click.group("config", invoke_without_command=True)
@click.pass_context
def config_cmd(ctx: click.Context) -> None:
    """Manage configuration settings.

    When called without a subcommand, shows the config file location.

    \b
    Subcommands:
      get <key>           Get a configuration value
      set <key> <value>   Set a configuration value
      list                List all configurable settings

    \b
    Examples:
      dtd config get vault_root
      dtd config set todo.section_header "### Today"
      dtd config set todo.history_days 14
      dtd config list
    """
    if ctx.invoked_subcommand is None:
        config = get_config()
        console.print(f"Config file: {config.config_path}")
        console.print("[dim]Use 'dtd config list' to see available settings.[/dim]")


@config_cmd.command("get")
@click.argument("key")
def config_get(key: str) -> None:
    """Get a configuration value.

    \b
    Keys:
      vault_root, template_path
      todo.section_header, todo.history_days
      watch.rollover_interval, watch.debounce_seconds
    """
    from dailytodo.config import CONFIGURABLE_SETTINGS, get_config_value

    if key not in CONFIGURABLE_SETTINGS:
        console.print(f"[red]Unknown setting:[/red] {escape(key)}")
        console.print("[dim]Use 'dtd config list' to see available settings.[/dim]")
        raise SystemExit(1)

    value = get_config_value(key)
    value_str = escape(str(value)) if value is not None else "[dim]<not set>[/dim]"
    console.print(f"{key} = {value_str}")


@config_cmd.command("set")
@click.argument("key")
@click.argument("value")
def config_set(key: str, value: str) -> None:
    """Set a configuration value.

    Use 'none' to clear vault_root or template_path.

    \b
    Examples:
      dtd config set vault_root ~/Documents/Obsidian
      dtd config set template_path ~/Documents/Obsidian/templates/daily.md
      dtd config set watch.rollover_interval 30
    """
    from dailytodo.config import set_config_value

    try:
        if set_config_value(key, value):
            console.print(f"[green]Set[/green] {escape(key)} = {escape(value)}")
        else:
            console.print(f"[red]Unknown setting:[/red] {escape(key)}")
            console.print("[dim]Use 'dtd config list' to see available settings.[/dim]")
            raise SystemExit(1)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise SystemExit(1) from None


@config_cmd.command("list")
def config_list() -> None:
    """List all configurable settings."""
    from dailytodo.config import list_config_settings

    settings = list_config_settings()

    console.print("\n[bold]Configurable Settings[/bold]\n")
    for key, (description, value) in settings.items():
        value_str = escape(str(value)) if value is not None else "[dim]<not set>[/dim]"
        console.print(f"  [cyan]{key}[/cyan]")
        console.print(f"    {escape(description)}")
        console.print(f"    Current: {value_str}")
        console.print()
