"""Configuration management commands."""

from typing import Optional

import typer

from pomodoro_cli.services.config_service import get_config_service, parse_value
from pomodoro_cli.utils.exit_codes import ERROR_NOT_FOUND
from pomodoro_cli.utils.ui.console import get_console
from pomodoro_cli.utils.ui.formatters import format_output, format_success

from .decorators import AppError, command_wrapper

app = typer.Typer(help="Configuration management commands")
console = get_console()


def _not_found(key: str) -> AppError:
    return AppError(f"Configuration key '{key}' not found", exit_code=ERROR_NOT_FOUND)


@app.command("view")
@command_wrapper
def view_config(
    output: str = typer.Option("table", "--output", "-o", help="Output format"),
) -> None:
    """View current configuration."""
    config = get_config_service().config
    format_output(config.model_dump(), output)


@app.command("get")
@command_wrapper
def get_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., timer.work_seconds)"),
) -> None:
    """Get a configuration value."""
    try:
        value = get_config_service().get(key)
    except KeyError:
        raise _not_found(key) from None
    if isinstance(value, dict):
        format_output(value, "table")
    else:
        console.print(value)


@app.command("set")
@command_wrapper
def set_config(
    key: str = typer.Argument(..., help="Configuration key (e.g., timer.work_seconds)"),
    value: str = typer.Argument(..., help="Configuration value"),
) -> None:
    """Set a configuration value."""
    parsed_value = parse_value(value)
    try:
        get_config_service().set(key, parsed_value)
    except KeyError:
        raise _not_found(key) from None
    format_success(f"Configuration '{key}' set to '{parsed_value}'")


@app.command("reset")
@command_wrapper
def reset_config(
    key: Optional[str] = typer.Argument(None, help="Configuration key to reset"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Reset configuration to defaults."""
    if not yes:
        msg = "entire configuration" if not key else f"'{key}'"
        if not typer.confirm(f"Are you sure you want to reset {msg}?"):
            console.print("[yellow]Cancelled[/yellow]")
            raise typer.Exit(0)

    try:
        get_config_service().reset(key)
    except KeyError:
        raise _not_found(key) from None

    if key:
        format_success(f"Configuration '{key}' reset to default")
    else:
        format_success("Configuration reset to defaults")


@app.command("path")
@command_wrapper
def config_path() -> None:
    """Show where configuration and timer state are stored."""
    svc = get_config_service()
    typer.echo(f"config: {svc.config_path}")
    typer.echo(f"state:  {svc.state_file}")
