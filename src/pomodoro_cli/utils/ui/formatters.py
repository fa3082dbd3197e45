"""Output formatters for different formats."""

import json
from typing import Any

import yaml
from rich.table import Table

from pomodoro_cli.utils.ui.console import get_console

OUTPUT_FORMATS = ("pretty", "json", "yaml", "table")


def format_output(data: Any, output_format: str = "table") -> None:
    """Format and display output based on format."""
    if output_format == "json":
        print(json.dumps(data, indent=2, default=str, ensure_ascii=False))
    elif output_format == "yaml":
        print(yaml.safe_dump(data, default_flow_style=False, sort_keys=False), end="")
    else:
        format_table(data)


def format_table(data: Any) -> None:
    """Format data as a table."""
    console = get_console()
    if not data:
        console.print("[yellow]No data to display[/yellow]")
        return

    if isinstance(data, dict):
        format_single_item(data)
    else:
        console.print(data)


def format_single_item(item: dict, prefix: str = "") -> None:
    """Format a single item as key-value pairs; nested dicts use dotted keys."""
    table = Table(show_header=False, box=None)
    table.add_column("Key", style="cyan")
    table.add_column("Value", style="white")

    for key, value in _flatten(item, prefix):
        table.add_row(key, _format_value(value))

    get_console().print(table)


def _flatten(item: dict, prefix: str = "") -> list[tuple[str, Any]]:
    rows = []
    for key, value in item.items():
        full_key = f"{prefix}{key}"
        if isinstance(value, dict):
            rows.extend(_flatten(value, f"{full_key}."))
        else:
            rows.append((full_key, value))
    return rows


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "✓" if value else "✗"
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    if value is None:
        return "-"
    return str(value)


def format_error(message: str) -> None:
    """Format and display an error message."""
    get_console().print(f"[bold red]Error:[/bold red] {message}")


def format_success(message: str) -> None:
    """Format and display a success message."""
    get_console().print(f"[bold green]Success:[/bold green] {message}")

