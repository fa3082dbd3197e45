"""Main entry point for Pomodoro CLI."""

import typer
from rich.console import Console

from pomodoro_cli import __version__
from pomodoro_cli.commands import config, timer
from pomodoro_cli.utils.typer_helpers import SuggestingGroup

# Create main app with custom group class
app = typer.Typer(
    name="pomodoro",
    cls=SuggestingGroup,
    help="A command-line Pomodoro timer with focus and break phases",
    no_args_is_help=True,
)

console = Console()


# Add subcommands
app.add_typer(timer.app, name="timer", help="Pomodoro timer commands")
app.add_typer(config.app, name="config", help="Configuration management")


# Add top-level commands
@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"[bold]Pomodoro CLI[/bold] version [cyan]{__version__}[/cyan]")


@app.command()
def start(
    mode: str = typer.Argument(
        "work", help="Session type: work, short_break, or long_break"
    ),
) -> None:
    """Start a phase."""
    # Delegate to timer command
    timer.start_timer(mode=mode)


@app.command()
def pause() -> None:
    """Pause the running phase."""
    timer.pause_timer()


@app.command()
def resume() -> None:
    """Resume a paused phase."""
    timer.resume_timer()


@app.command()
def skip() -> None:
    """Finish the current phase now and move on."""
    timer.skip_phase()


@app.command()
def status(
    output: str = typer.Option("pretty", "--output", "-o", help="Output format"),
) -> None:
    """Show the current timer status."""
    timer.timer_status(output=output)


# Main entry point
def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
