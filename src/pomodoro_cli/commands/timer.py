"""Pomodoro timer commands for Pomodoro CLI.

Each command restores the persisted timer (catching up on time that passed
while no process was running), applies one operation and exits. ``watch``
keeps the timer ticking in a full-screen display.
"""

import asyncio

import typer
from rich.live import Live
from rich.panel import Panel

from pomodoro_cli.models.timer.keyboard import KeyboardHandler, action_for_key
from pomodoro_cli.models.timer.machine import SessionStateMachine
from pomodoro_cli.models.timer.state import Mode, StatusSnapshot, TransitionEvent
from pomodoro_cli.models.timer.ui import (
    TimerDisplay,
    format_status_lines,
    format_statusline,
    show_transition_message,
    timer_color,
    transition_notice,
)
from pomodoro_cli.services.config_service import get_config_service
from pomodoro_cli.services.timer_service import build_state_machine, run_timer_action
from pomodoro_cli.utils.exit_codes import ERROR_INVALID_ARGS
from pomodoro_cli.utils.ui.console import get_console
from pomodoro_cli.utils.ui.formatters import OUTPUT_FORMATS, format_output

from .decorators import AppError, command_wrapper

console = get_console()
app = typer.Typer(help="Pomodoro timer with focus and break phases")

REFRESH_SECONDS = 0.25


def _create_machine(announce: bool = True) -> SessionStateMachine:
    """Build the state machine from the user's configuration."""
    svc = get_config_service()
    config = svc.config
    machine = build_state_machine(config, svc.state_file)
    if not announce:
        return machine

    def show_transition(event: TransitionEvent) -> None:
        show_transition_message(event, console, bell=config.display.bell)

    machine.subscribe(show_transition)
    return machine


def _apply(action, announce: bool = True):
    """Run ``action`` against the persisted timer; returns (before, after).

    With ``announce`` off, phase transitions caught up on restore are not
    printed, keeping machine-readable output clean.
    """

    def _run(machine: SessionStateMachine) -> tuple[StatusSnapshot, StatusSnapshot]:
        before = machine.status()
        return before, action(machine)

    return run_timer_action(lambda: _create_machine(announce), _run)


def show_status(snapshot: StatusSnapshot, output: str = "pretty") -> None:
    """Display a status snapshot in the requested format."""
    if output != "pretty":
        format_output(snapshot.to_dict(), output)
        return

    lines = format_status_lines(snapshot)
    if snapshot.is_paused:
        lines[0] += " (paused)"
    color = timer_color(snapshot)
    console.print(
        Panel(
            "\n".join(lines),
            border_style=color,
            expand=False,
            padding=(0, 2),
        )
    )


@app.command("start")
@command_wrapper
def start_timer(
    mode: str = typer.Argument(
        "work", help="Session type: work, short_break, or long_break"
    ),
):
    """Start a phase. Does nothing if the timer is already running."""
    parsed = Mode.parse(mode)
    before, after = _apply(lambda machine: machine.start(parsed))

    if before.is_running:
        console.print("[yellow]Timer is already running[/yellow]")
    else:
        console.print(
            f"[bold green]{after.label} started[/bold green] ({after.clock})"
        )
    show_status(after)


@app.command("pause")
@command_wrapper
def pause_timer():
    """Pause the running phase."""
    before, after = _apply(lambda machine: machine.pause())
    if not before.is_running:
        console.print("[yellow]No running timer to pause[/yellow]")
    else:
        console.print(f"[yellow]Paused[/yellow] with {after.clock} left")
    show_status(after)


@app.command("resume")
@command_wrapper
def resume_timer():
    """Resume a paused phase."""
    before, after = _apply(lambda machine: machine.resume())
    if not before.is_paused:
        console.print("[yellow]No paused timer to resume[/yellow]")
    else:
        console.print(f"[green]Resumed[/green] {after.label} ({after.clock} left)")
    show_status(after)


@app.command("reset")
@command_wrapper
def reset_timer(
    all_: bool = typer.Option(
        False, "--all", help="Also clear the completed-session counter"
    ),
):
    """Stop the timer and return to idle."""
    _, after = _apply(lambda machine: machine.reset(clear_completed=all_))
    if all_:
        console.print("[green]Timer reset and session counter cleared[/green]")
    else:
        console.print("[green]Timer reset[/green]")
    show_status(after)


@app.command("stop")
@command_wrapper
def stop_timer():
    """Stop the timer (keeps the completed-session counter)."""
    _, after = _apply(lambda machine: machine.stop())
    console.print("[green]Timer stopped[/green]")
    show_status(after)


@app.command("skip")
@command_wrapper
def skip_phase():
    """Finish the current phase now and move on to the next one."""
    before, after = _apply(lambda machine: machine.skip())
    if before.mode is Mode.IDLE:
        console.print("[yellow]No active phase to skip[/yellow]")
    show_status(after)


@app.command("status")
@command_wrapper
def timer_status(
    output: str = typer.Option(
        "pretty", "--output", "-o", help="Output format: pretty, json, yaml, table"
    ),
):
    """Show the current timer status."""
    if output not in OUTPUT_FORMATS:
        raise AppError(
            f"Invalid output format '{output}'. Must be one of: {', '.join(OUTPUT_FORMATS)}",
            exit_code=ERROR_INVALID_ARGS,
        )
    _, after = _apply(lambda machine: machine.status(), announce=output == "pretty")
    show_status(after, output)


@app.command("statusline")
@command_wrapper
def timer_statusline(
    icons: bool | None = typer.Option(
        None, "--icons/--no-icons", help="Show mode icons"
    ),
):
    """Print a one-line status for shell prompts and status bars."""
    if icons is None:
        icons = get_config_service().config.display.icons
    _, after = _apply(lambda machine: machine.status(), announce=False)
    typer.echo(format_statusline(after, icons=icons))


async def _watch(machine: SessionStateMachine, display: TimerDisplay, bell: bool) -> None:
    keyboard = KeyboardHandler()
    notice: list[str] = []

    def on_transition(event: TransitionEvent) -> None:
        notice[:] = [transition_notice(event)]
        if bell:
            console.bell()

    machine.subscribe(on_transition)
    try:
        machine.restore()
        snapshot = machine.status()
        with Live(
            display.render(snapshot, machine.config.duration_for(snapshot.mode)),
            console=console,
            refresh_per_second=4,
            screen=True,
        ) as live:
            while True:
                action = action_for_key(keyboard.get_key())
                if action == "quit":
                    return
                if action:
                    notice.clear()
                    getattr(machine, action)()

                snapshot = machine.status()
                live.update(
                    display.render(
                        snapshot,
                        machine.config.duration_for(snapshot.mode),
                        notice[0] if notice else None,
                    )
                )
                await asyncio.sleep(REFRESH_SECONDS)
    finally:
        machine.close()
        keyboard.stop()


@app.command("watch")
@command_wrapper
def watch_timer():
    """Show a live full-screen countdown with keyboard controls."""
    svc = get_config_service()
    config = svc.config
    machine = build_state_machine(config, svc.state_file)
    display = TimerDisplay(
        sessions_before_long_break=config.timer.sessions_before_long_break,
        icons=config.display.icons,
    )

    try:
        asyncio.run(_watch(machine, display, bell=config.display.bell))
    except KeyboardInterrupt:
        pass

    snapshot = machine.status()
    if snapshot.mode is not Mode.IDLE:
        console.print("[dim]Timer state saved. Run 'pomodoro status' to check in.[/dim]")
    show_status(snapshot)
