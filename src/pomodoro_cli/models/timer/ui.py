"""Status text and the full-screen live display for the timer."""

from __future__ import annotations

from rich.align import Align
from rich.console import Console, Group
from rich.layout import Layout
from rich.panel import Panel
from rich.text import Text

from .state import Mode, StatusSnapshot, TransitionEvent

MODE_ICONS = {
    Mode.WORK: "🍅",
    Mode.SHORT_BREAK: "☕",
    Mode.LONG_BREAK: "🌴",
    Mode.IDLE: "⏹",
}
PAUSED_ICON = "⏸"


def status_icon(snapshot: StatusSnapshot) -> str:
    if snapshot.is_paused:
        return PAUSED_ICON
    return MODE_ICONS[snapshot.mode]


def format_status_lines(snapshot: StatusSnapshot) -> list[str]:
    """Three-line status block: mode, countdown, session count."""
    return [
        f"{MODE_ICONS[snapshot.mode]} {snapshot.label}",
        snapshot.clock,
        f"Sessions: {snapshot.completed_work_sessions}",
    ]


def format_statusline(snapshot: StatusSnapshot, icons: bool = True) -> str:
    """Compact one-line status for shell prompts and status bars."""
    if snapshot.mode is Mode.IDLE:
        body = f"idle #{snapshot.completed_work_sessions}"
    else:
        body = f"{snapshot.clock} #{snapshot.completed_work_sessions}"
        if snapshot.is_paused and not icons:
            body += " (paused)"

    if icons:
        return f"{status_icon(snapshot)} {body}"
    if snapshot.mode is Mode.IDLE:
        return body
    return f"{snapshot.mode.value} {body}"


def timer_color(snapshot: StatusSnapshot) -> str:
    if snapshot.is_paused:
        return "yellow"
    if snapshot.mode is Mode.IDLE:
        return "dim"
    if snapshot.remaining_seconds < 60:
        return "red"
    if snapshot.remaining_seconds < 300:
        return "yellow"
    return "cyan"


def progress_dots(snapshot: StatusSnapshot, sessions_before_long_break: int) -> str:
    """Dots showing the position within the current long-break cycle."""
    done = snapshot.completed_work_sessions % sessions_before_long_break
    if done == 0 and snapshot.completed_work_sessions and snapshot.mode is Mode.LONG_BREAK:
        done = sessions_before_long_break

    dots = []
    for i in range(1, sessions_before_long_break + 1):
        if i <= done:
            dots.append("●")  # Completed
        elif i == done + 1 and snapshot.mode is Mode.WORK:
            dots.append("◉")  # Current
        else:
            dots.append("○")  # Upcoming
    return " ".join(dots)


class TimerDisplay:
    """Builds the full-screen timer layout."""

    def __init__(self, sessions_before_long_break: int = 4, icons: bool = True):
        self.sessions_before_long_break = sessions_before_long_break
        self.icons = icons

    def render(
        self,
        snapshot: StatusSnapshot,
        total_seconds: int = 0,
        notice: str | None = None,
    ) -> Layout:
        """Create the timer layout with all components."""
        layout = Layout()
        layout.split_column(
            Layout(name="header", size=3),
            Layout(name="body"),
            Layout(name="footer", size=3),
        )

        if snapshot.is_paused:
            title = f"PAUSED · {snapshot.label}"
            color = "yellow"
        elif snapshot.mode is Mode.IDLE:
            title = "Idle"
            color = "dim"
        else:
            title = snapshot.label
            color = "green" if snapshot.mode.is_break else "cyan"

        header = f"{status_icon(snapshot)}  {title}" if self.icons else title
        layout["header"].update(
            Align.center(
                Text(header, style=f"bold {color}", justify="center"),
                vertical="middle",
            )
        )
        layout["body"].update(
            Align.center(self._body(snapshot, total_seconds, notice), vertical="middle")
        )
        layout["footer"].update(
            Align.center(self._footer(snapshot), vertical="middle")
        )
        return layout

    def _body(
        self, snapshot: StatusSnapshot, total_seconds: int, notice: str | None
    ) -> Group:
        components = [
            Text(snapshot.clock, style=f"bold {timer_color(snapshot)}", justify="center"),
            Text(""),
        ]

        if total_seconds > 0:
            elapsed = total_seconds - snapshot.remaining_seconds
            progress_pct = max(0, min(100, int(elapsed / total_seconds * 100)))
            bar_width = 40
            filled = int(bar_width * progress_pct / 100)
            progress_bar = "▓" * filled + "░" * (bar_width - filled)
            components.append(
                Text(f"{progress_bar}  {progress_pct}%", style="dim", justify="center")
            )
            components.append(Text(""))

        components.append(
            Text(
                progress_dots(snapshot, self.sessions_before_long_break),
                justify="center",
            )
        )
        components.append(
            Text(
                f"Sessions: {snapshot.completed_work_sessions}",
                style="dim",
                justify="center",
            )
        )
        if notice:
            components.append(Text(""))
            components.append(Text(notice, style="bold green", justify="center"))
        return Group(*components)

    def _footer(self, snapshot: StatusSnapshot) -> Text:
        if snapshot.is_paused:
            hints = "'r' resume  •  's' skip  •  'x' reset  •  'q' quit"
        elif snapshot.mode is Mode.IDLE:
            hints = "'w' work  •  'q' quit"
        else:
            hints = "'p' pause  •  's' skip  •  'x' reset  •  'q' quit"
        return Text(hints, style="dim", justify="center")


def transition_notice(event: TransitionEvent) -> str:
    """One-line announcement of a finished phase."""
    if event.completed_mode is Mode.WORK:
        return f"Focus session complete! Next: {event.next_mode.label}"
    return "Break over, back to work."


def show_transition_message(
    event: TransitionEvent, console: Console | None = None, bell: bool = False
) -> None:
    """Print a panel announcing a finished phase."""
    console = console or Console()

    if event.completed_mode is Mode.WORK:
        headline = f"[bold green]🎉 {transition_notice(event)}[/bold green]"
        border = "green"
    else:
        headline = f"[bold cyan]{transition_notice(event)}[/bold cyan]"
        border = "cyan"

    panel = Panel(
        f"""{headline}

Now: {event.next_mode.label}
Completed sessions: {event.completed_work_sessions}""",
        border_style=border,
        padding=(1, 2),
    )
    console.print(panel)
    if bell:
        console.bell()
