"""Turns the current UI state and task list into rich renderables. Reads only, never mutates."""

from rich import box
from rich.align import Align
from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from tt.core.report import format_duration
from tt.ui.state import CreateProject, DeleteProject, Help, Projects

TITLE = "Time Tracking CLI"
SHORTCUTS_HINT = "q: Quit | ?: Show help"
SELECTED_STYLE = "on rgb(60,60,60)"
RUNNING_STYLE = "green"
ACCENT_STYLE = "bright_cyan"

HELP_ROWS = (
    ("a", "Add new project"),
    ("d", "Delete selected project"),
    ("<space>", "Start/stop project timer"),
    ("j / k", "Move selection down / up"),
    ("r", "Generate a report"),
    ("q", "Quit"),
    ("<esc>", "Close help"),
)


def _bar(text, title=None, style=ACCENT_STYLE):
    return Panel(Align.center(Text(text, style=style)), title=title, box=box.SQUARE, border_style="white")


def render_header():
    return _bar(SHORTCUTS_HINT, title="Shortcuts")


def render_footer(status=None):
    if status:
        return _bar(status, style="yellow")
    return _bar(TITLE)


def render_tasks(tasks, selected, now):
    table = Table(expand=True, box=box.SQUARE, title=None, show_edge=False, header_style="bold")
    table.add_column("Project", ratio=1)
    table.add_column("Status", ratio=1)
    table.add_column("Total", ratio=1)
    for index, task in enumerate(tasks):
        if task.is_running():
            status = Text(f"Running [{format_duration(task.current_duration(now))}]", style=RUNNING_STYLE)
        else:
            status = Text("Not running")
        table.add_row(
            Text(task.project),
            status,
            Text(format_duration(task.total_duration(now))),
            style=SELECTED_STYLE if index == selected else None,
        )
    body = table
    if not tasks:
        body = Group(table, Align.center(Text("No projects yet. Press a to add one.", style="dim")))
    return Panel(body, title="Details", box=box.SQUARE, border_style="white")


def render_help_popup():
    table = Table(box=None, show_edge=False, header_style="bold")
    table.add_column("Shortcut")
    table.add_column("Description")
    for shortcut, description in HELP_ROWS:
        table.add_row(shortcut, description)
    return Align.center(Panel(table, title="Help", box=box.SQUARE, expand=False))


def render_create_popup(text):
    # Trailing block stands in for the cursor, which is hidden while the screen is up.
    return Align.center(Panel(Text(text) + Text("█", style="blink"), title="New project name", box=box.SQUARE, width=40))


def render_delete_project_popup(tasks, selected):
    name = tasks[selected].project if selected is not None and 0 <= selected < len(tasks) else ""
    prompt = Text("y/n")
    if name:
        prompt = Text.assemble(("Delete ", ""), (name, "bold"), ("? ", ""), ("y/n", ACCENT_STYLE))
    return Align.center(Panel(prompt, title="Confirm deletion", box=box.SQUARE, width=40))


def render(state, tasks, selected, now, status=None):
    """Whole screen for one frame: shortcuts bar, body for the current state, footer."""
    if isinstance(state, Projects):
        body = render_tasks(tasks, selected, now)
    elif isinstance(state, Help):
        body = render_help_popup()
    elif isinstance(state, CreateProject):
        body = render_create_popup(state.input)
    elif isinstance(state, DeleteProject):
        body = render_delete_project_popup(tasks, selected)
    else:
        raise TypeError(f"Unknown UI state: {state!r}")
    return Group(render_header(), body, render_footer(status))
