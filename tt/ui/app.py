import queue
import sys
from pathlib import Path
from rich.console import Console
from prompt_toolkit.input import create_input
from tt.common.errors import EmptyInputRejected, IndexOutOfRange, StoreError
from tt.common.logger import log
from tt.core import config
from tt.core.models import Task, next_task_id
from tt.core.report import write_report
from tt.core.store import JsonTaskStore, TaskStore
from tt.core.timer import running_task, toggle
from tt.ui.events import InputEvent, InputFailed, InputPoller, Tick
from tt.ui.render import render
from tt.ui.state import (
    CreateProject,
    DeleteProject,
    Help,
    InputCharacter,
    Projects,
    Transition,
    clamp,
    move_down,
    move_up,
    transition,
)
from tt.util.misc import now_utc


# ---------------------------------------------------------------------------
# Task list operations
# ---------------------------------------------------------------------------

# Appends a new, stopped task named `name` (stripped). Blank names are rejected.
def add_task(tasks, name, now=None):
    name = name.strip()
    if not name:
        raise EmptyInputRejected("Project name can't be empty")
    task = Task(id=next_task_id(tasks), project=name, created_at=now or now_utc())
    tasks.append(task)
    return task


# Removes and returns the task at `index`. Like toggle(), negative indexes are out of range.
def remove_task(tasks, index):
    if index is None or index < 0 or index >= len(tasks):
        raise IndexOutOfRange(index, len(tasks))
    return tasks.pop(index)


# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------

# Holds the UI state, the selection, and the last known task list, and turns key presses into state
# transitions and store updates. Knows nothing about the terminal until run() is called.
class TrackerApp:

    def __init__(self, store: TaskStore, report_path, tick_rate=0.2, clock=now_utc):
        self.store = store
        self.report_path = Path(report_path)
        self.tick_rate = tick_rate
        self.clock = clock

        self.state = Projects()
        self.status = None
        self.running = True

        # Startup load failures are not caught here, a store we can't read is fatal
        self.tasks = store.load()
        self.selected = clamp(0, len(self.tasks))
        log.info(f"Loaded {len(self.tasks)} task(s) from {store!r}")

    # ------------------------------------------------------------------ #
    #  Store access                                                        #
    # ------------------------------------------------------------------ #

    # Read-modify-write through the store, then adopt the written list as the one on screen.
    def _mutate(self, mutator):
        def apply(tasks):
            return tasks, mutator(tasks)
        tasks, result = self.store.update(apply)
        self.tasks = tasks
        self.selected = clamp(self.selected, len(tasks))
        return result

    # ------------------------------------------------------------------ #
    #  Dispatch                                                            #
    # ------------------------------------------------------------------ #

    # Handles one message off the event queue.
    def dispatch(self, message):
        if isinstance(message, InputEvent):
            self.handle_key(message.key)
        elif isinstance(message, Tick):
            pass
        elif isinstance(message, InputFailed):
            raise message.error
        else:
            log.warning(f"Ignoring unknown message {message!r}")

    # Store and selection errors end up on the status line. ClockSkewError is left to propagate: a clock that
    # went backwards is fatal, and the store is left unwritten.
    def handle_key(self, key):
        if key == "ctrl-c":
            self.quit()
            return
        try:
            if isinstance(self.state, Projects):
                self._on_projects_key(key)
            elif isinstance(self.state, CreateProject):
                self._on_create_key(key)
            elif isinstance(self.state, DeleteProject):
                self._on_delete_key(key)
            elif isinstance(self.state, Help):
                self._on_help_key(key)
        except StoreError as e:
            log.error(f"Store operation failed in state {self.state!r}: {e}", exc_info=True)
            self.status = f"Error: {e}"
        except IndexOutOfRange as e:
            log.warning(f"Selection out of range in state {self.state!r}: {e}")
            self.status = f"Error: {e}"

    def _apply(self, event):
        self.state = transition(self.state, event)

    def _on_projects_key(self, key):
        if key == "q":
            self.quit()
        elif key in ("down", "j"):
            self.selected = move_down(self.selected, len(self.tasks))
        elif key in ("up", "k"):
            self.selected = move_up(self.selected, len(self.tasks))
        elif key in (" ", "enter"):
            self.toggle_selected()
        elif key == "a":
            self.status = None
            self._apply(Transition.CREATE_NEW)
        elif key == "d":
            if self.selected is not None:
                self.status = None
                self._apply(Transition.DELETE)
        elif key == "r":
            self.generate_report()
        elif key == "?":
            self._apply(Transition.SHOW_HELP)
        elif key == "escape":
            self.status = None
            self._apply(Transition.ESCAPE)

    def _on_create_key(self, key):
        if key == "enter":
            self.submit_project()
        elif key == "backspace":
            self._apply(Transition.BACKSPACE)
        elif key == "escape":
            self.status = None
            self._apply(Transition.ESCAPE)
        elif len(key) == 1:
            self._apply(InputCharacter(key))

    def _on_delete_key(self, key):
        if key == "y":
            try:
                self.delete_selected()
            finally:
                self._apply(Transition.ESCAPE)
        elif key in ("n", "q", "escape"):
            self._apply(Transition.ESCAPE)

    def _on_help_key(self, key):
        if key in ("escape", "?", "q"):
            self._apply(Transition.ESCAPE)

    # ------------------------------------------------------------------ #
    #  Actions                                                             #
    # ------------------------------------------------------------------ #

    def toggle_selected(self):
        if self.selected is None:
            return
        index = self.selected
        self._mutate(lambda tasks: toggle(tasks, index, self.clock()))
        task = running_task(self.tasks)
        log.info(f"Now running: '{task.project}'" if task else "No timer running")

    def submit_project(self):
        name = self.state.input
        try:
            task = self._mutate(lambda tasks: add_task(tasks, name, self.clock()))
        except EmptyInputRejected as e:
            self.status = str(e)
            return
        log.info(f"Created task {task.id} '{task.project}'")
        self.status = f"Added '{task.project}'"
        self.selected = len(self.tasks) - 1
        self._apply(Transition.ESCAPE)

    def delete_selected(self):
        index = self.selected
        removed = self._mutate(lambda tasks: remove_task(tasks, index))
        log.info(f"Deleted task {removed.id} '{removed.project}'")
        self.status = f"Deleted '{removed.project}'"

    def generate_report(self):
        tasks = self.store.load()
        path = write_report(tasks, self.report_path, self.clock())
        self.status = f"Report written to {path}"

    def quit(self):
        log.info("Quit requested")
        self.running = False

    # ------------------------------------------------------------------ #
    #  Main loop                                                           #
    # ------------------------------------------------------------------ #

    # Renders, then blocks for exactly one message and handles it, until quit. The alternate screen and raw
    # mode are both context managers, so the terminal is restored however the loop ends.
    def run(self, console=None, terminal_input=None):
        console = console or Console()
        terminal_input = terminal_input if terminal_input is not None else create_input()
        events = queue.Queue()
        poller = InputPoller(events, self.tick_rate, terminal_input)

        with console.screen(hide_cursor=True) as screen, terminal_input.raw_mode():
            poller.start()
            try:
                while self.running:
                    screen.update(render(self.state, self.tasks, self.selected, self.clock(), self.status))
                    self.dispatch(events.get())
            finally:
                poller.stop()
                poller.join(timeout=self.tick_rate * 5)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main():
    if not sys.stdin.isatty():
        raise SystemExit("termtracker needs an interactive terminal.")
    settings = config.load_settings()
    store = JsonTaskStore(config.resolve_path(settings["store_file"]))
    report_path = config.resolve_path(settings["report_file"])
    app = TrackerApp(store, report_path, tick_rate=settings["tick_rate_ms"] / 1000)
    app.run()
    log.info("Exited normally")
