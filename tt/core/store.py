"""Persistence for the task list.

The whole list is the unit of storage: every change is a full
load -> mutate -> save cycle through ``TaskStore.update``. ``JsonTaskStore``
keeps it in a single JSON file; ``MemoryTaskStore`` keeps it in memory and
is what the tests run against.
"""

import copy
import json
import os
import tempfile
from pathlib import Path
from typing import Callable, Protocol, TypeVar
from tt.common.errors import StoreParseError, StoreReadError, StoreWriteError
from tt.common.logger import log
from tt.core.models import Task, tasks_from_records, tasks_to_records

T = TypeVar("T")


class TaskStore(Protocol):
    def load(self) -> list[Task]: ...

    def save(self, tasks: list[Task]) -> None: ...

    def update(self, mutator: Callable[[list[Task]], T]) -> T: ...


# Writes `text` to `path` all-or-nothing: a temp file in the same directory is written and flushed, then
# swapped in with os.replace. If anything fails the old file (if any) is left exactly as it was.
def atomic_write_text(path: Path, text: str):
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    except OSError as e:
        raise StoreWriteError(path, f"Could not prepare write: {e}") from e
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except OSError as e:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise StoreWriteError(path, f"Could not write file: {e}") from e


class JsonTaskStore:
    """Task list stored as a JSON array in a single file."""

    def __init__(self, path):
        self.path = Path(path)

    def __repr__(self):
        return f"JsonTaskStore({str(self.path)!r})"

    # A missing file and an empty (or whitespace only) file both mean "no tasks yet". Anything else that
    # goes wrong is raised, never papered over with an empty list.
    def load(self):
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                content = f.read()
        except FileNotFoundError:
            log.debug(f"No store at '{self.path}' yet, starting with an empty task list.")
            return []
        except (OSError, UnicodeDecodeError) as e:
            raise StoreReadError(self.path, f"Could not read task store: {e}") from e

        if not content.strip():
            return []
        try:
            records = json.loads(content)
        except json.JSONDecodeError as e:
            raise StoreParseError(self.path, f"Task store is not valid JSON: {e}") from e
        return tasks_from_records(records, source=self.path)

    def save(self, tasks):
        atomic_write_text(self.path, json.dumps(tasks_to_records(tasks), indent=2))
        log.debug(f"Saved {len(tasks)} task(s) to '{self.path}'")

    # Read-modify-write of the whole collection. `mutator` edits the list in place; its return value is
    # handed back to the caller. If the mutator raises, nothing is written.
    def update(self, mutator):
        tasks = self.load()
        result = mutator(tasks)
        self.save(tasks)
        return result


class MemoryTaskStore:
    """In-memory stand-in for JsonTaskStore. Hands out copies so callers can't mutate it behind its back."""

    def __init__(self, tasks=None):
        self._tasks = copy.deepcopy(list(tasks or []))
        self.saves = 0

    def load(self):
        return copy.deepcopy(self._tasks)

    def save(self, tasks):
        self._tasks = copy.deepcopy(list(tasks))
        self.saves += 1

    def update(self, mutator):
        tasks = self.load()
        result = mutator(tasks)
        self.save(tasks)
        return result
