"""Tasks and their closed time frames: pure data plus duration accounting, no I/O."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Optional
from tt.common.errors import ClockSkewError, StoreParseError
from tt.util import now_utc, format_instant, parse_instant


@dataclass
class TimeFrame:
    """One closed interval during which a task's timer was running."""

    id: int
    start_time: datetime
    end_time: datetime

    def duration(self) -> timedelta:
        return self.end_time - self.start_time

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "start_time": format_instant(self.start_time),
            "end_time": format_instant(self.end_time),
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "TimeFrame":
        frame = cls(
            id=_require_int(raw, "id"),
            start_time=parse_instant(raw["start_time"]),
            end_time=parse_instant(raw["end_time"]),
        )
        if frame.end_time < frame.start_time:
            raise ValueError(f"Time frame {frame.id} ends before it starts")
        return frame


@dataclass
class Task:
    """A tracked project.

    ``running_since`` is set only while the timer runs; when it stops the open
    interval is closed into a new TimeFrame appended to ``times``.
    """

    id: int
    project: str
    created_at: datetime
    running_since: Optional[datetime] = None
    times: list[TimeFrame] = field(default_factory=list)

    def is_running(self) -> bool:
        return self.running_since is not None

    def current_duration(self, now: Optional[datetime] = None) -> timedelta:
        """Time elapsed in the open interval, zero when stopped.

        Raises ClockSkewError if the timer appears to have started after ``now``.
        """
        if self.running_since is None:
            return timedelta(0)
        now = now or now_utc()
        if self.running_since > now:
            raise ClockSkewError(self.running_since, now)
        return now - self.running_since

    def total_duration(self, now: Optional[datetime] = None) -> timedelta:
        """Closed frames plus the open interval, counted in whole seconds each."""
        past = sum(_whole_seconds(frame.duration()) for frame in self.times)
        return timedelta(seconds=past + _whole_seconds(self.current_duration(now)))

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "project": self.project,
            "created_at": format_instant(self.created_at),
            "running_since": format_instant(self.running_since) if self.running_since else None,
            "times": [frame.to_dict() for frame in self.times],
        }

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "Task":
        project = raw["project"]
        if not isinstance(project, str):
            raise TypeError("project must be a string")
        times = raw.get("times", [])
        if not isinstance(times, list):
            raise TypeError("times must be a list")
        running_since = raw.get("running_since")
        return cls(
            id=_require_int(raw, "id"),
            project=project,
            created_at=parse_instant(raw["created_at"]),
            running_since=parse_instant(running_since) if running_since is not None else None,
            times=[TimeFrame.from_dict(frame) for frame in times],
        )


# timedelta.total_seconds() is a float; truncate toward zero the way the durations are displayed.
def _whole_seconds(delta: timedelta) -> int:
    return int(delta.total_seconds())


def _require_int(raw, key):
    value = raw[key]
    # bool is an int subclass, and True is not an id
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{key} must be an integer")
    return value


def tasks_to_records(tasks: list[Task]) -> list[dict[str, Any]]:
    return [task.to_dict() for task in tasks]


def tasks_from_records(records: Any, source="<memory>") -> list[Task]:
    """Build the task list from decoded JSON, raising StoreParseError on anything malformed."""
    if not isinstance(records, list):
        raise StoreParseError(source, f"Expected a list of tasks, got {type(records).__name__}")
    tasks = []
    for position, raw in enumerate(records):
        if not isinstance(raw, dict):
            raise StoreParseError(source, f"Task #{position} is not an object")
        try:
            tasks.append(Task.from_dict(raw))
        except (KeyError, TypeError, ValueError) as e:
            raise StoreParseError(source, f"Task #{position} is malformed: {e!r}") from e
    return tasks


# Ids are handed out past the highest live id, so deleting a task never lets a later task take over the
# id of a surviving one.
def next_task_id(tasks: list[Task]) -> int:
    return max((task.id for task in tasks), default=-1) + 1
