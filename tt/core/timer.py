from tt.common.errors import ClockSkewError, IndexOutOfRange
from tt.common.logger import log
from tt.core.models import TimeFrame
from tt.util import now_utc

# Timer control over the whole task list. Only one task may be running at a time, and every function
# here keeps it that way no matter what state the list was loaded in.


# Returns the first running task, or None if nothing is running.
def running_task(tasks):
    return next((task for task in tasks if task.is_running()), None)


# Closes every running timer into a new TimeFrame. Scans the whole list rather than assuming exactly one
# task is running, and returns the frames it created. A timer that started after `now` raises
# ClockSkewError before any task is touched.
def stop_all(tasks, now=None):
    now = now or now_utc()
    for task in tasks:
        if task.running_since is not None and task.running_since > now:
            raise ClockSkewError(task.running_since, now)

    closed = []
    for task in tasks:
        if task.running_since is None:
            continue
        frame = TimeFrame(id=len(task.times), start_time=task.running_since, end_time=now)
        task.times.append(frame)
        task.running_since = None
        closed.append(frame)
        log.debug(f"Stopped timer on task {task.id} '{task.project}', closed frame {frame.id} of {frame.duration()}")
    return closed


# Starts or stops the timer on the task at `index`.
#   - Not running: whatever else is running gets stopped, then this task starts.
#   - Running: it gets stopped, and nothing starts.
# The same `now` closes old frames and opens the new one. Raises IndexOutOfRange before touching anything
# if `index` doesn't address a task (negative indexes included), or ClockSkewError if a running timer
# started after `now`.
def toggle(tasks, index, now=None):
    if not isinstance(index, int) or index < 0 or index >= len(tasks):
        raise IndexOutOfRange(index, len(tasks))
    now = now or now_utc()

    target = tasks[index]
    was_running = target.is_running()
    closed = stop_all(tasks, now)

    if not was_running:
        target.running_since = now
        log.debug(f"Started timer on task {target.id} '{target.project}'")
    return closed
