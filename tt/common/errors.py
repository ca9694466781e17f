"""Exception types raised by termtracker.

Everything derives from ``TrackerError`` so the UI layer can catch the whole
family in one place and put the message in the status line.
"""


class TrackerError(Exception):
    """Base class for all termtracker errors."""


class StoreError(TrackerError):
    """The task store could not be used."""

    def __init__(self, path, message):
        self.path = path
        super().__init__(f"{message} ({path})")


class StoreReadError(StoreError):
    """Reading the store failed for a reason other than the file not existing."""


class StoreParseError(StoreError):
    """The store exists but does not hold a valid task list."""


class StoreWriteError(StoreError):
    """Writing the store (or a report) failed. The previous file is left untouched."""


class IndexOutOfRange(TrackerError, IndexError):
    """A selection pointed at a task that does not exist."""

    def __init__(self, index, size):
        self.index = index
        self.size = size
        super().__init__(f"Task index {index} out of range for {size} task(s)")


class EmptyInputRejected(TrackerError, ValueError):
    """A project name was empty or whitespace only."""


class ClockSkewError(TrackerError):
    """A running timer claims to have started in the future."""

    def __init__(self, running_since, now):
        self.running_since = running_since
        self.now = now
        super().__init__(f"Timer started at {running_since.isoformat()} which is after now ({now.isoformat()})")
