"""Background input polling.

``InputPoller`` is the only producer on the event queue: it attaches to the
terminal input, turns whatever keys arrive into ``InputEvent`` messages, and
puts a ``Tick`` on the queue every tick interval so the running timer keeps
redrawing. The main loop is the only consumer.
"""

import asyncio
import threading
from dataclasses import dataclass
from typing import Optional
from prompt_toolkit.input import create_input
from prompt_toolkit.key_binding import KeyPress
from prompt_toolkit.keys import Keys
from tt.common.logger import log

# How long a lone ESC waits for the rest of an escape sequence before it counts as the Escape key.
ESCAPE_TIMEOUT = 0.05


@dataclass(frozen=True)
class InputEvent:
    """A classified key: "up", "down", "enter", "escape", "backspace", "ctrl-c", or one printable character."""

    key: str


@dataclass(frozen=True)
class Tick:
    pass


@dataclass(frozen=True)
class InputFailed:
    """The poller died. Carries the exception so the main loop can re-raise it."""

    error: BaseException


_NAMED_KEYS = {
    Keys.Up: "up",
    Keys.Down: "down",
    Keys.Escape: "escape",
    Keys.ControlM: "enter",
    Keys.ControlJ: "enter",
    Keys.ControlH: "backspace",
    Keys.ControlC: "ctrl-c",
}


def classify(key_press: KeyPress) -> Optional[str]:
    """Name a key press the way the app dispatches on it, or None if the app has no use for it."""
    key = key_press.key
    if isinstance(key, Keys):
        return _NAMED_KEYS.get(key)
    if isinstance(key, str) and len(key) == 1 and key.isprintable():
        return key
    return None


class InputPoller(threading.Thread):
    """Runs its own asyncio loop with the terminal input attached, so key presses arrive through the same
    reader callback prompt_toolkit uses on both POSIX terminals and Windows consoles."""

    def __init__(self, events, tick_rate=0.2, terminal_input=None):
        super().__init__(name="tt-input", daemon=True)
        self.events = events
        self.tick_rate = tick_rate
        self.input = terminal_input if terminal_input is not None else create_input()
        self._stop_requested = threading.Event()
        self._loop = None
        self._failure = None
        self._flush_handle = None

    def stop(self):
        self._stop_requested.set()

    def run(self):
        log.debug(f"Input poller started with a tick rate of {self.tick_rate}s")
        try:
            asyncio.run(self._pump())
        except Exception as e:
            log.exception("Input poller crashed")
            self.events.put(InputFailed(e))
        log.debug("Input poller stopped")

    # Keys come in through the attached callback; this coroutine only paces the ticks and watches for a
    # failure raised inside a callback, which asyncio would otherwise just log.
    async def _pump(self):
        self._loop = asyncio.get_running_loop()
        self._failure = self._loop.create_future()
        with self.input.attach(self.input_ready):
            while not self._stop_requested.is_set():
                await asyncio.wait({self._failure}, timeout=self.tick_rate)
                if self._failure.done():
                    self._failure.result()
                self.events.put(Tick())

    # Reader callback: queue whatever complete keys are available, and (re)arm the escape flush.
    def input_ready(self):
        try:
            self._emit(self.input.read_keys())
        except Exception as e:
            self._fail(e)
            return
        if self._flush_handle is not None:
            self._flush_handle.cancel()
        self._flush_handle = self._loop.call_later(ESCAPE_TIMEOUT, self.flush)

    # Nothing more arrived within ESCAPE_TIMEOUT, so a pending ESC really was the Escape key.
    def flush(self):
        self._flush_handle = None
        try:
            self._emit(self.input.flush_keys())
        except Exception as e:
            self._fail(e)

    def _emit(self, presses):
        for key in map(classify, presses):
            if key is not None:
                self.events.put(InputEvent(key))

    def _fail(self, error):
        if not self._failure.done():
            self._failure.set_exception(error)
