"""Interaction states and the pure transition function between them.

The UI is always in exactly one of four states. ``transition`` maps a
(state, event) pair to the next state and does nothing else, so it can be
driven and tested without a terminal. Side effects (timer toggles, store
writes, reports) live in ``tt.ui.app``.
"""

import enum
from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class Projects:
    """Browsing the project list. The initial state."""


@dataclass(frozen=True)
class Help:
    """Help overlay."""


@dataclass(frozen=True)
class CreateProject:
    """Typing the name of a new project."""

    input: str = ""


@dataclass(frozen=True)
class DeleteProject:
    """Waiting for y/n on deleting the selected project."""


State = Union[Projects, Help, CreateProject, DeleteProject]


class Transition(enum.Enum):
    CREATE_NEW = "create_new"
    DELETE = "delete"
    SHOW_HELP = "show_help"
    ESCAPE = "escape"
    BACKSPACE = "backspace"


@dataclass(frozen=True)
class InputCharacter:
    char: str


Event = Union[Transition, InputCharacter]


def transition(state: State, event: Event) -> State:
    """Return the state that follows ``state`` on ``event``.

    Pairs without a rule leave the state as it is.
    """
    if isinstance(state, Projects):
        if event is Transition.CREATE_NEW:
            return CreateProject("")
        if event is Transition.DELETE:
            return DeleteProject()
        if event is Transition.SHOW_HELP:
            return Help()
    elif isinstance(state, Help):
        if event is Transition.ESCAPE:
            return Projects()
    elif isinstance(state, CreateProject):
        if isinstance(event, InputCharacter):
            return CreateProject(state.input + event.char)
        if event is Transition.BACKSPACE:
            return CreateProject(state.input[:-1])
        if event is Transition.ESCAPE:
            return Projects()
    elif isinstance(state, DeleteProject):
        if event is Transition.ESCAPE:
            return Projects()
    return state


# -------------------- selection --------------------

# Selection is an index into the task list, or None when the list is empty. Moving wraps around at both
# ends, and an empty list never changes the selection.

def move_down(selected: Optional[int], count: int) -> Optional[int]:
    if count <= 0:
        return selected
    if selected is None or selected >= count - 1:
        return 0
    return selected + 1


def move_up(selected: Optional[int], count: int) -> Optional[int]:
    if count <= 0:
        return selected
    if selected is None or selected <= 0 or selected > count - 1:
        return count - 1
    return selected - 1


# Brings a selection back in range after the list changed size: None for an empty list, otherwise the
# closest valid index.
def clamp(selected: Optional[int], count: int) -> Optional[int]:
    if count <= 0:
        return None
    if selected is None or selected < 0:
        return 0
    return min(selected, count - 1)
