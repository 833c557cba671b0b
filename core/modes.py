"""
Input modes.

Exactly one mode is active at a time. Each mode is its own dataclass and
carries its own entry buffers, so switching modes (replacing the value)
discards whatever the previous mode had pending.
"""
from dataclasses import dataclass


class Mode:
    """Base class for all input modes."""

    label = ""

    def accepts_text(self) -> bool:
        """Whether character events go into an entry buffer."""
        return False


@dataclass
class Browsing(Mode):
    """Default mode: navigate, check off, delete and run todos."""

    label = "BROWSE"


@dataclass
class AddingNote(Mode):
    """Typing the title of a new sticky note."""

    title: str = ""
    label = "NEW STICKY NOTE"

    def accepts_text(self) -> bool:
        return True

    def push(self, c: str):
        self.title += c

    def pop(self):
        self.title = self.title[:-1]


# Field indexes for the two-field todo buffer
TASK_FIELD = 0
CMD_FIELD = 1


@dataclass
class TodoEntry(Mode):
    """
    Two-field buffer shared by AddingTodo and EditingTodo.

    Attributes:
        task: Pending task text
        cmd: Pending command text
        field: Which buffer receives input (TASK_FIELD or CMD_FIELD)
    """

    task: str = ""
    cmd: str = ""
    field: int = TASK_FIELD

    def accepts_text(self) -> bool:
        return True

    def toggle_field(self):
        self.field = CMD_FIELD if self.field == TASK_FIELD else TASK_FIELD

    def push(self, c: str):
        if self.field == TASK_FIELD:
            self.task += c
        else:
            self.cmd += c

    def pop(self):
        if self.field == TASK_FIELD:
            self.task = self.task[:-1]
        else:
            self.cmd = self.cmd[:-1]


@dataclass
class AddingTodo(TodoEntry):
    """Typing a new todo for the active sticky note."""

    label = "NEW TODO"


@dataclass
class EditingTodo(TodoEntry):
    """
    Rewriting an existing todo.

    Attributes:
        index: Position of the todo being edited, captured on entry
    """

    index: int = 0
    label = "EDIT TODO"


@dataclass
class AddingFreeNote(Mode):
    """Typing straight into the active sticky note's memo (no commit step)."""

    label = "EDIT NOTE"
