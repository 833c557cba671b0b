"""
Data models for Forget It.

- Todo: immutable task record (edits produce a new Todo)
- Note: a sticky note holding a free-text memo and a todo list
- AppState: session flags (dirty, quit, status message)

Snapshot format (JSON):
    {"items": [{"title", "note", "list": {"items": [Todo...], "selected"}}],
     "selected"}
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from core.constants import STATUS_TTL_MS, TIMESTAMP_TIMESPEC
from core.selection import SelectionList


def now() -> datetime:
    """Current local time, timezone-aware."""
    return datetime.now().astimezone()


def format_timestamp(value: datetime) -> str:
    """Format a datetime as local-time ISO-8601 text with whole seconds."""
    if value.tzinfo is None:
        value = value.astimezone()
    return value.isoformat(timespec=TIMESTAMP_TIMESPEC)


def parse_timestamp(text: str) -> datetime:
    """
    Parse snapshot timestamp text.

    Naive timestamps (no offset) are read as local time.

    Raises:
        ValueError: If text is not an ISO-8601 timestamp
    """
    if not isinstance(text, str):
        raise ValueError(f"Timestamp must be a string, got {text!r}")
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.astimezone()
    return parsed


def _field(data: Dict[str, Any], key: str, kind: type, default: Any = None) -> Any:
    """
    Read a typed field from a snapshot object.

    Args:
        data: Decoded JSON object
        key: Field name
        kind: Required Python type (bool is not accepted for int and vice versa)
        default: Value when the key is absent (None = the key is required)

    Raises:
        ValueError: If data is not an object, the key is required and
            missing, or the value has the wrong type
    """
    if not isinstance(data, dict):
        raise ValueError(f"Expected an object, got {type(data).__name__}")
    if key not in data:
        if default is None:
            raise ValueError(f"Missing field {key!r}")
        return default
    value = data[key]
    if not isinstance(value, kind) or (kind is not bool and isinstance(value, bool)):
        raise ValueError(f"Field {key!r} must be {kind.__name__}, got {value!r}")
    return value


@dataclass(frozen=True)
class Todo:
    """
    Single todo entry.

    Attributes:
        task: Task text shown in the list
        cmd: Command line run when the todo is activated ("" = none)
        completed: Whether the todo is checked off
        date: Creation time (local, timezone-aware)
    """
    task: str
    cmd: str = ""
    completed: bool = False
    date: datetime = field(default_factory=now)

    def has_command(self) -> bool:
        return bool(self.cmd.strip())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "date": format_timestamp(self.date),
            "task": self.task,
            "cmd": self.cmd,
            "completed": self.completed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Todo":
        """
        Create Todo from dictionary.

        Raises:
            ValueError: If a field is missing or has the wrong type
        """
        return cls(
            task=_field(data, "task", str),
            cmd=_field(data, "cmd", str, ""),
            completed=_field(data, "completed", bool, False),
            date=parse_timestamp(_field(data, "date", str)),
        )


@dataclass
class Note:
    """
    Sticky note: a titled memo plus an ordered todo list.

    Attributes:
        title: Tab title
        note: Free-text memo
        todos: Todo list with its own cursor
    """
    title: str
    note: str = ""
    todos: SelectionList = field(default_factory=SelectionList)

    def task_lines(self):
        """Iterate task texts in list order."""
        return (todo.task for todo in self.todos)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "title": self.title,
            "note": self.note,
            "list": self.todos.to_dict(Todo.to_dict),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Note":
        """
        Create Note from dictionary.

        Raises:
            ValueError: If a field is missing or has the wrong type
        """
        return cls(
            title=_field(data, "title", str),
            note=_field(data, "note", str, ""),
            todos=SelectionList.from_dict(_field(data, "list", dict, {}), Todo.from_dict),
        )


def collection_to_dict(notes: SelectionList) -> Dict[str, Any]:
    """Serialize the whole note collection."""
    return notes.to_dict(Note.to_dict)


def collection_from_dict(data: Dict[str, Any]) -> SelectionList:
    """
    Deserialize the whole note collection.

    Raises:
        ValueError: If data does not have the snapshot shape
    """
    if not isinstance(data, dict):
        raise ValueError(f"Snapshot root must be an object, got {type(data).__name__}")
    try:
        return SelectionList.from_dict(data, Note.from_dict)
    except (KeyError, TypeError, AttributeError) as e:
        raise ValueError(f"Malformed snapshot: {e!r}") from e


class AppState:
    """
    Session state that is not part of the saved collection.

    Manages:
    - Dirty flag (unsaved changes)
    - Quit flag
    - Transient status message shown in the mode line
    """

    def __init__(self):
        """Initialize clean state."""
        self._is_dirty: bool = False
        self._should_quit: bool = False
        self._status: Optional[str] = None
        self._status_is_error: bool = False
        self._status_age_ms: int = 0

    def is_dirty(self) -> bool:
        """Check if collection has unsaved changes."""
        return self._is_dirty

    def mark_dirty(self):
        """Mark collection as having unsaved changes."""
        self._is_dirty = True

    def mark_clean(self):
        """Mark collection as saved."""
        self._is_dirty = False

    def should_quit(self) -> bool:
        return self._should_quit

    def request_quit(self):
        self._should_quit = True

    def get_status(self) -> Optional[str]:
        """Get current status message (None if expired)."""
        return self._status

    def status_is_error(self) -> bool:
        return self._status_is_error

    def set_status(self, message: str, error: bool = False):
        """Show a status message; it expires after STATUS_TTL_MS."""
        self._status = message
        self._status_is_error = error
        self._status_age_ms = 0

    def age_status(self, elapsed_ms: int):
        """Advance the status message clock, clearing it once expired."""
        if self._status is None:
            return
        self._status_age_ms += elapsed_ms
        if self._status_age_ms >= STATUS_TTL_MS:
            self._status = None
            self._status_is_error = False
            self._status_age_ms = 0
