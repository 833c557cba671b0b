"""
Keyboard key values consumed by the App.

Terminal input arrives as curses codes (str for characters, int for
special keys); from_curses() turns them into Key values so the core never
sees curses.
"""
import curses
from dataclasses import dataclass
from typing import Optional, Union

CHAR = "char"
CTRL = "ctrl"
UP = "up"
DOWN = "down"
LEFT = "left"
RIGHT = "right"
BACKSPACE = "backspace"
DELETE = "delete"
ESC = "esc"


@dataclass(frozen=True)
class Key:
    """
    One key press.

    Attributes:
        kind: One of CHAR, CTRL, UP, DOWN, LEFT, RIGHT, BACKSPACE, DELETE, ESC
        char: The character for CHAR and CTRL keys (Enter is CHAR "\\n")
    """
    kind: str
    char: Optional[str] = None

    @classmethod
    def of(cls, c: str) -> "Key":
        return cls(CHAR, c)

    @classmethod
    def ctrl(cls, c: str) -> "Key":
        return cls(CTRL, c.lower())

    def __str__(self) -> str:
        if self.kind == CHAR:
            return "Enter" if self.char == "\n" else repr(self.char)
        if self.kind == CTRL:
            return f"Ctrl+{self.char}"
        return self.kind.capitalize()


KEY_UP = Key(UP)
KEY_DOWN = Key(DOWN)
KEY_LEFT = Key(LEFT)
KEY_RIGHT = Key(RIGHT)
KEY_BACKSPACE = Key(BACKSPACE)
KEY_DELETE = Key(DELETE)
KEY_ESC = Key(ESC)
KEY_ENTER = Key(CHAR, "\n")

# curses special key codes
_SPECIAL_KEYS = {
    curses.KEY_UP: KEY_UP,
    curses.KEY_DOWN: KEY_DOWN,
    curses.KEY_LEFT: KEY_LEFT,
    curses.KEY_RIGHT: KEY_RIGHT,
    curses.KEY_BACKSPACE: KEY_BACKSPACE,
    curses.KEY_DC: KEY_DELETE,
    curses.KEY_ENTER: KEY_ENTER,
}

# Control characters with a meaning of their own
_CONTROL_CHARS = {
    "\n": KEY_ENTER,
    "\r": KEY_ENTER,
    "\t": Key(CHAR, "\t"),
    "\x1b": KEY_ESC,
    "\x7f": KEY_BACKSPACE,
}


def from_curses(code: Union[str, int]) -> Optional[Key]:
    """
    Translate a get_wch() result.

    Ctrl+letter arrives as the control character 1-26 (ctrl-h is 0x08,
    Backspace is 0x7f).

    Args:
        code: Character string or curses key code

    Returns:
        Key, or None for keys the app does not use (resize, F-keys, ...)
    """
    if isinstance(code, int):
        return _SPECIAL_KEYS.get(code)

    if not code:
        return None

    if code in _CONTROL_CHARS:
        return _CONTROL_CHARS[code]

    value = ord(code)
    if 1 <= value <= 26:
        return Key.ctrl(chr(value + ord("a") - 1))
    if value < 32:
        return None
    return Key.of(code)
