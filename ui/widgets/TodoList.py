"""
TodoList widget.

Draws one note's todos inside a box: the selected row gets the highlight
style and symbol, completed todos are drawn dimmed with a done marker.
The list scrolls so the selected row stays visible.
"""
import curses
from typing import List, Tuple

from core.models import Note, Todo

DONE_MARK = "[x]"
OPEN_MARK = "[ ]"
CMD_MARK = " $"


def scroll_offset(selected: int, height: int) -> int:
    """First visible row so that ``selected`` is on screen."""
    if height <= 0:
        return 0
    if selected >= height:
        return selected - height + 1
    return 0


def format_todo(todo: Todo, symbol: str, is_selected: bool) -> str:
    """Row text: selection symbol, done marker, task, command marker."""
    prefix = symbol if is_selected else " " * len(symbol)
    mark = DONE_MARK if todo.completed else OPEN_MARK
    suffix = CMD_MARK if todo.has_command() else ""
    return f"{prefix} {mark} {todo.task}{suffix}"


def visible_rows(note: Note, height: int, symbol: str) -> List[Tuple[str, Todo, bool]]:
    """
    Rows to draw for a box of ``height`` lines.

    Returns:
        List of (text, todo, is_selected)
    """
    selected = note.todos.selected
    offset = scroll_offset(selected, height)
    rows = []
    for i, todo in enumerate(note.todos.items[offset:offset + height], start=offset):
        is_selected = i == selected
        rows.append((format_todo(todo, symbol, is_selected), todo, is_selected))
    return rows


class TodoList:
    """Boxed, scrolling todo list for one note."""

    def __init__(self, theme, highlight_symbol: str = ">"):
        """
        Args:
            theme: ui.theme.Theme used for row styles
            highlight_symbol: Drawn in front of the selected row
        """
        self.theme = theme
        self.highlight_symbol = highlight_symbol

    def draw(self, win, note: Note, y: int, x: int, height: int, width: int,
             focused: bool = True):
        """
        Draw the list with its border at (y, x).

        Args:
            win: Curses window
            note: Note whose todos are drawn
            focused: Highlight the selected row (False while typing elsewhere)
        """
        if height < 3 or width < 4:
            return

        box = win.derwin(height, width, y, x)
        box.attrset(self.theme.attr("normal"))
        box.box()
        put_text(box, 0, 2, f" {note.title} ", width - 4, self.theme.attr("titles"))

        inner_height = height - 2
        inner_width = width - 2
        if note.todos.is_empty():
            put_text(box, 1, 1, "(no todos)", inner_width, self.theme.attr("normal") | curses.A_DIM)
            return

        for row, (text, todo, is_selected) in enumerate(
                visible_rows(note, inner_height, self.highlight_symbol)):
            if is_selected and focused:
                attr = self.theme.attr("highlight")
            else:
                attr = self.theme.attr("normal")
            if todo.completed:
                attr |= curses.A_DIM
            put_text(box, row + 1, 1, text, inner_width, attr)


def put_text(win, y: int, x: int, text: str, width: int, attr: int):
    """addnstr that ignores writes past the window edge."""
    if width <= 0:
        return
    try:
        win.addnstr(y, x, text, width, attr)
    except curses.error:
        pass
