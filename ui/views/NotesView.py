"""
Main screen for Forget It.

Layout:
- Top: tab bar (one tab per sticky note) inside a titled box
- Middle: todo list of the active note (left) and its memo (right)
- Bottom: entry line for the active mode, then a status/help line
"""
import curses
import textwrap
from typing import List

from core.app import App
from core.modes import (AddingFreeNote, AddingNote, Browsing, CMD_FIELD,
                        TASK_FIELD, TodoEntry)
from ui.theme import Theme
from ui.widgets.TodoList import TodoList, put_text

TAB_BAR_HEIGHT = 3
FOOTER_HEIGHT = 3
TAB_SEPARATOR = " | "
MIN_HEIGHT = TAB_BAR_HEIGHT + FOOTER_HEIGHT + 3
MIN_WIDTH = 20


def wrap_memo(text: str, width: int) -> List[str]:
    """Wrap memo text to width, keeping explicit line breaks."""
    if width <= 0:
        return []
    lines: List[str] = []
    for paragraph in text.split("\n"):
        lines.extend(textwrap.wrap(paragraph, width) or [""])
    return lines


def help_line(app: App) -> str:
    """One-line key summary for the current mode."""
    keys = app.config.bindings
    browse = {action: str(key) for action, key in app.config.browse_keys.items()}
    if isinstance(app.mode, Browsing):
        return (f"^{keys['new_todo']} todo  ^{keys['edit_todo']} edit  "
                f"^{keys['new_sticky_note']} sticky  ^{keys['new_note']} memo  "
                f"^{keys['remove_sticky_note']} drop sticky  ^{keys['save']} save  "
                f"^{keys['exit']}/Esc quit  {browse['mark_done']} done  "
                f"{browse['remove_todo']} delete  Enter run")
    if isinstance(app.mode, AddingFreeNote):
        return f"typing into memo, ^{keys['new_note']} to finish"
    if isinstance(app.mode, TodoEntry):
        return "Up/Down switch field, Enter commit"
    return "Enter commit"


class NotesView:
    """Draws an App onto a curses screen."""

    def __init__(self, theme: Theme, highlight_symbol: str = ">"):
        self.theme = theme
        self.todo_list = TodoList(theme, highlight_symbol)

    def draw(self, stdscr, app: App):
        """Redraw the whole screen."""
        stdscr.erase()
        height, width = stdscr.getmaxyx()

        if height < MIN_HEIGHT or width < MIN_WIDTH:
            put_text(stdscr, 0, 0, "Terminal too small", width, self.theme.attr("normal"))
            stdscr.refresh()
            return

        self._draw_tabs(stdscr, app, width)

        body_top = TAB_BAR_HEIGHT
        body_height = height - TAB_BAR_HEIGHT - FOOTER_HEIGHT
        note = app.active_note()
        if note is None:
            hint = f"No sticky notes. Press ^{app.config.key_for('new_sticky_note')} to add one."
            put_text(stdscr, body_top + 1, 2, hint, width - 4, self.theme.attr("normal"))
        else:
            list_width = width // 2
            self.todo_list.draw(stdscr, note, body_top, 0, body_height, list_width,
                                focused=app.is_browsing())
            self._draw_memo(stdscr, app, note.note, body_top, list_width,
                            body_height, width - list_width)

        self._draw_footer(stdscr, app, height - FOOTER_HEIGHT, width)
        stdscr.refresh()

    def _draw_tabs(self, stdscr, app: App, width: int):
        box = stdscr.derwin(TAB_BAR_HEIGHT, width, 0, 0)
        box.attrset(self.theme.attr("normal"))
        box.box()
        title = app.title + (" *" if app.state.is_dirty() else "")
        put_text(box, 0, 2, f" {title} ", width - 4, self.theme.attr("titles"))

        x = 2
        for i, tab_title in enumerate(app.tabs.titles):
            if i > 0:
                put_text(box, 1, x, TAB_SEPARATOR, width - x - 1, self.theme.attr("normal"))
                x += len(TAB_SEPARATOR)
            attr = self.theme.attr("tabs") if i == app.tabs.index else self.theme.attr("normal")
            if i == app.tabs.index:
                attr |= curses.A_REVERSE
            put_text(box, 1, x, tab_title, width - x - 1, attr)
            x += len(tab_title)
            if x >= width - 2:
                break

    def _draw_memo(self, stdscr, app: App, text: str, y: int, x: int,
                   height: int, width: int):
        if height < 3 or width < 4:
            return
        box = stdscr.derwin(height, width, y, x)
        box.attrset(self.theme.attr("normal"))
        box.box()
        editing = isinstance(app.mode, AddingFreeNote)
        label = " Note (editing) " if editing else " Note "
        put_text(box, 0, 2, label, width - 4, self.theme.attr("titles"))

        lines = wrap_memo(text + ("_" if editing else ""), width - 2)
        # Keep the end of the memo visible while typing
        visible = lines[-(height - 2):] if editing else lines[:height - 2]
        for row, line in enumerate(visible):
            put_text(box, row + 1, 1, line, width - 2, self.theme.attr("text"))

    def _draw_footer(self, stdscr, app: App, y: int, width: int):
        mode = app.mode
        normal = self.theme.attr("normal")
        highlight = self.theme.attr("highlight")

        put_text(stdscr, y, 0, f"[{mode.label}]", width, self.theme.attr("tabs"))
        offset = len(mode.label) + 3

        if isinstance(mode, AddingNote):
            put_text(stdscr, y, offset, f"Title: {mode.title}_", width - offset, highlight)
        elif isinstance(mode, TodoEntry):
            task_attr = highlight if mode.field == TASK_FIELD else normal
            cmd_attr = highlight if mode.field == CMD_FIELD else normal
            task = mode.task + ("_" if mode.field == TASK_FIELD else "")
            cmd = mode.cmd + ("_" if mode.field == CMD_FIELD else "")
            put_text(stdscr, y, offset, f"Task: {task}", width - offset, task_attr)
            put_text(stdscr, y + 1, offset, f"Cmd:  {cmd}", width - offset, cmd_attr)

        status = app.state.get_status()
        if status:
            attr = self.theme.attr("titles") if app.state.status_is_error() else normal
            put_text(stdscr, y + 2, 0, status, width - 1, attr)
        else:
            put_text(stdscr, y + 2, 0, help_line(app), width - 1, normal | curses.A_DIM)
