"""
Forget It Test Suite: Rendering Helpers
========================================
Row formatting, scrolling, memo wrapping and colour resolution. These are
the parts of the UI that do not need a live terminal.

Usage:
    python -m pytest tests/test_ui.py -v
    python tests/test_ui.py
"""
import sys
import os
import unittest
from datetime import datetime, timezone

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.app import App
from core.config import Color
from core.models import Note, Todo
from core.seed import default_collection
from core.selection import SelectionList
from ui.theme import COLOR_NUMBERS, color_number, rgb_to_xterm
from ui.views.NotesView import help_line, wrap_memo
from ui.widgets.TodoList import format_todo, scroll_offset, visible_rows

FIXED = datetime(2024, 1, 1, tzinfo=timezone.utc)


# ─────────────────────────────────────────────
#  TodoList Tests
# ─────────────────────────────────────────────

class TestTodoRows(unittest.TestCase):

    def test_format_selected_open(self):
        todo = Todo(task="Write", date=FIXED)
        self.assertEqual(format_todo(todo, ">", True), "> [ ] Write")

    def test_format_unselected_done_with_command(self):
        todo = Todo(task="Run", cmd="make", completed=True, date=FIXED)
        self.assertEqual(format_todo(todo, "✔", False), "  [x] Run $")

    def test_scroll_keeps_selection_visible(self):
        self.assertEqual(scroll_offset(0, 5), 0)
        self.assertEqual(scroll_offset(4, 5), 0)
        self.assertEqual(scroll_offset(5, 5), 1)
        self.assertEqual(scroll_offset(9, 3), 7)
        self.assertEqual(scroll_offset(3, 0), 0)

    def test_visible_rows(self):
        note = Note(title="n", todos=SelectionList(
            [Todo(task=str(i), date=FIXED) for i in range(10)], selected=7))
        rows = visible_rows(note, 4, ">")
        self.assertEqual([todo.task for _, todo, _ in rows], ["4", "5", "6", "7"])
        self.assertEqual([selected for _, _, selected in rows], [False, False, False, True])


# ─────────────────────────────────────────────
#  NotesView Tests
# ─────────────────────────────────────────────

class TestNotesViewHelpers(unittest.TestCase):

    def test_wrap_memo_keeps_line_breaks(self):
        self.assertEqual(wrap_memo("one two three\n\nfour", 7),
                         ["one two", "three", "", "four"])

    def test_wrap_memo_zero_width(self):
        self.assertEqual(wrap_memo("text", 0), [])

    def test_help_line_uses_bindings(self):
        app = App(default_collection(FIXED))
        self.assertIn("^n todo", help_line(app))
        self.assertIn("^q/Esc quit", help_line(app))

    def test_help_line_per_mode(self):
        app = App(default_collection(FIXED))
        app.on_ctrl_key("n")
        self.assertIn("switch field", help_line(app))
        app.on_ctrl_key("k")
        self.assertIn("^k to finish", help_line(app))
        app.runner.shutdown()


# ─────────────────────────────────────────────
#  Theme Tests
# ─────────────────────────────────────────────

class TestColors(unittest.TestCase):

    def test_named_colors(self):
        self.assertEqual(color_number(Color(name="Red"), 256), COLOR_NUMBERS["Red"])
        self.assertEqual(color_number(Color(name="Reset"), 256), -1)

    def test_bright_colors_fold_on_8_color_terminal(self):
        self.assertEqual(color_number(Color(name="LightRed"), 8), 1)
        self.assertEqual(color_number(Color(name="White"), 8), 7)

    def test_indexed(self):
        self.assertEqual(color_number(Color(index=208), 256), 208)
        self.assertEqual(color_number(Color(index=208), 8), -1)

    def test_rgb(self):
        self.assertEqual(rgb_to_xterm(0, 0, 0), 16)
        self.assertEqual(rgb_to_xterm(255, 255, 255), 231)
        self.assertEqual(rgb_to_xterm(255, 0, 0), 196)
        self.assertEqual(color_number(Color(rgb=(255, 0, 0)), 256), 196)
        self.assertEqual(color_number(Color(rgb=(255, 0, 0)), 8), 7)


if __name__ == "__main__":
    unittest.main(verbosity=2)
