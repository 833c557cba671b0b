"""
Application state machine.

One App owns the note collection, the active input mode and the session
flags. Every key event is handled synchronously by one of the on_* methods;
dispatch() routes a Key to the right one.

Modes (see core.modes):
- Browsing: arrows navigate, the mark_done/remove_todo keys (Backspace and
  Delete by default) check off and remove, Enter runs the selected command
- AddingNote / AddingTodo / EditingTodo: type into buffers, Enter commits
- AddingFreeNote: typing edits the active note's memo directly
"""
import logging
from dataclasses import replace
from typing import Optional

from core.config import AppConfig
from core.logger import log
from core.models import AppState, Note, Todo, now
from core.modes import (AddingFreeNote, AddingNote, AddingTodo, Browsing,
                        EditingTodo, Mode, TodoEntry)
from core.persistence import SaveError, SnapshotFile
from core.runner import CommandRunner, SpawnError
from core.selection import SelectionList, TabBar
from events import keys
from events.keys import Key

NEWLINE = "\n"


class App:
    """
    Sticky notes application state.

    Attributes:
        notes: Collection of Notes (cursor = active tab)
        tabs: Tab bar view over notes
        mode: Active input mode
        state: Dirty/quit/status flags
    """

    def __init__(self, notes: SelectionList, config: Optional[AppConfig] = None,
                 store: Optional[SnapshotFile] = None,
                 runner: Optional[CommandRunner] = None):
        """
        Args:
            notes: Loaded collection
            config: Key bindings and theme (defaults if None)
            store: Where save writes to (save reports an error if None)
            runner: Command runner for Enter (a private one if None)
        """
        self.notes = notes
        self.tabs = TabBar(notes)
        self.config = config or AppConfig.default()
        self.store = store
        self.runner = runner or CommandRunner()
        self.mode: Mode = Browsing()
        self.state = AppState()

    # ------------------------------------------------------------------
    # Queries

    @property
    def title(self) -> str:
        return self.config.title

    @property
    def should_quit(self) -> bool:
        return self.state.should_quit()

    def active_note(self) -> Optional[Note]:
        """Note shown by the active tab (None if there are no notes)."""
        return self.notes.get_selected()

    def selected_todo(self) -> Optional[Todo]:
        note = self.active_note()
        if note is None:
            return None
        return note.todos.get_selected()

    def is_browsing(self) -> bool:
        return isinstance(self.mode, Browsing)

    # ------------------------------------------------------------------
    # Event routing

    def dispatch(self, key: Key):
        """Route one key press to its handler."""
        if self.is_browsing() and self.on_browse_key(key):
            return

        if key.kind == keys.CHAR:
            self.on_key(key.char)
        elif key.kind == keys.CTRL:
            self.on_ctrl_key(key.char)
        elif key.kind == keys.UP:
            self.on_up()
        elif key.kind == keys.DOWN:
            self.on_down()
        elif key.kind == keys.LEFT:
            self.on_left()
        elif key.kind == keys.RIGHT:
            self.on_right()
        elif key.kind == keys.BACKSPACE:
            self.on_backspace()
        elif key.kind == keys.ESC:
            self.quit()

    def on_browse_key(self, key: Key) -> bool:
        """
        Handle the configurable browsing keys (mark_done, remove_todo).

        Returns:
            True if key is bound to one of them and was handled
        """
        action = self.config.browse_action_for(key)
        if action == "mark_done":
            self.toggle_selected()
        elif action == "remove_todo":
            self.delete_selected()
        else:
            return False
        return True

    def on_up(self):
        if isinstance(self.mode, TodoEntry):
            self.mode.toggle_field()
            return
        if self.is_browsing():
            note = self.active_note()
            if note is not None:
                note.todos.select_previous()

    def on_down(self):
        if isinstance(self.mode, TodoEntry):
            self.mode.toggle_field()
            return
        if self.is_browsing():
            note = self.active_note()
            if note is not None:
                note.todos.select_next()

    def on_left(self):
        if self.is_browsing():
            self.tabs.previous()

    def on_right(self):
        if self.is_browsing():
            self.tabs.next()

    def on_key(self, c: str):
        """Handle a printable character (Enter arrives as '\\n')."""
        mode = self.mode

        if isinstance(mode, Browsing):
            if c == NEWLINE:
                self.run_selected()
            return

        if isinstance(mode, AddingFreeNote):
            note = self.active_note()
            if note is not None:
                note.note += c
                self.state.mark_dirty()
            return

        if c == NEWLINE:
            if isinstance(mode, AddingNote):
                self._commit_note(mode)
            elif isinstance(mode, EditingTodo):
                self._commit_edit(mode)
            elif isinstance(mode, AddingTodo):
                self._commit_todo(mode)
            return

        mode.push(c)

    def on_backspace(self):
        """Delete the last typed character (Browsing uses the mark_done binding instead)."""
        mode = self.mode

        if isinstance(mode, Browsing):
            return
        if isinstance(mode, AddingFreeNote):
            note = self.active_note()
            if note is not None and note.note:
                note.note = note.note[:-1]
                self.state.mark_dirty()
        else:
            mode.pop()

    def on_ctrl_key(self, c: str):
        """Handle ctrl+letter according to the configured bindings."""
        action = self.config.action_for(c)
        if action is None:
            return

        if action == "exit":
            self.quit()
        elif action == "save":
            self.save()
        elif action == "new_sticky_note":
            self._toggle_mode(AddingNote)
        elif action == "new_todo":
            self._toggle_mode(AddingTodo)
        elif action == "new_note":
            self._toggle_mode(AddingFreeNote)
        elif action == "edit_todo":
            self._toggle_edit()
        elif action == "remove_sticky_note":
            if self.is_browsing():
                self.remove_active_note()

    def on_tick(self, elapsed_ms: int = 0):
        """Periodic housekeeping: expire status, reap finished commands."""
        self.state.age_status(elapsed_ms)
        self.runner.reap()

    # ------------------------------------------------------------------
    # Mode transitions

    def _toggle_mode(self, mode_cls):
        """Enter mode_cls with empty buffers, or leave it if already active."""
        if type(self.mode) is mode_cls:
            self.mode = Browsing()
        else:
            self.mode = mode_cls()

    def _toggle_edit(self):
        if isinstance(self.mode, EditingTodo):
            self.mode = Browsing()
            return

        note = self.active_note()
        todo = self.selected_todo()
        if note is None or todo is None:
            self.state.set_status("Nothing to edit: no todo selected")
            return

        self.mode = EditingTodo(task=todo.task, cmd=todo.cmd, index=note.todos.selected)

    # ------------------------------------------------------------------
    # Commits

    def _commit_note(self, mode: AddingNote):
        self.mode = Browsing()
        if not mode.title:
            return
        self.notes.append(Note(title=mode.title))
        self.notes.select(len(self.notes) - 1)
        self.state.mark_dirty()

    def _commit_todo(self, mode: AddingTodo):
        self.mode = Browsing()
        note = self.active_note()
        if note is None or not mode.task:
            return
        note.todos.append(Todo(task=mode.task, cmd=mode.cmd, completed=False, date=now()))
        note.todos.select(len(note.todos) - 1)
        self.state.mark_dirty()

    def _commit_edit(self, mode: EditingTodo):
        self.mode = Browsing()
        note = self.active_note()
        if note is None or not mode.task:
            return
        todo = Todo(task=mode.task, cmd=mode.cmd, completed=False, date=now())
        if note.todos.replace_at(mode.index, todo):
            self.state.mark_dirty()

    # ------------------------------------------------------------------
    # Browsing actions

    def toggle_selected(self):
        """Flip the completed flag of the selected todo."""
        note = self.active_note()
        todo = self.selected_todo()
        if note is None or todo is None:
            return
        note.todos.replace_at(note.todos.selected, replace(todo, completed=not todo.completed))
        self.state.mark_dirty()

    def delete_selected(self):
        """Remove the selected todo; the cursor moves up unless at the top."""
        note = self.active_note()
        if note is None or note.todos.is_empty():
            return
        index = note.todos.selected
        if index > 0:
            note.todos.select_previous()
        note.todos.remove_at(index)
        self.state.mark_dirty()

    def remove_active_note(self):
        """Remove the note of the active tab."""
        if self.notes.is_empty():
            return
        removed = self.notes.remove_at(self.notes.selected)
        log("NOTES", f"Removed sticky note {removed.title!r}")
        self.state.mark_dirty()

    def run_selected(self):
        """Run the selected todo's command, if it has one."""
        todo = self.selected_todo()
        if todo is None or not todo.has_command():
            return
        try:
            process = self.runner.spawn(todo.cmd)
        except SpawnError as e:
            log("ERROR", str(e), level=logging.WARNING)
            self.state.set_status(str(e), error=True)
            return
        self.state.set_status(f"Started: {todo.cmd} (pid {process.pid})")

    # ------------------------------------------------------------------
    # Session

    def save(self) -> bool:
        """
        Write the collection to the snapshot file.

        Returns:
            True if saved; on failure the error is shown and the session
            continues
        """
        if self.store is None:
            self.state.set_status("Nowhere to save: no snapshot file", error=True)
            return False
        try:
            self.store.save(self.notes)
        except SaveError as e:
            log("ERROR", str(e), level=logging.ERROR)
            self.state.set_status(str(e), error=True)
            return False

        self.state.mark_clean()
        self.state.set_status(f"Saved {len(self.notes)} sticky notes")
        log("SAVE", f"Saved {len(self.notes)} sticky notes to {self.store.path}")
        return True

    def quit(self):
        """
        Stop the session.

        Only sets the quit flag. Running
        commands are cleaned up by close() after the screen is released.
        """
        if self.state.should_quit():
            return
        self.state.request_quit()
        log("EXIT", "Quit requested" + (" with unsaved changes" if self.state.is_dirty() else ""))

    def close(self) -> int:
        """
        Wait for (then terminate) running commands. Safe to call more than once.

        Returns:
            Number of commands that had to be terminated
        """
        terminated = self.runner.shutdown()
        if terminated:
            log("EXIT", f"Terminated {terminated} running command(s)")
        return terminated
