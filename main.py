"""
Forget It - sticky notes and todos in the terminal
Main entry point
"""
import argparse
import curses
import sys
import threading
from typing import List, Optional

from core.app import App
from core.config import AppConfig, load_config
from core.constants import (APP_NAME, APP_VERSION, TICK_RATE_DEFAULT_MS,
                            TICK_RATE_MIN_MS, app_dir, config_path, log_dir,
                            snapshot_path)
from core.logger import log, setup_logging
from core.persistence import SnapshotCorruptError, SnapshotFile
from core.runner import CommandRunner
from events.handler import INPUT, EventHandle, curses_key_reader
from ui.theme import Theme
from ui.views.NotesView import NotesView

# curses waits this long after Esc to tell it apart from an escape sequence
ESC_DELAY_MS = 25


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="forget",
        description="Sticky notes with todo lists, in the terminal.",
    )
    parser.add_argument(
        "tick_rate",
        nargs="?",
        type=int,
        default=TICK_RATE_DEFAULT_MS,
        help=f"UI tick interval in milliseconds (default: {TICK_RATE_DEFAULT_MS})",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {APP_VERSION}")
    args = parser.parse_args(argv)
    if args.tick_rate < TICK_RATE_MIN_MS:
        parser.error(f"tick_rate must be at least {TICK_RATE_MIN_MS} ms")
    return args


def open_notes(store: SnapshotFile, ask=input):
    """
    Load the snapshot, offering a reset when it is corrupt.

    Args:
        store: Snapshot file
        ask: Prompt function (input() by default)

    Returns:
        Loaded collection, or None if the user declined the reset
    """
    try:
        return store.open()
    except SnapshotCorruptError as e:
        print(f"[ERROR] {e}")
        try:
            answer = ask(f"Reset to the default notes? The old file is kept as "
                         f"{store.backup_path().name} [y/N] ")
        except EOFError:
            answer = ""
        if answer.strip().lower() not in ("y", "yes"):
            return None
        notes = store.reset()
        print(f"[LOAD] Reset notes, corrupt file moved to {store.backup_path()}")
        return notes


def run(stdscr, app: App, config: AppConfig, tick_rate: int):
    """Curses session: draw, wait for one event, handle it, repeat."""
    curses.raw()
    curses.curs_set(0)
    curses.set_escdelay(ESC_DELAY_MS)
    stdscr.keypad(True)
    stdscr.nodelay(True)

    theme = Theme(config.colors)
    theme.apply()
    view = NotesView(theme, config.highlight_string)

    screen_lock = threading.Lock()
    events = EventHandle(curses_key_reader(stdscr, screen_lock), tick_rate)

    try:
        while True:
            with screen_lock:
                view.draw(stdscr, app)

            kind, payload = events.next()
            if kind == INPUT:
                app.dispatch(payload)
            else:
                app.on_tick(tick_rate)

            if app.should_quit:
                break
    finally:
        events.close()


def main(argv: Optional[List[str]] = None) -> int:
    """Launch Forget It."""
    args = parse_args(argv)

    print(f"=== {APP_NAME} ===")
    print("Initializing...")

    # Per-user directory must be usable before anything else
    directory = app_dir()
    try:
        directory.mkdir(parents=True, exist_ok=True)
        config = load_config(config_path())
        setup_logging(log_dir())
    except OSError as e:
        print(f"[ERROR] Cannot use data directory {directory}: {e}")
        return 1

    for warning in config.warnings:
        print(f"[CONFIG] {warning}")
        log("CONFIG", warning)

    store = SnapshotFile(snapshot_path())
    try:
        notes = open_notes(store)
    except OSError as e:
        print(f"[ERROR] Cannot open notes {store.path}: {e}")
        return 1
    if notes is None:
        print(f"[EXIT] Left {store.path} untouched")
        return 1

    runner = CommandRunner()
    app = App(notes, config=config, store=store, runner=runner)
    log("START", f"Loaded {len(notes)} sticky notes from {store.path}")

    try:
        curses.wrapper(run, app, config, args.tick_rate)
    except KeyboardInterrupt:
        pass
    finally:
        running = runner.running_count()
        if running:
            print(f"[EXIT] Waiting for {running} running command(s)...")
        terminated = app.close()
        if terminated:
            print(f"[EXIT] Terminated {terminated} command(s)")

    if app.state.is_dirty():
        print("[EXIT] Unsaved changes were discarded")
    print(f"{APP_NAME} closed.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
