"""
Input and tick event source.

Two daemon threads feed one queue:
- keyboard reader: polls a key reader and posts ("input", Key)
- ticker: posts ("tick", None) every tick_rate milliseconds

The main loop blocks on next() and handles one message at a time.
"""
import curses
import queue
import threading
import time
from typing import Any, Callable, Optional, Tuple

from core.constants import TICK_RATE_DEFAULT_MS
from events.keys import Key, from_curses

INPUT = "input"
TICK = "tick"

Event = Tuple[str, Any]

# Sleep between polls when no key is waiting
KEY_POLL_INTERVAL = 0.01


class EventHandle:
    """
    Wraps keyboard input and tick events behind one blocking queue.

    Features:
    - Thread-safe queue communication (reader/ticker threads -> main loop)
    - Key reader is any callable returning a Key or None (no key waiting)
    - close() stops both threads
    """

    def __init__(self, read_key: Callable[[], Optional[Key]],
                 tick_rate_ms: int = TICK_RATE_DEFAULT_MS):
        """
        Args:
            read_key: Non-blocking key poll, returns None when idle
            tick_rate_ms: Tick interval in milliseconds
        """
        self.tick_rate_ms = tick_rate_ms
        self._read_key = read_key
        self._queue: "queue.Queue[Event]" = queue.Queue()
        self._stop = threading.Event()

        self._input_thread = threading.Thread(
            target=self._input_loop, name="forget-input", daemon=True
        )
        self._tick_thread = threading.Thread(
            target=self._tick_loop, name="forget-tick", daemon=True
        )
        self._input_thread.start()
        self._tick_thread.start()

    def _input_loop(self):
        while not self._stop.is_set():
            key = self._read_key()
            if key is None:
                time.sleep(KEY_POLL_INTERVAL)
                continue
            self._queue.put((INPUT, key))

    def _tick_loop(self):
        interval = self.tick_rate_ms / 1000.0
        while not self._stop.is_set():
            self._queue.put((TICK, None))
            if self._stop.wait(interval):
                break

    def next(self, timeout: Optional[float] = None) -> Event:
        """
        Block until the next event.

        Raises:
            queue.Empty: If timeout elapses with no event
        """
        return self._queue.get(timeout=timeout)

    def close(self, timeout: float = 1.0):
        """Stop both producer threads."""
        self._stop.set()
        for thread in (self._input_thread, self._tick_thread):
            if thread is not threading.current_thread():
                thread.join(timeout=timeout)

    @property
    def closed(self) -> bool:
        return self._stop.is_set()


def curses_key_reader(window, lock: threading.Lock) -> Callable[[], Optional[Key]]:
    """
    Build a non-blocking key poll for a curses window.

    The window must be in nodelay mode. Reads happen under ``lock``, the
    same lock the main loop holds while drawing, since curses is not
    thread-safe.
    """
    def read_key() -> Optional[Key]:
        with lock:
            try:
                code = window.get_wch()
            except curses.error:
                return None
        return from_curses(code)

    return read_key
