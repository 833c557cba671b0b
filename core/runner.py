"""
Background command execution for todos that carry a command line.

Commands run detached: no shell, stdin/stdout/stderr on the null device,
own session so terminal signals do not reach them. Handles are kept until
the process exits (reap) or the app quits (shutdown).
"""
import shlex
import subprocess
import threading
import time
from typing import List, Optional

from core.constants import RUNNER_SHUTDOWN_TIMEOUT
from core.logger import log


class SpawnError(OSError):
    """Command could not be started."""


class CommandRunner:
    """
    Starts todo commands and tracks their processes.

    Thread-safe: the handle list is only touched under a lock, and a
    shutdown drains it exactly once.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._processes: List[subprocess.Popen] = []
        self._closed = False

    def spawn(self, command: str) -> subprocess.Popen:
        """
        Start command in the background.

        Args:
            command: Command line, split with shell quoting rules

        Returns:
            Handle of the started process

        Raises:
            SpawnError: If the command is empty, badly quoted, the program
                does not exist, or the runner was already shut down
        """
        try:
            argv = shlex.split(command)
        except ValueError as e:
            raise SpawnError(f"Cannot parse command {command!r}: {e}") from e
        if not argv:
            raise SpawnError("Empty command")

        with self._lock:
            if self._closed:
                raise SpawnError("Runner is shut down")
            try:
                process = subprocess.Popen(
                    argv,
                    stdin=subprocess.DEVNULL,
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.DEVNULL,
                    start_new_session=True,
                )
            except OSError as e:
                raise SpawnError(f"Failed to run {argv[0]!r}: {e}") from e
            self._processes.append(process)

        log("RUN", f"Started pid {process.pid}: {command}", child="runner")
        return process

    def running_count(self) -> int:
        """Number of tracked processes that have not been reaped."""
        with self._lock:
            return len(self._processes)

    def reap(self) -> int:
        """
        Forget processes that already exited.

        Returns:
            Number of handles removed
        """
        with self._lock:
            finished = [p for p in self._processes if p.poll() is not None]
            self._processes = [p for p in self._processes if p not in finished]

        for process in finished:
            log("RUN", f"pid {process.pid} finished ({describe_exit(process)})", child="runner")
        return len(finished)

    def shutdown(self, timeout: float = RUNNER_SHUTDOWN_TIMEOUT) -> int:
        """
        Wait for tracked processes, then terminate stragglers.

        Later spawns are refused. Safe to call more than once.

        Args:
            timeout: Total grace period in seconds shared by all processes

        Returns:
            Number of processes that had to be terminated
        """
        with self._lock:
            self._closed = True
            processes, self._processes = self._processes, []

        deadline = time.monotonic() + timeout
        terminated = 0

        for process in processes:
            remaining = max(0.0, deadline - time.monotonic())
            try:
                process.wait(timeout=remaining)
                continue
            except subprocess.TimeoutExpired:
                pass

            # Force terminate if still alive
            terminated += 1
            log("RUN", f"Terminating pid {process.pid}", child="runner")
            process.terminate()
            try:
                process.wait(timeout=1.0)
            except subprocess.TimeoutExpired:
                process.kill()
                process.wait()

        return terminated

    @property
    def closed(self) -> bool:
        return self._closed


def describe_exit(process: subprocess.Popen) -> Optional[str]:
    """Short description of a finished process ("exit 0"), None if running."""
    code = process.poll()
    if code is None:
        return None
    if code < 0:
        return f"signal {-code}"
    return f"exit {code}"
