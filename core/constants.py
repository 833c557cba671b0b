"""
Application constants and path helpers.

File names, defaults and the snapshot timestamp format.
"""
import os
from pathlib import Path

APP_NAME = "Forget It"
APP_VERSION = "0.3.0"

# Per-user directory (overridable for tests and portable installs)
APP_DIR_NAME = ".forget"
APP_DIR_ENV = "FORGET_HOME"

CONFIG_FILE_NAME = "config.json"
SNAPSHOT_FILE_NAME = "note_db.json"
LOG_DIR_NAME = "logs"
LOG_FILE_NAME = "forget.log"

# Event loop
TICK_RATE_DEFAULT_MS = 60
TICK_RATE_MIN_MS = 1

# How long a status line message stays visible
STATUS_TTL_MS = 4000

# Grace period before still-running commands are terminated on quit
RUNNER_SHUTDOWN_TIMEOUT = 2.0

# Snapshot timestamps: ISO-8601 local time with UTC offset, whole seconds
TIMESTAMP_TIMESPEC = "seconds"


def app_dir() -> Path:
    """
    Get the per-user data directory.

    Returns:
        $FORGET_HOME if set, otherwise ~/.forget
    """
    override = os.environ.get(APP_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / APP_DIR_NAME


def config_path() -> Path:
    return app_dir() / CONFIG_FILE_NAME


def snapshot_path() -> Path:
    return app_dir() / SNAPSHOT_FILE_NAME


def log_dir() -> Path:
    return app_dir() / LOG_DIR_NAME
