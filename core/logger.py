"""
Session log.

Curses owns the terminal while the app runs, so messages that the
startup code would print go to a rotating log file instead. Messages keep
the bracketed tag style used on the console: "[SAVE] Saved 3 notes".
"""
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from core.constants import LOG_FILE_NAME

LOGGER_NAME = "forget"
LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_MAX_BYTES = 1024 * 1024
LOG_BACKUP_COUNT = 5


def setup_logging(log_dir: Path, level: int = logging.INFO) -> logging.Logger:
    """
    Attach a rotating file handler to the app logger.

    Calling it again with the same directory is a no-op.

    Args:
        log_dir: Directory for forget.log (created if missing)
        level: Minimum level written

    Returns:
        The configured logger
    """
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = (log_dir / LOG_FILE_NAME).resolve()

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    for handler in logger.handlers:
        if isinstance(handler, RotatingFileHandler) and Path(handler.baseFilename) == log_file:
            return logger

    handler = RotatingFileHandler(
        log_file, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUP_COUNT, encoding="utf-8"
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT))
    logger.addHandler(handler)
    # Keep records away from the root logger (and so off the terminal)
    logger.propagate = False
    return logger


def get_logger(child: Optional[str] = None) -> logging.Logger:
    """Get the app logger, or a child such as 'forget.runner'."""
    if child:
        return logging.getLogger(f"{LOGGER_NAME}.{child}")
    return logging.getLogger(LOGGER_NAME)


def log(tag: str, message: str, level: int = logging.INFO, child: Optional[str] = None):
    """
    Write a tagged message.

    Args:
        tag: Bracket tag without brackets, e.g. "SAVE"
        message: Message text
        level: Logging level
        child: Optional child logger name
    """
    get_logger(child).log(level, f"[{tag}] {message}")
