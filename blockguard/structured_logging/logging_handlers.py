"""
Logging handlers for file-based logging with rotation.

This module provides the size-rotating file handler used by the blacklist audit
channel, plus the thread-safe directory creation it relies on.
"""

import logging
import threading
from logging.handlers import RotatingFileHandler
from pathlib import Path

_created_dirs: set[str] = set()
_created_dirs_lock = threading.Lock()


def ensure_log_directory(log_path: Path) -> None:
    """
    Thread-safe directory creation for log files.

    Uses a cache to avoid repeated mkdir() calls once a directory is known to exist.

    Args:
        log_path: Path to the log file (directory will be created for parent)
    """
    if not log_path or not log_path.parent:
        return

    dir_str = str(log_path.parent)

    with _created_dirs_lock:
        if dir_str in _created_dirs:
            return
        log_path.parent.mkdir(parents=True, exist_ok=True)
        _created_dirs.add(dir_str)


class SafeRotatingFileHandler(RotatingFileHandler):
    """
    RotatingFileHandler that ensures its directory exists before opening the file.

    The audit log path comes straight from operator configuration, so the
    directory may not exist yet on first start.
    """

    def _open(self):  # noqa: N802
        """Open the log file, creating its directory first."""
        if self.baseFilename:
            ensure_log_directory(Path(self.baseFilename))
        return super()._open()

    def shouldRollover(self, record: logging.LogRecord) -> bool:  # noqa: N802 - match logging API
        """Determine if rollover should occur; never raise from inside the logging system."""
        if not self.baseFilename:
            return False
        try:
            return bool(super().shouldRollover(record))
        except (FileNotFoundError, OSError):
            return False


class AuditLineFormatter(logging.Formatter):
    """Single-line formatter for audit records written to file."""

    def __init__(self) -> None:
        super().__init__(fmt="%(asctime)s [%(levelname)s] %(message)s", datefmt="%Y-%m-%d %H:%M:%S")


class AuditConsoleFormatter(logging.Formatter):
    """Console formatter for audit records, prefixed with the channel name."""

    def __init__(self) -> None:
        super().__init__(fmt="%(asctime)s [%(name)s] %(message)s", datefmt="%H:%M:%S")
