"""
Exception hierarchy for BlockGuard.

Content problems in a blacklist file never raise; they are logged and skipped.
Only resource problems (a file that cannot be read at all) surface as exceptions,
and the dispatcher turns those into a failed reload.
"""

from datetime import UTC, datetime
from typing import Any


class BlockGuardError(Exception):
    """
    Base exception for all BlockGuard errors.

    Carries structured details for logging and tracks whether it has already been
    logged so log_exception_once() reports it a single time.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """
        Initialize BlockGuard error.

        Args:
            message: Technical error message
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.timestamp = datetime.now(UTC)
        self.already_logged = False

    def mark_logged(self) -> None:
        """Record that this error has been written to the log."""
        self.already_logged = True

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
        }


class BlacklistLoadError(BlockGuardError):
    """The blacklist file is missing, unreadable, or not valid UTF-8."""

    def __init__(self, message: str, path: str, reason: str = "unreadable", **kwargs):
        super().__init__(message, **kwargs)
        self.path = path
        self.reason = reason
        self.details["path"] = path
        self.details["reason"] = reason
