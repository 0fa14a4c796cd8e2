"""
Blacklist-specific audit logging.

Every denied block or item action produces exactly one audit record on the
"blacklist.audit" channel. The channel's handlers are wired separately by
configure_audit_channel(), so the records can go to the console, a rotating file,
or both without this module knowing which.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from blockguard.structured_logging.enhanced_logging_config import get_logger
from blockguard.structured_logging.logging_file_setup import AUDIT_CHANNEL

if TYPE_CHECKING:
    from blockguard.blacklist.models import AuditRecord


class BlacklistAuditLogger:
    """
    Audit sink for blacklist decisions.

    Implements the audit sink protocol used by rule entries and the dispatcher:
    a single write(record) method.
    """

    def __init__(self) -> None:
        """Initialize the blacklist audit logger."""
        self.logger = get_logger(AUDIT_CHANNEL)

    def write(self, record: AuditRecord) -> None:
        """
        Log a blacklist decision.

        Args:
            record: The structured decision to record
        """
        self.logger.info(
            "Blacklisted action denied",
            event_type="blacklist_denial",
            **record.to_dict(),
        )


# Global blacklist audit logger instance
blacklist_audit_logger = BlacklistAuditLogger()
