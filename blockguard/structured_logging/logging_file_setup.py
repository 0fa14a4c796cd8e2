"""
Handler setup for the blacklist audit channel.

The audit channel is a dedicated stdlib logger that does not propagate to the root
logger. Operators choose whether denials go to the console, to a size-rotated file,
or both.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

from blockguard.structured_logging.enhanced_logging_config import get_logger
from blockguard.structured_logging.logging_handlers import (
    AuditConsoleFormatter,
    AuditLineFormatter,
    SafeRotatingFileHandler,
)

if TYPE_CHECKING:
    from blockguard.config.models import BlacklistConfig

logger = get_logger(__name__)

AUDIT_CHANNEL = "blacklist.audit"


def configure_audit_channel(config: BlacklistConfig) -> list[logging.Handler]:
    """
    Attach console and file handlers to the blacklist audit channel.

    Existing handlers on the channel are removed first, so calling this again after a
    configuration change replaces the previous wiring.

    Args:
        config: Blacklist configuration carrying the audit sink settings

    Returns:
        The handlers now attached to the channel
    """
    audit_logger = logging.getLogger(AUDIT_CHANNEL)
    audit_logger.propagate = False
    audit_logger.setLevel(logging.INFO)
    for handler in list(audit_logger.handlers):
        audit_logger.removeHandler(handler)
        handler.close()

    if config.log_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(AuditConsoleFormatter())
        audit_logger.addHandler(console_handler)

    log_file = config.log_file.strip()
    if log_file:
        try:
            file_handler = SafeRotatingFileHandler(
                log_file,
                maxBytes=config.log_file_limit,
                backupCount=config.log_file_count,
                encoding="utf-8",
            )
        except OSError as e:
            logger.warning("Could not open blacklist log file", log_file=log_file, error=str(e))
        else:
            file_handler.setFormatter(AuditLineFormatter())
            audit_logger.addHandler(file_handler)

    logger.info(
        "Blacklist audit channel configured",
        console=config.log_console,
        log_file=log_file or None,
        handler_count=len(audit_logger.handlers),
    )
    return list(audit_logger.handlers)
