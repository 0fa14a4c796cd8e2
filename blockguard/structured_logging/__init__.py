"""
Structured logging package for BlockGuard.

This package provides the structlog configuration, the rotating file handler used
by the blacklist audit channel, and the audit logger itself.

All imports should use explicit paths like
'from blockguard.structured_logging.enhanced_logging_config import get_logger'.

The directory is named 'structured_logging' rather than 'logging' so it never shadows
Python's standard library logging module.
"""

__all__ = []
