"""
Structlog-based logging configuration for BlockGuard.

This is the main entry point for the logging system. Application code obtains its
loggers through get_logger() and never calls structlog.get_logger() directly.
"""

# pylint: disable=too-few-public-methods  # Reason: Logging state container with focused responsibility, minimal public interface

import logging
import re
from typing import Any, cast

import structlog
from structlog.contextvars import merge_contextvars
from structlog.stdlib import BoundLogger, LoggerFactory

# NOTE: Infrastructure code in this module uses structlog.get_logger() directly to
# avoid a circular dependency on get_logger() during initialization.
logger = structlog.get_logger(__name__)

_ANSI_ESCAPE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")


class _LoggingState:
    """State container for logging initialization to avoid global statements."""

    initialized: bool = False
    level: str | None = None
    environment: str | None = None


_logging_state = _LoggingState()


def strip_ansi_renderer(bound_logger: Any, name: str, event_dict: dict[str, Any]) -> str | bytes:
    """Render an event as key=value pairs with ANSI escape sequences removed."""
    try:
        # Strings are rendered with repr(), so escapes must go before rendering.
        cleaned = {
            key: _ANSI_ESCAPE.sub("", value) if isinstance(value, str) else value for key, value in event_dict.items()
        }
        return structlog.processors.KeyValueRenderer(key_order=["event"])(bound_logger, name, cleaned)
    except Exception as e:  # pylint: disable=broad-exception-caught  # Reason: A renderer failure must never take down the caller that tried to log
        return f"Logging renderer error: {type(e).__name__}: {str(e)}"


def configure_enhanced_structlog(
    log_level: str = "INFO",
    *,
    environment: str = "local",
    force_reconfigure: bool = False,
) -> None:
    """
    Configure structlog on top of the standard library logging module.

    Records flow through stdlib loggers, so handlers attached to a named logger (for
    example the blacklist audit channel) receive structlog events for that name.

    Args:
        log_level: Root logging level (DEBUG, INFO, WARNING, ERROR)
        environment: Logging environment; "production" renders JSON lines, anything
            else renders ANSI-free key=value pairs
        force_reconfigure: When True, configure again even if already initialized
    """
    if _logging_state.initialized and not force_reconfigure:
        logger.debug("configure_enhanced_structlog skipped; logging already initialized", level=_logging_state.level)
        return

    logging.basicConfig(format="%(message)s", level=getattr(logging, log_level.upper(), logging.INFO))

    base_processors = [
        merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]
    renderer = structlog.processors.JSONRenderer() if environment == "production" else strip_ansi_renderer

    structlog.configure(
        processors=base_processors + [renderer],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=BoundLogger,
        cache_logger_on_first_use=False,
    )

    _logging_state.initialized = True
    _logging_state.level = log_level.upper()
    _logging_state.environment = environment

    get_logger("blockguard.structured_logging.setup").info(
        "Structured logging initialized", log_level=log_level, environment=environment
    )


def get_logger(name: str) -> Any:  # Returns BoundLogger but typed as Any for flexibility
    """
    Get a structlog logger with the specified name.

    This is the public API for obtaining loggers. All application code should use
    this function rather than calling structlog.get_logger() directly.

    Args:
        name: Logger name (typically __name__, or a channel name such as "blacklist.audit")

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def log_exception_once(
    bound_logger: BoundLogger,
    level: str,
    message: str,
    *,
    exc: Exception | None = None,
    mark_logged: bool = True,
    **kwargs: Any,
) -> None:
    """
    Log an exception once, respecting exceptions that have already been logged.

    Args:
        bound_logger: Structlog bound logger instance.
        level: Logging level to use (for example, "error" or "warning").
        message: Log message to emit.
        exc: Optional exception to include in the log entry.
        mark_logged: When True, mark the exception as logged to prevent duplicates.
        **kwargs: Additional key-value pairs for structured logging.
    """
    if exc is not None:
        if getattr(exc, "already_logged", False):
            return
        kwargs.setdefault("error_type", type(exc).__name__)
        kwargs.setdefault("error", str(exc))

    log_method = getattr(bound_logger, level.lower(), bound_logger.error)
    log_method(message, **kwargs)

    if exc is not None and mark_logged:
        marker = getattr(exc, "mark_logged", None)
        if callable(marker):
            marker()  # pylint: disable=not-callable  # Reason: callable() check confirms marker is callable at runtime
        else:
            cast(Any, exc).already_logged = True
