"""Wiring of a blacklist dispatcher from application configuration."""

from __future__ import annotations

from blockguard.blacklist.denial_tracker import DenialTracker
from blockguard.blacklist.dispatch import BlacklistDispatcher
from blockguard.blacklist.identifier_resolver import IdentifierResolver
from blockguard.blacklist.protocols import ItemNameRegistryProtocol
from blockguard.config import AppConfig, get_config
from blockguard.structured_logging.blacklist_audit import blacklist_audit_logger
from blockguard.structured_logging.enhanced_logging_config import configure_enhanced_structlog, get_logger
from blockguard.structured_logging.logging_file_setup import configure_audit_channel

logger = get_logger(__name__)


def create_dispatcher(
    registry: ItemNameRegistryProtocol,
    config: AppConfig | None = None,
    *,
    configure_logging: bool = True,
) -> BlacklistDispatcher:
    """
    Build a dispatcher, wire its audit channel, and load the configured blacklist.

    A missing or unreadable blacklist file leaves the dispatcher permissive; the
    failure is logged and the host keeps running.

    Args:
        registry: Host lookup for symbolic item names
        config: Application configuration (defaults to get_config())
        configure_logging: Configure structlog and the audit channel handlers

    Returns:
        A ready dispatcher with a DenialTracker as its per-actor state
    """
    if config is None:
        config = get_config()

    if configure_logging:
        configure_enhanced_structlog(config.logging.level, environment=config.logging.environment)
        configure_audit_channel(config.blacklist)

    dispatcher = BlacklistDispatcher(
        IdentifierResolver(registry),
        audit=blacklist_audit_logger,
        actor_state=DenialTracker(),
    )
    loaded = dispatcher.reload_from_path(config.blacklist.file)
    logger.info(
        "Blacklist dispatcher ready",
        blacklist_file=config.blacklist.file,
        loaded=loaded,
        configured=dispatcher.is_configured,
    )
    return dispatcher
