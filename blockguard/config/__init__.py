"""
Configuration module for BlockGuard.

Usage:
    from blockguard.config import get_config

    config = get_config()
    logger.info("Blacklist configuration", file=config.blacklist.file)
"""

import sys
import threading
from functools import lru_cache
from os import getenv

from .models import AppConfig, BlacklistConfig, LoggingConfig

__all__ = ["get_config", "reset_config", "AppConfig", "BlacklistConfig", "LoggingConfig"]

_config_lock = threading.Lock()


def _is_test_mode() -> bool:
    """
    Detect if running in test environment.

    Returns:
        bool: True if pytest is loaded or has set its environment variables
    """
    if "pytest" in sys.modules:
        return True
    return bool(getenv("PYTEST_CURRENT_TEST"))


@lru_cache(maxsize=1)
def _get_config_cached() -> AppConfig:
    """Production config loader with caching."""
    with _config_lock:
        return AppConfig()


def get_config() -> AppConfig:
    """
    Get application configuration (singleton in production, fresh in tests).

    In test mode a new instance is built from the current environment on every call
    so monkeypatched variables are always honoured.

    Returns:
        AppConfig: The application configuration

    Raises:
        ValidationError: If configuration is invalid
    """
    if _is_test_mode():
        return AppConfig()
    return _get_config_cached()


def reset_config() -> None:
    """Reset the configuration cache so the next get_config() re-reads the environment."""
    with _config_lock:
        _get_config_cached.cache_clear()
