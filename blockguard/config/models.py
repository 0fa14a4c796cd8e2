"""
Pydantic-based configuration models for BlockGuard.

Settings are read from the environment (and an optional .env file) using
pydantic-settings, one prefix per concern.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from ..structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_LOG_FILE_LIMIT = 1024 * 1024 * 5
DEFAULT_LOG_FILE_COUNT = 10


class BlacklistConfig(BaseSettings):
    """Blacklist file location and audit log sinks."""

    file: str = Field(default="blacklist.txt", description="Path to the blacklist rule file")
    log_console: bool = Field(default=True, description="Write blacklist denials to the console")
    log_file: str = Field(default="", description="Rotating file for blacklist denials (empty disables)")
    log_file_limit: int = Field(default=DEFAULT_LOG_FILE_LIMIT, description="Maximum bytes per audit log file")
    log_file_count: int = Field(default=DEFAULT_LOG_FILE_COUNT, description="Number of rotated audit log files kept")

    @field_validator("file")
    @classmethod
    def validate_file(cls, v: str) -> str:
        """Validate the blacklist path is not blank."""
        if not v.strip():
            logger.error("Blacklist file path validation failed - empty path")
            raise ValueError("Blacklist file path cannot be empty")
        return v.strip()

    @field_validator("log_file_limit")
    @classmethod
    def validate_log_file_limit(cls, v: int) -> int:
        """Validate the rotation size is large enough to hold a record."""
        if v < 1024:
            raise ValueError("Audit log file limit must be at least 1024 bytes")
        return v

    @field_validator("log_file_count")
    @classmethod
    def validate_log_file_count(cls, v: int) -> int:
        """Validate at least one rotated file is kept."""
        if v < 1:
            raise ValueError("Audit log file count must be at least 1")
        return v

    model_config = {"env_prefix": "BLACKLIST_", "case_sensitive": False, "extra": "ignore"}


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    environment: str = Field(default="local", description="Logging environment")
    level: str = Field(default="INFO", description="Log level")

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate logging environment."""
        valid_environments = ["local", "unit_test", "production"]
        if v not in valid_environments:
            logger.error("Invalid logging environment", environment=v, valid_environments=valid_environments)
            raise ValueError(f"Environment must be one of {valid_environments}, got '{v}'")
        return v

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}, got '{v}'")
        return v_upper

    model_config = {"env_prefix": "LOGGING_", "case_sensitive": False, "extra": "ignore"}


class AppConfig(BaseSettings):
    """
    Composite application configuration.

    Access via get_config() rather than instantiating directly.
    """

    blacklist: BlacklistConfig = Field(default_factory=BlacklistConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "case_sensitive": False, "extra": "ignore"}
