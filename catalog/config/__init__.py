"""Configuration module."""

from catalog.config.configuration import (
    AppConfig,
    CloudinaryConfig,
    ConfigurationError,
    DatabaseConfig,
    ImageConfig,
    LoggingConfig,
    configure_logging,
    get_config,
    load_config,
)

__all__ = [
    "AppConfig",
    "CloudinaryConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "ImageConfig",
    "LoggingConfig",
    "configure_logging",
    "get_config",
    "load_config",
]
