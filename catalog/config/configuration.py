"""Configuration module for the product catalog backend.

Loads settings from environment-specific config files:
- APP_ENV=dev  → config_dev.yaml (local SQLite file, verbose logging)
- APP_ENV=test → config_test.yaml
- Default      → config.yaml

Cloudinary credentials are loaded from the .env file.
Fails fast with clear error messages if required configuration is missing.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import yaml
from dotenv import load_dotenv


DEFAULT_ALLOWED_CONTENT_TYPES = ("image/jpeg", "image/jpg", "image/png", "image/gif")
DEFAULT_MAX_FILE_SIZE_BYTES = 5 * 1024 * 1024


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


def _get_project_root() -> Path:
    """Get the project root directory (where config.yaml lives)."""
    # Navigate from catalog/config/ up to project root
    return Path(__file__).parent.parent.parent


def _get_config_filename() -> str:
    """Get config filename based on APP_ENV environment variable."""
    app_env = os.environ.get("APP_ENV", "").lower()

    if app_env == "dev":
        return "config_dev.yaml"
    elif app_env == "test":
        return "config_test.yaml"
    else:
        return "config.yaml"


def _load_yaml_config() -> dict:
    """Load configuration from environment-specific config file."""
    config_filename = _get_config_filename()
    config_path = _get_project_root() / config_filename

    if not config_path.exists():
        raise ConfigurationError(
            f"Configuration file not found: {config_path}. "
            f"Set APP_ENV to 'dev' or 'test', or create {config_filename}."
        )

    with open(config_path, "r") as f:
        return yaml.safe_load(f) or {}


def _get_required_env(key: str) -> str:
    """Get required environment variable or raise ConfigurationError."""
    value = os.environ.get(key)
    if not value:
        raise ConfigurationError(
            f"Required environment variable '{key}' is not set. "
            f"Please add it to your .env file."
        )
    return value


def _get_optional_env(key: str, default: Optional[str] = None) -> Optional[str]:
    """Get optional environment variable with default."""
    return os.environ.get(key, default)


@dataclass(frozen=True)
class DatabaseConfig:
    """Database configuration."""
    path: str


@dataclass(frozen=True)
class CloudinaryConfig:
    """Cloudinary media service configuration."""
    cloud_name: str
    api_key: str
    api_secret: str
    folder: str


@dataclass(frozen=True)
class ImageConfig:
    """Rules applied to uploaded product images."""
    allowed_content_types: Tuple[str, ...]
    max_file_size_bytes: int
    width: int
    height: int


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""
    level: str


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration container."""
    database: DatabaseConfig
    cloudinary: CloudinaryConfig
    images: ImageConfig
    logging: LoggingConfig


def load_config() -> AppConfig:
    """
    Load and validate all application configuration.

    Loads from the YAML config file for non-sensitive settings and .env for
    Cloudinary credentials. Fails fast if required configuration is missing.

    Returns:
        AppConfig: Validated application configuration.

    Raises:
        ConfigurationError: If required configuration is missing or invalid.
    """
    # Load environment variables from .env file
    load_dotenv()

    yaml_config = _load_yaml_config()

    db_section = yaml_config.get("database", {})
    database_config = DatabaseConfig(
        path=_get_optional_env("CATALOG_DB_PATH", db_section.get("path", "products.db")),
    )

    cloudinary_section = yaml_config.get("cloudinary", {})
    cloud_name = cloudinary_section.get("cloud_name") or _get_required_env("CLOUDINARY_CLOUD_NAME")
    cloudinary_config = CloudinaryConfig(
        cloud_name=cloud_name,
        api_key=_get_required_env("CLOUDINARY_API_KEY"),
        api_secret=_get_required_env("CLOUDINARY_API_SECRET"),
        folder=cloudinary_section.get("folder", "products"),
    )

    images_section = yaml_config.get("images", {})
    allowed_types = images_section.get("allowed_content_types", list(DEFAULT_ALLOWED_CONTENT_TYPES))
    max_size = images_section.get("max_file_size_bytes", DEFAULT_MAX_FILE_SIZE_BYTES)
    if not isinstance(max_size, int) or max_size <= 0:
        raise ConfigurationError(
            f"images.max_file_size_bytes must be a positive integer, got {max_size!r}"
        )
    image_config = ImageConfig(
        allowed_content_types=tuple(t.lower() for t in allowed_types),
        max_file_size_bytes=max_size,
        width=images_section.get("width", 800),
        height=images_section.get("height", 600),
    )

    logging_section = yaml_config.get("logging", {})
    level = str(logging_section.get("level", "INFO")).upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigurationError(f"Unknown logging level: {level}")
    logging_config = LoggingConfig(level=level)

    return AppConfig(
        database=database_config,
        cloudinary=cloudinary_config,
        images=image_config,
        logging=logging_config,
    )


# Module-level singleton for convenience
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Get the application configuration singleton.

    Lazy-loads configuration on first access.

    Returns:
        AppConfig: Application configuration.

    Raises:
        ConfigurationError: If required configuration is missing.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the server process."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )
