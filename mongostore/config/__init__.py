"""Configuration loading for mongostore.

Configuration is loaded from TOML files with environment variable overrides.

Usage:
    from mongostore.config import get_settings

    settings = get_settings()
    url = settings.session.url
"""

from functools import lru_cache

from mongostore.config.loader import config_files
from mongostore.config.resolver import resolve_connection_config
from mongostore.config.settings import Settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the singleton settings instance.

    The result is cached for the lifetime of the process.
    Call `get_settings.cache_clear()` to reload configuration.

    Raises:
        FileNotFoundError: If config/default.toml does not exist
    """
    default_file, _ = config_files()
    if not default_file.is_file():
        raise FileNotFoundError(
            f"Default configuration file not found: {default_file}. "
            "Create config/default.toml or set MONGOSTORE_CONFIG_DIR."
        )

    return Settings()


def reload_settings() -> Settings:
    """Clear the settings cache and reload configuration."""
    get_settings.cache_clear()
    return get_settings()


__all__ = ["get_settings", "reload_settings", "resolve_connection_config", "Settings"]
