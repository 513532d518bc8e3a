"""Configuration for confbind.

Settings are read from CONFBIND_* environment variables.

Usage:
    from confbind.config import get_settings

    settings = get_settings()
    strict = settings.strict_shape
"""

from functools import lru_cache

from confbind.config.settings import Settings


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the singleton settings instance.

    The result is cached for the lifetime of the process.
    Call `get_settings.cache_clear()` to reload configuration.
    """
    return Settings()


def reload_settings() -> Settings:
    """Clear the settings cache and reload configuration.

    Useful for testing. Resolvers already created keep the
    settings they were built with.
    """
    get_settings.cache_clear()
    return get_settings()


__all__ = ["get_settings", "reload_settings", "Settings"]
