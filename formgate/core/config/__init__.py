"""Configuration module for formgate.

Provides centralized configuration management with type-safe enums.

Usage:
    from formgate.core.config import settings

    if settings.GROUP_HIERARCHY_ENABLED:
        ...
"""

from formgate.core.config.enums import LogLevel
from formgate.core.config.settings import Settings

__all__ = [
    "LogLevel",
    "Settings",
    "settings",
]

# Singleton settings instance
settings = Settings()
