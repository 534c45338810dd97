"""Configuration enums for type-safe settings.

These enums inherit from str to keep env parsing and JSON serialization simple.
"""

from enum import Enum


class LogLevel(str, Enum):
    """Log levels accepted by LOG_LEVEL."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
