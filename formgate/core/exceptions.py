"""Shared exceptions module."""

from typing import Any, Optional


class FormGateException(Exception):
    """Base exception for formgate."""

    pass


class ConfigurationError(FormGateException):
    """Exception raised when settings hold an invalid value."""

    def __init__(self, message: Optional[str] = "Invalid configuration"):
        """Create a new ConfigurationError instance.

        Args:
        ----
            message (str, optional): The error message. Has default message.

        """
        self.message = message
        super().__init__(self.message)


class ProviderUnavailableError(FormGateException):
    """Exception raised when an external provider call fails or times out."""

    def __init__(self, provider: str, message: Optional[str] = "Provider call failed"):
        """Create a new ProviderUnavailableError instance.

        Args:
        ----
            provider (str): Name of the collaborator that failed.
            message (str, optional): The error message. Has default message.

        """
        self.provider = provider
        self.message = message
        super().__init__(f"{provider}: {message}")


class InvalidIdentifierError(FormGateException):
    """Exception raised for a group or user id that is not a positive integer."""

    def __init__(self, value: Any):
        """Create a new InvalidIdentifierError instance.

        Args:
        ----
            value (Any): The rejected identifier.

        """
        self.value = value
        super().__init__(f"Invalid identifier: {value!r}")
