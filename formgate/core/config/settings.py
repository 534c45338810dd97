"""Application settings.

All defaults live here. Values are loaded from ``FORMGATE_``-prefixed
environment variables via Pydantic Settings.
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from formgate.core.config.enums import LogLevel
from formgate.core.exceptions import ConfigurationError

DEFAULT_NOT_LOGGED_IN_MESSAGE = "Sorry. You must be logged in to view this form."
DEFAULT_NOT_ALLOWED_MESSAGE = "Sorry. You are not allowed to view this form."


class Settings(BaseSettings):
    """Runtime settings for the access gate.

    Env vars use the ``FORMGATE_`` prefix:
        FORMGATE_GROUP_HIERARCHY_ENABLED=false
        FORMGATE_PROVIDER_TIMEOUT_SECONDS=2.5
    """

    model_config = SettingsConfigDict(
        env_prefix="FORMGATE_",
        case_sensitive=False,
        extra="ignore",
    )

    # Denial feedback
    NOT_LOGGED_IN_MESSAGE: str = Field(
        DEFAULT_NOT_LOGGED_IN_MESSAGE,
        description="Shown to anonymous visitors when the policy sets no custom message",
    )
    NOT_ALLOWED_MESSAGE: str = Field(
        DEFAULT_NOT_ALLOWED_MESSAGE,
        description="Shown to identified visitors outside every allowed group",
    )
    FEEDBACK_SUPPRESSION_ENABLED: bool = Field(
        True, description="Honour a policy's hide-feedback flag (silent denial)"
    )

    # Group resolution
    GROUP_HIERARCHY_ENABLED: bool = Field(
        True, description="Expand allowed groups through the hierarchy provider, when one is wired"
    )
    PROVIDER_TIMEOUT_SECONDS: Optional[float] = Field(
        None, description="Per-call timeout for provider lookups; unset leaves it to the provider"
    )

    # Observability
    PUBLISH_DECISION_EVENTS: bool = Field(
        False, description="Publish an access.evaluated event for every decision"
    )
    LOG_LEVEL: LogLevel = LogLevel.INFO
    LOG_JSON: bool = False

    @field_validator("PROVIDER_TIMEOUT_SECONDS")
    @classmethod
    def validate_timeout(cls, v: Optional[float]) -> Optional[float]:
        """Reject non-positive timeouts."""
        if v is not None and v <= 0:
            raise ConfigurationError(f"PROVIDER_TIMEOUT_SECONDS must be positive, got {v}")
        return v

    @field_validator("NOT_LOGGED_IN_MESSAGE", "NOT_ALLOWED_MESSAGE")
    @classmethod
    def validate_message(cls, v: str) -> str:
        """Denial messages may not be blank."""
        if not v or not v.strip():
            raise ConfigurationError("Denial messages must not be blank")
        return v
