"""Access domain types.

AccessPolicy, Visitor and Decision are frozen Pydantic models. Host-supplied
identifiers are normalised on construction: malformed group ids are dropped
and a malformed user id makes the visitor anonymous.
"""

from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from formgate.core.exceptions import InvalidIdentifierError
from formgate.domains.groups.types import coerce_id, normalize_ids


def _as_id_collection(value: Any) -> Iterable[Any]:
    if value is None:
        return ()
    if isinstance(value, (str, bytes, int, float)):
        return (value,)
    if isinstance(value, Mapping):
        return value.values()
    if isinstance(value, Iterable):
        return value
    return ()


class AccessPolicy(BaseModel):
    """Stored restriction settings of a protected resource."""

    model_config = ConfigDict(frozen=True)

    restricted: bool = False
    allowed_groups: frozenset[int] = frozenset()
    require_login: bool = False
    require_login_message: Optional[str] = None
    hide_feedback_on_deny: bool = False

    @field_validator("allowed_groups", mode="before")
    @classmethod
    def normalize_groups(cls, v: Any) -> frozenset[int]:
        """Coerce group ids to positive ints, dropping invalid entries."""
        return normalize_ids(_as_id_collection(v))

    @field_validator("require_login_message", mode="before")
    @classmethod
    def blank_message_to_none(cls, v: Any) -> Optional[str]:
        """Treat missing, blank or non-string messages as unset."""
        if isinstance(v, str) and v.strip():
            return v
        return None


class Visitor(BaseModel):
    """The party asking to see a resource. ``user_id=None`` is anonymous."""

    model_config = ConfigDict(frozen=True)

    user_id: Optional[int] = None

    @field_validator("user_id", mode="before")
    @classmethod
    def normalize_user_id(cls, v: Any) -> Optional[int]:
        """Malformed or non-positive ids mean anonymous."""
        if v is None:
            return None
        try:
            return coerce_id(v)
        except InvalidIdentifierError:
            return None

    @property
    def is_anonymous(self) -> bool:
        """True when no user is identified."""
        return self.user_id is None

    @classmethod
    def anonymous(cls) -> "Visitor":
        """Build an anonymous visitor."""
        return cls()


class DecisionKind(str, Enum):
    """Outcome of an access decision."""

    ALLOW = "allow"
    DENY_MESSAGE = "deny_message"
    DENY_SILENT = "deny_silent"


class DecisionReason(str, Enum):
    """Why a decision was reached."""

    UNRESTRICTED = "unrestricted"
    NO_GROUPS = "no_groups"
    LOGIN_DEFERRED = "login_deferred"
    NOT_LOGGED_IN = "not_logged_in"
    MEMBER = "member"
    NOT_MEMBER = "not_member"
    POLICY_UNAVAILABLE = "policy_unavailable"


class Decision(BaseModel):
    """Transient result of evaluating a policy for a visitor."""

    model_config = ConfigDict(frozen=True)

    kind: DecisionKind
    reason: DecisionReason
    message: Optional[str] = None

    @model_validator(mode="after")
    def validate_message(self) -> "Decision":
        """Only DENY_MESSAGE decisions carry a message, and they always do."""
        if self.kind == DecisionKind.DENY_MESSAGE and not self.message:
            raise ValueError("deny_message decisions require a message")
        if self.kind != DecisionKind.DENY_MESSAGE and self.message is not None:
            raise ValueError(f"{self.kind.value} decisions carry no message")
        return self

    @classmethod
    def allow(cls, reason: DecisionReason = DecisionReason.UNRESTRICTED) -> "Decision":
        """Create an ALLOW decision."""
        return cls(kind=DecisionKind.ALLOW, reason=reason)

    @classmethod
    def deny_message(
        cls, message: str, reason: DecisionReason = DecisionReason.NOT_MEMBER
    ) -> "Decision":
        """Create a denial that carries feedback text."""
        return cls(kind=DecisionKind.DENY_MESSAGE, reason=reason, message=message)

    @classmethod
    def deny_silent(cls, reason: DecisionReason = DecisionReason.NOT_MEMBER) -> "Decision":
        """Create a denial without feedback."""
        return cls(kind=DecisionKind.DENY_SILENT, reason=reason)

    @property
    def is_allowed(self) -> bool:
        """True for ALLOW."""
        return self.kind == DecisionKind.ALLOW

    @property
    def is_denied(self) -> bool:
        """True for either denial kind."""
        return self.kind != DecisionKind.ALLOW
