"""Decoding of stored form meta into an AccessPolicy.

Forms persist their restriction settings as flat meta entries written by the
settings screen: checkbox flags stored as 1/0 and the selected group ids as a
list. Missing keys fall back to the unrestricted default.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any, Optional

from formgate.domains.access.types import AccessPolicy

_CHECKED_STRINGS = frozenset({"1", "true", "on", "yes"})


class FormMetaKey(str, Enum):
    """Form meta keys holding the restriction settings."""

    RESTRICTED = "forBPUserGroups"
    ALLOWED_GROUPS = "selectedBPUserGroups"
    HIDE_FEEDBACK = "forBPUserGroupsHideFeedback"
    REQUIRE_LOGIN = "requireLogin"
    REQUIRE_LOGIN_MESSAGE = "requireLoginMessage"


def is_checked(value: Any) -> bool:
    """Interpret a stored checkbox value."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in _CHECKED_STRINGS
    return False


def policy_from_form_meta(meta: Optional[Mapping[str, Any]]) -> AccessPolicy:
    """Decode a form's stored meta into an AccessPolicy.

    Args:
        meta: The form's meta mapping; None or empty means unrestricted

    Returns:
        Normalised policy (invalid group ids dropped, blank message unset)
    """
    if not meta:
        return AccessPolicy()

    return AccessPolicy(
        restricted=is_checked(meta.get(FormMetaKey.RESTRICTED.value)),
        allowed_groups=meta.get(FormMetaKey.ALLOWED_GROUPS.value),
        require_login=is_checked(meta.get(FormMetaKey.REQUIRE_LOGIN.value)),
        require_login_message=meta.get(FormMetaKey.REQUIRE_LOGIN_MESSAGE.value),
        hide_feedback_on_deny=is_checked(meta.get(FormMetaKey.HIDE_FEEDBACK.value)),
    )
