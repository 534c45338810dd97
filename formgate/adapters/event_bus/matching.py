"""Event type matching shared by the event bus adapters."""

import fnmatch
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from formgate.core.protocols.event_bus import DomainEvent


def event_type_name(event: "DomainEvent") -> str:
    """Plain string name of an event's type, e.g. ``"access.evaluated"``."""
    return str(getattr(event.event_type, "value", event.event_type))


def matches(event: "DomainEvent", pattern: str) -> bool:
    """Case-sensitive glob match of the event type against a subscription pattern."""
    return fnmatch.fnmatchcase(event_type_name(event), pattern)
