"""Event type enums: the vocabulary of the event bus.

Every domain event must use one of these enums for its event_type field.
"""

from enum import Enum


class AccessEventType(str, Enum):
    """Access decision event types."""

    EVALUATED = "access.evaluated"


# Union of all known event types.
EventType = AccessEventType
