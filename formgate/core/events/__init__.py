"""Domain events for the event bus."""

from formgate.core.events.access import AccessEvaluatedEvent
from formgate.core.events.base import DomainEvent
from formgate.core.events.enums import AccessEventType, EventType

__all__ = [
    "AccessEvaluatedEvent",
    "AccessEventType",
    "DomainEvent",
    "EventType",
]
