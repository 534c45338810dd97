"""EventBus protocol for domain event fan-out.

The event bus decouples the decision engine from event consumers. Instead
of calling audit or analytics code explicitly, the engine publishes events
to the bus and subscribers handle them.

Usage:
    # Core code publishes
    await event_bus.publish(AccessEvaluatedEvent.evaluated(...))

    # Subscribers react (registered at startup)
    event_bus.subscribe("access.*", audit_handler)
"""

from datetime import datetime
from typing import Awaitable, Callable, Protocol, runtime_checkable


@runtime_checkable
class DomainEvent(Protocol):
    """Base protocol for all domain events.

    Concrete events are frozen models that carry domain-specific data.
    The bus only cares about these fields for routing and metadata.
    """

    @property
    def event_type(self) -> str:
        """Dot-separated event identifier (e.g., 'access.evaluated')."""
        ...

    @property
    def timestamp(self) -> datetime:
        """When the event occurred (UTC)."""
        ...


# Type alias for event handlers (async callables that receive a DomainEvent)
EventHandler = Callable[[DomainEvent], Awaitable[None]]


@runtime_checkable
class EventBus(Protocol):
    """Protocol for publishing domain events to multiple subscribers.

    The bus matches events to subscribers by glob pattern on event_type.
    Failures in one subscriber don't affect others.
    """

    async def publish(self, event: DomainEvent) -> None:
        """Publish an event to all matching subscribers."""
        ...

    def subscribe(self, event_pattern: str, handler: EventHandler) -> None:
        """Register a handler for events matching the pattern."""
        ...
