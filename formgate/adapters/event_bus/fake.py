"""Fake event bus for testing.

Records published events for assertions without calling real subscribers.
"""

from typing import TYPE_CHECKING

from formgate.adapters.event_bus.matching import event_type_name, matches

if TYPE_CHECKING:
    from formgate.core.protocols.event_bus import DomainEvent, EventHandler


class FakeEventBus:
    """Test implementation of EventBus.

    Usage:
        fake = FakeEventBus()
        decider = AccessDecider(..., event_bus=fake)
        await decider.decide(policy, visitor)

        event = fake.assert_published("access.evaluated")
        assert event.outcome == "allow"
    """

    def __init__(self, call_subscribers: bool = False) -> None:
        """Initialize the fake event bus.

        Args:
            call_subscribers: If True, actually call registered subscribers.
        """
        self.events: list["DomainEvent"] = []
        self._subscribers: list[tuple[str, "EventHandler"]] = []
        self._call_subscribers = call_subscribers

    def subscribe(self, event_pattern: str, handler: "EventHandler") -> None:
        """Register a handler (only called if call_subscribers=True)."""
        self._subscribers.append((event_pattern, handler))

    async def publish(self, event: "DomainEvent") -> None:
        """Record the event (and optionally call subscribers)."""
        self.events.append(event)

        if self._call_subscribers:
            for pattern, handler in self._subscribers:
                if matches(event, pattern):
                    await handler(event)

    # Test helpers

    def has_event(self, event_type: str) -> bool:
        """Check if an event of the given type was published."""
        return any(event_type_name(e) == event_type for e in self.events)

    def get_events(self, event_type: str) -> list["DomainEvent"]:
        """Get all events of the given type."""
        return [e for e in self.events if event_type_name(e) == event_type]

    def assert_published(self, event_type: str) -> "DomainEvent":
        """Assert that an event was published and return the first one."""
        matching = self.get_events(event_type)
        if not matching:
            published = [event_type_name(e) for e in self.events]
            raise AssertionError(
                f"Expected event '{event_type}' was not published. Published events: {published}"
            )
        return matching[0]

    def assert_not_published(self, event_type: str) -> None:
        """Assert that an event was NOT published."""
        if self.has_event(event_type):
            raise AssertionError(f"Event '{event_type}' was published but should not have been")
