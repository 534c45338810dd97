"""Event bus adapter.

Implements the EventBus protocol with in-memory fan-out to subscribers.
"""

from formgate.adapters.event_bus.fake import FakeEventBus
from formgate.adapters.event_bus.in_memory import InMemoryEventBus

__all__ = ["InMemoryEventBus", "FakeEventBus"]
