"""Core protocols for dependency injection.

Domain-specific protocols (providers, stores, renderers) live in their
respective domains/ directories. This module keeps cross-cutting
infrastructure protocols only.
"""

from formgate.core.protocols.event_bus import DomainEvent, EventBus, EventHandler

__all__ = [
    "DomainEvent",
    "EventBus",
    "EventHandler",
]
