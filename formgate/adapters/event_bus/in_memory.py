"""In-process event bus for decision events.

Hosts that want to audit access decisions without a broker subscribe
handlers here; the container creates one when PUBLISH_DECISION_EVENTS is on.
"""

import asyncio
import logging
from typing import TYPE_CHECKING

from formgate.adapters.event_bus.matching import event_type_name, matches

if TYPE_CHECKING:
    from formgate.core.protocols.event_bus import DomainEvent, EventHandler

logger = logging.getLogger(__name__)


class InMemoryEventBus:
    """Delivers each published event to every handler whose pattern matches.

    Usage:
        bus = InMemoryEventBus()
        bus.subscribe("access.*", audit_handler)
        await bus.publish(AccessEvaluatedEvent.evaluated(...))
    """

    def __init__(self) -> None:
        self._subscriptions: list[tuple[str, "EventHandler"]] = []

    def subscribe(self, event_pattern: str, handler: "EventHandler") -> None:
        """Add ``handler`` for event types matching the glob ``event_pattern``."""
        self._subscriptions.append((event_pattern, handler))
        logger.debug(f"[EventBus] Handler subscribed to '{event_pattern}'")

    async def publish(self, event: "DomainEvent") -> None:
        """Deliver ``event`` to the matching handlers.

        Handlers run concurrently. A failing handler is logged and never
        reaches the publisher, so an audit sink cannot change a decision.
        """
        handlers = [h for pattern, h in self._subscriptions if matches(event, pattern)]
        if not handlers:
            return

        outcomes = await asyncio.gather(*(h(event) for h in handlers), return_exceptions=True)
        for handler, outcome in zip(handlers, outcomes):
            if isinstance(outcome, Exception):
                name = getattr(handler, "__qualname__", repr(handler))
                logger.error(
                    f"[EventBus] Handler {name} failed on '{event_type_name(event)}': {outcome}",
                    exc_info=outcome,
                )
