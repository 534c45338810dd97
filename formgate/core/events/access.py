"""Access decision events.

Published after each decision when decision events are enabled, and
consumed by audit or analytics subscribers registered by the host.
"""

from typing import Optional

from formgate.core.events.base import DomainEvent
from formgate.core.events.enums import AccessEventType


class AccessEvaluatedEvent(DomainEvent):
    """Event published after an access decision was reached."""

    event_type: AccessEventType = AccessEventType.EVALUATED

    user_id: Optional[int] = None
    resource_id: Optional[int] = None
    outcome: str
    reason: str
    effective_groups: list[int] = []

    @classmethod
    def evaluated(
        cls,
        *,
        user_id: Optional[int],
        outcome: str,
        reason: str,
        effective_groups: frozenset[int] = frozenset(),
        resource_id: Optional[int] = None,
    ) -> "AccessEvaluatedEvent":
        """Create an EVALUATED event."""
        return cls(
            user_id=user_id,
            resource_id=resource_id,
            outcome=outcome,
            reason=reason,
            effective_groups=sorted(effective_groups),
        )
