"""Base class for all domain events.

Enforces that every event is a validated, frozen Pydantic model with
the fields the EventBus protocol requires for routing and metadata.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from formgate.core.events.enums import EventType


class DomainEvent(BaseModel):
    """Base for all domain events.

    Subclasses narrow event_type to a domain-specific enum and add
    domain-specific fields.
    """

    model_config = ConfigDict(frozen=True)

    event_type: EventType
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
