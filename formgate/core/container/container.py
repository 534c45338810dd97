"""Dependency Injection Container.

The container is a simple immutable dataclass that holds the wired services.
It has no construction logic; that belongs in the factory.
"""

from dataclasses import dataclass
from typing import Optional

from formgate.core.config import Settings
from formgate.core.protocols import EventBus
from formgate.domains.access.gate import FormAccessService
from formgate.domains.access.protocols import AccessDeciderProtocol
from formgate.domains.groups.protocols import GroupExpanderProtocol


@dataclass(frozen=True)
class Container:
    """Immutable container holding the wired access gate.

    Usage:
        # Production: build once per process and pass it explicitly
        container = create_container(settings, membership_provider=..., ...)
        decision = await container.decider.decide(policy, visitor)

        # Testing: construct directly with fakes
        test_container = Container(settings=Settings(), expander=..., ...)
    """

    settings: Settings
    expander: GroupExpanderProtocol
    decider: AccessDeciderProtocol
    access_service: FormAccessService
    event_bus: Optional[EventBus] = None
