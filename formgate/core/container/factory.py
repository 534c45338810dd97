"""Container Factory.

All construction logic lives here. The factory reads settings and wires the
host's collaborators into the decision services.
"""

from typing import Optional, Sequence

from formgate.adapters.event_bus.in_memory import InMemoryEventBus
from formgate.core.config import Settings
from formgate.core.container.container import Container
from formgate.core.logging import logger
from formgate.core.protocols.event_bus import EventBus
from formgate.domains.access.decider import AccessDecider
from formgate.domains.access.gate import FormAccessService
from formgate.domains.access.protocols import (
    DenialRendererProtocol,
    MembershipOverride,
    ResourceStoreProtocol,
    VisitorResolverProtocol,
)
from formgate.domains.groups.expander import GroupExpander
from formgate.domains.groups.protocols import (
    HierarchyProviderProtocol,
    MembershipProviderProtocol,
)


def create_container(
    settings: Settings,
    *,
    membership_provider: MembershipProviderProtocol,
    resource_store: ResourceStoreProtocol,
    visitor_resolver: VisitorResolverProtocol,
    hierarchy_provider: Optional[HierarchyProviderProtocol] = None,
    overrides: Sequence[MembershipOverride] = (),
    renderer: Optional[DenialRendererProtocol] = None,
    event_bus: Optional[EventBus] = None,
) -> Container:
    """Build the container from settings and host collaborators.

    Args:
        settings: Application settings
        membership_provider: External group membership lookup
        resource_store: Stored policies per resource
        visitor_resolver: Current-visitor lookup
        hierarchy_provider: Optional group hierarchy; ignored when
            GROUP_HIERARCHY_ENABLED is off
        overrides: Membership override hooks, applied in order
        renderer: Denial markup renderer; defaults to a paragraph
        event_bus: Bus for decision events; an in-memory bus is created
            when PUBLISH_DECISION_EVENTS is on and none is given

    Returns:
        Fully constructed Container ready for use
    """
    hierarchy = hierarchy_provider if settings.GROUP_HIERARCHY_ENABLED else None
    if hierarchy_provider is not None and hierarchy is None:
        logger.info("[Container] Hierarchy provider given but GROUP_HIERARCHY_ENABLED is off")

    expander = GroupExpander(hierarchy, timeout=settings.PROVIDER_TIMEOUT_SECONDS)

    bus: Optional[EventBus] = None
    if settings.PUBLISH_DECISION_EVENTS:
        bus = event_bus or InMemoryEventBus()
    elif event_bus is not None:
        logger.info("[Container] Event bus given but PUBLISH_DECISION_EVENTS is off")

    decider = AccessDecider(
        expander,
        membership_provider,
        settings,
        overrides=overrides,
        event_bus=bus,
    )
    access_service = FormAccessService(
        decider,
        resource_store,
        visitor_resolver,
        settings,
        renderer=renderer,
    )

    return Container(
        settings=settings,
        expander=expander,
        decider=decider,
        access_service=access_service,
        event_bus=bus,
    )
