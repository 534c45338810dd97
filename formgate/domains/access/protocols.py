"""Protocols for the access domain."""

from collections.abc import Mapping
from typing import Any, Awaitable, Callable, Iterable, Optional, Protocol, Union, runtime_checkable

from formgate.domains.access.types import AccessPolicy, Decision, Visitor

MembershipOverride = Callable[[bool, frozenset[int], Visitor], Awaitable[bool]]
"""Hook that may veto or grant membership.

Receives the membership result so far, the expanded allowed groups and the
visitor, and returns the (possibly overridden) result.
"""


@runtime_checkable
class ResourceStoreProtocol(Protocol):
    """Read access to the stored restriction settings of resources."""

    async def get_policy(
        self, resource_id: int
    ) -> Optional[Union[AccessPolicy, Mapping[str, Any]]]:
        """Return the resource's policy, or None when the resource is unknown.

        Stores may return the raw stored form meta instead of a decoded
        AccessPolicy; it is decoded on read.
        """
        ...


@runtime_checkable
class VisitorResolverProtocol(Protocol):
    """Identifies the visitor of the current request."""

    async def current_user(self) -> Optional[int]:
        """Return the current user id, or None for an anonymous visitor."""
        ...


@runtime_checkable
class DenialRendererProtocol(Protocol):
    """Turns a DENY_MESSAGE decision into response markup."""

    def render(self, decision: Decision) -> str:
        """Return the markup shown in place of the resource."""
        ...


@runtime_checkable
class AccessDeciderProtocol(Protocol):
    """Decides whether a visitor may see a resource."""

    async def decide(
        self, policy: AccessPolicy, visitor: Visitor, *, resource_id: Optional[int] = None
    ) -> Decision:
        """Evaluate ``policy`` for ``visitor``. Never raises."""
        ...

    async def is_group_member(self, group_ids: Iterable[Any], user_id: Any) -> bool:
        """Whether the user belongs to any of the groups or their descendants."""
        ...
