"""Protocols for the groups domain.

Membership and hierarchy are owned by an external group system; these
protocols are the only contract the core relies on.
"""

from typing import Iterable, Protocol, runtime_checkable


@runtime_checkable
class MembershipProviderProtocol(Protocol):
    """Answers group membership questions for a user."""

    async def is_member(self, user_id: int, group_ids: frozenset[int]) -> bool:
        """Return True iff the user belongs to at least one of the groups.

        Must return False for an empty ``group_ids``.
        """
        ...


@runtime_checkable
class HierarchyProviderProtocol(Protocol):
    """Exposes the parent/child relation between groups."""

    async def children_of(self, group_id: int) -> Iterable[int]:
        """Return the direct children of a group (never grandchildren)."""
        ...


@runtime_checkable
class GroupExpanderProtocol(Protocol):
    """Expands a group set to include descendants."""

    async def expand(self, seed_groups: Iterable[int]) -> frozenset[int]:
        """Return the seed groups plus every reachable descendant."""
        ...
