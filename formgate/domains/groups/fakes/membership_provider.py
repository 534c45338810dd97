"""Fake membership provider for testing."""

from typing import Iterable, Optional

from formgate.domains.groups.protocols import MembershipProviderProtocol


class FakeMembershipProvider(MembershipProviderProtocol):
    """In-memory user -> groups map.

    Usage:
        members = FakeMembershipProvider({42: {7}})
        assert await members.is_member(42, frozenset({6, 7}))
    """

    def __init__(self, memberships: Optional[dict[int, Iterable[int]]] = None) -> None:
        """Initialize with an optional user -> groups map."""
        self._memberships: dict[int, set[int]] = {
            user: set(groups) for user, groups in (memberships or {}).items()
        }
        self._error: Optional[Exception] = None
        self.calls: list[tuple[int, frozenset[int]]] = []

    def join(self, user_id: int, group_id: int) -> None:
        """Add ``user_id`` to ``group_id``."""
        self._memberships.setdefault(user_id, set()).add(group_id)

    def fail_with(self, error: Exception) -> None:
        """Make every subsequent lookup raise ``error``."""
        self._error = error

    async def is_member(self, user_id: int, group_ids: frozenset[int]) -> bool:
        """Return True iff the user belongs to any of the groups."""
        self.calls.append((user_id, frozenset(group_ids)))
        if self._error is not None:
            raise self._error
        return bool(self._memberships.get(user_id, set()) & set(group_ids))
