"""Fake hierarchy provider for testing."""

from typing import Iterable, Optional

from formgate.domains.groups.protocols import HierarchyProviderProtocol


class FakeHierarchyProvider(HierarchyProviderProtocol):
    """In-memory parent -> children map.

    Usage:
        hierarchy = FakeHierarchyProvider({5: {6, 7}})
        hierarchy.fail_on(6)

        children = await hierarchy.children_of(5)
        assert children == {6, 7}
    """

    def __init__(self, children: Optional[dict[int, Iterable[int]]] = None) -> None:
        """Initialize with an optional parent -> children map."""
        self._children: dict[int, set[int]] = {
            parent: set(kids) for parent, kids in (children or {}).items()
        }
        self._failing: set[int] = set()
        self.calls: list[int] = []

    def add_child(self, parent: int, child: int) -> None:
        """Register ``child`` as a direct child of ``parent``."""
        self._children.setdefault(parent, set()).add(child)

    def fail_on(self, group_id: int) -> None:
        """Make lookups for ``group_id`` raise."""
        self._failing.add(group_id)

    async def children_of(self, group_id: int) -> set[int]:
        """Return seeded children, or raise for groups marked as failing."""
        self.calls.append(group_id)
        if group_id in self._failing:
            raise ConnectionError(f"hierarchy lookup failed for group {group_id}")
        return set(self._children.get(group_id, set()))
