"""Group expander for hierarchical group restrictions.

A restriction stated in terms of a parent group also admits members of its
descendant groups. The expander computes that closure breadth-first through
a HierarchyProviderProtocol. Without a provider, expansion is the identity.
"""

import asyncio
from typing import Iterable, Optional

from formgate.core.exceptions import ProviderUnavailableError
from formgate.core.logging import ContextualLogger
from formgate.core.logging import logger as default_logger
from formgate.core.provider_calls import call_provider
from formgate.domains.groups.protocols import GroupExpanderProtocol, HierarchyProviderProtocol
from formgate.domains.groups.types import normalize_ids


class GroupExpander(GroupExpanderProtocol):
    """Expands allowed groups to include every descendant group.

    Each group is queried at most once, so cyclic hierarchy data terminates.
    A failed lookup counts as "no children" and never aborts the expansion.
    """

    def __init__(
        self,
        hierarchy_provider: Optional[HierarchyProviderProtocol] = None,
        *,
        timeout: Optional[float] = None,
        logger: Optional[ContextualLogger] = None,
    ) -> None:
        """Initialize with an optional hierarchy provider and lookup timeout."""
        self._hierarchy = hierarchy_provider
        self._timeout = timeout
        self._logger = logger or default_logger.with_context(component="group_expander")

    @property
    def hierarchical(self) -> bool:
        """Whether a hierarchy provider is wired."""
        return self._hierarchy is not None

    async def expand(self, seed_groups: Iterable[int]) -> frozenset[int]:
        """Return the seed groups plus all descendants.

        Steps:
        1. Query direct children of every group on the current level, concurrently
        2. Queue children that were not seen before as the next level
        3. Stop when a level discovers nothing new

        Args:
            seed_groups: Allowed group ids from the policy

        Returns:
            Superset of ``seed_groups`` closed under the child relation
        """
        all_groups = set(seed_groups)
        if self._hierarchy is None or not all_groups:
            return frozenset(all_groups)

        frontier = set(all_groups)
        while frontier:
            level = sorted(frontier)
            children_per_group = await asyncio.gather(*(self._children_of(g) for g in level))

            frontier = set()
            for children in children_per_group:
                for child in children:
                    if child not in all_groups:
                        all_groups.add(child)
                        frontier.add(child)

        if len(all_groups) > len(set(seed_groups)):
            self._logger.debug(
                f"[GroupExpander] Expanded {len(set(seed_groups))} groups to {len(all_groups)}"
            )
        return frozenset(all_groups)

    async def _children_of(self, group_id: int) -> frozenset[int]:
        try:
            children = await call_provider(
                lambda: self._hierarchy.children_of(group_id),
                provider="hierarchy",
                timeout=self._timeout,
            )
        except ProviderUnavailableError as e:
            self._logger.warning(
                f"[GroupExpander] Treating group {group_id} as childless: {e.message}"
            )
            return frozenset()

        if not children:
            return frozenset()
        try:
            return normalize_ids(children)
        except TypeError:
            self._logger.warning(
                f"[GroupExpander] Ignoring malformed children for group {group_id}: {children!r}"
            )
            return frozenset()
