"""Fake resource store for testing."""

from collections.abc import Mapping
from typing import Any, Optional, Union

from formgate.domains.access.protocols import ResourceStoreProtocol
from formgate.domains.access.types import AccessPolicy

StoredPolicy = Union[AccessPolicy, Mapping[str, Any]]


class FakeResourceStore(ResourceStoreProtocol):
    """In-memory resource id -> policy map.

    Seed either decoded policies or raw form meta:
        store = FakeResourceStore()
        store.seed(1, AccessPolicy(restricted=True, allowed_groups={5}))
        store.seed(2, {"forBPUserGroups": 1, "selectedBPUserGroups": ["5"]})
    """

    def __init__(self) -> None:
        """Initialize with an empty store."""
        self._policies: dict[int, StoredPolicy] = {}
        self._error: Optional[Exception] = None
        self.calls: list[int] = []

    def seed(self, resource_id: int, policy: StoredPolicy) -> None:
        """Store a policy for a resource."""
        self._policies[resource_id] = policy

    def fail_with(self, error: Exception) -> None:
        """Make every subsequent lookup raise ``error``."""
        self._error = error

    async def get_policy(self, resource_id: int) -> Optional[StoredPolicy]:
        """Return the seeded policy, or None for unknown resources."""
        self.calls.append(resource_id)
        if self._error is not None:
            raise self._error
        return self._policies.get(resource_id)
