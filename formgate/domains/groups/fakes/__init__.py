"""Fake implementations for groups domain testing."""

from formgate.domains.groups.fakes.hierarchy_provider import FakeHierarchyProvider
from formgate.domains.groups.fakes.membership_provider import FakeMembershipProvider

__all__ = ["FakeHierarchyProvider", "FakeMembershipProvider"]
