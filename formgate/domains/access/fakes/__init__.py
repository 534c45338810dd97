"""Fake implementations for access domain testing."""

from formgate.domains.access.fakes.resource_store import FakeResourceStore
from formgate.domains.access.fakes.visitor_resolver import FakeVisitorResolver

__all__ = ["FakeResourceStore", "FakeVisitorResolver"]
