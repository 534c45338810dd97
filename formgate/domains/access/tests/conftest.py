"""Access domain test fixtures and helpers."""

import pytest

from formgate.domains.access.decider import AccessDecider
from formgate.domains.access.types import AccessPolicy
from formgate.domains.groups.expander import GroupExpander
from formgate.domains.groups.fakes.hierarchy_provider import FakeHierarchyProvider
from formgate.domains.groups.fakes.membership_provider import FakeMembershipProvider


@pytest.fixture
def hierarchy():
    """Group 5 has children 6 and 7."""
    return FakeHierarchyProvider({5: {6, 7}})


@pytest.fixture
def members():
    """User 42 is in group 7, user 99 only in group 8."""
    return FakeMembershipProvider({42: {7}, 99: {8}})


@pytest.fixture
def restricted_policy():
    return AccessPolicy(restricted=True, allowed_groups={5})


@pytest.fixture
def make_decider(hierarchy, members, test_settings):
    """Factory building an AccessDecider over the shared fakes."""

    def _make(**kwargs):
        hierarchy_provider = kwargs.pop("hierarchy", hierarchy)
        expander = kwargs.pop("expander", None) or GroupExpander(hierarchy_provider)
        membership = kwargs.pop("membership_provider", members)
        settings = kwargs.pop("settings", test_settings)
        return AccessDecider(expander, membership, settings, **kwargs)

    return _make
