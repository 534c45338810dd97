"""Unit tests for AccessDecider.

Uses fakes for the membership and hierarchy providers.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from formgate.core.config import Settings
from formgate.core.config.settings import (
    DEFAULT_NOT_ALLOWED_MESSAGE,
    DEFAULT_NOT_LOGGED_IN_MESSAGE,
)
from formgate.domains.access.decider import AccessDecider
from formgate.domains.access.types import (
    AccessPolicy,
    Decision,
    DecisionKind,
    DecisionReason,
    Visitor,
)
from formgate.domains.groups.expander import GroupExpander
from formgate.domains.groups.fakes.membership_provider import FakeMembershipProvider

VISITORS = [Visitor.anonymous(), Visitor(user_id=42), Visitor(user_id=99)]


# ---------------------------------------------------------------------------
# Opt-in restriction guard
# ---------------------------------------------------------------------------


class TestUnrestricted:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("visitor", VISITORS)
    async def test_unrestricted_policy_allows_everyone(self, make_decider, members, visitor):
        decider = make_decider()
        policy = AccessPolicy(restricted=False, allowed_groups={5}, hide_feedback_on_deny=True)

        decision = await decider.decide(policy, visitor)

        assert decision.kind == DecisionKind.ALLOW
        assert decision.reason == DecisionReason.UNRESTRICTED
        assert members.calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("visitor", VISITORS)
    async def test_restricted_without_groups_allows_everyone(
        self, make_decider, members, hierarchy, visitor
    ):
        decider = make_decider()
        policy = AccessPolicy(restricted=True, allowed_groups=set(), require_login=False)

        decision = await decider.decide(policy, visitor)

        assert decision.kind == DecisionKind.ALLOW
        assert decision.reason == DecisionReason.NO_GROUPS
        assert members.calls == []
        assert hierarchy.calls == []

    @pytest.mark.asyncio
    async def test_only_invalid_groups_counts_as_no_groups(self, make_decider):
        decider = make_decider()
        policy = AccessPolicy(restricted=True, allowed_groups=["abc", -1, 0])

        decision = await decider.decide(policy, Visitor.anonymous())

        assert decision.is_allowed
        assert decision.reason == DecisionReason.NO_GROUPS


# ---------------------------------------------------------------------------
# Anonymous visitors
# ---------------------------------------------------------------------------


class TestAnonymous:
    @pytest.mark.asyncio
    async def test_default_not_logged_in_message(self, make_decider, restricted_policy):
        decision = await make_decider().decide(restricted_policy, Visitor.anonymous())

        assert decision == Decision.deny_message(
            DEFAULT_NOT_LOGGED_IN_MESSAGE, DecisionReason.NOT_LOGGED_IN
        )

    @pytest.mark.asyncio
    async def test_custom_login_message(self, make_decider):
        policy = AccessPolicy(
            restricted=True,
            allowed_groups={5},
            require_login_message="Members only, please sign in.",
        )

        decision = await make_decider().decide(policy, Visitor.anonymous())

        assert decision.kind == DecisionKind.DENY_MESSAGE
        assert decision.message == "Members only, please sign in."

    @pytest.mark.asyncio
    async def test_blank_custom_message_falls_back_to_default(self, make_decider):
        policy = AccessPolicy(restricted=True, allowed_groups={5}, require_login_message="   ")

        decision = await make_decider().decide(policy, Visitor.anonymous())

        assert decision.message == DEFAULT_NOT_LOGGED_IN_MESSAGE

    @pytest.mark.asyncio
    async def test_require_login_defers(self, make_decider, members):
        policy = AccessPolicy(restricted=True, allowed_groups={5}, require_login=True)

        decision = await make_decider().decide(policy, Visitor.anonymous())

        assert decision.kind == DecisionKind.ALLOW
        assert decision.reason == DecisionReason.LOGIN_DEFERRED
        assert members.calls == []

    @pytest.mark.asyncio
    async def test_anonymous_denial_ignores_hide_feedback(self, make_decider):
        policy = AccessPolicy(restricted=True, allowed_groups={5}, hide_feedback_on_deny=True)

        decision = await make_decider().decide(policy, Visitor.anonymous())

        assert decision.kind == DecisionKind.DENY_MESSAGE

    @pytest.mark.asyncio
    async def test_malformed_user_id_is_anonymous(self, make_decider, restricted_policy):
        decision = await make_decider().decide(restricted_policy, Visitor(user_id="not-a-user"))

        assert decision.reason == DecisionReason.NOT_LOGGED_IN

    @pytest.mark.asyncio
    async def test_configured_default_message(self, make_decider, restricted_policy):
        settings = Settings(NOT_LOGGED_IN_MESSAGE="Log in first.")

        decision = await make_decider(settings=settings).decide(
            restricted_policy, Visitor.anonymous()
        )

        assert decision.message == "Log in first."


# ---------------------------------------------------------------------------
# Identified visitors
# ---------------------------------------------------------------------------


class TestIdentified:
    @pytest.mark.asyncio
    async def test_member_of_child_group_is_allowed(
        self, make_decider, members, restricted_policy
    ):
        decision = await make_decider().decide(restricted_policy, Visitor(user_id=42))

        assert decision == Decision.allow(DecisionReason.MEMBER)
        assert members.calls == [(42, frozenset({5, 6, 7}))]

    @pytest.mark.asyncio
    async def test_member_of_configured_group_is_allowed(self, make_decider, members):
        members.join(7, 5)

        decision = await make_decider().decide(
            AccessPolicy(restricted=True, allowed_groups={5}), Visitor(user_id=7)
        )

        assert decision.is_allowed

    @pytest.mark.asyncio
    async def test_non_member_gets_not_allowed_message(self, make_decider, restricted_policy):
        decision = await make_decider().decide(restricted_policy, Visitor(user_id=99))

        assert decision.kind == DecisionKind.DENY_MESSAGE
        assert decision.message == "Sorry. You are not allowed to view this form."
        assert decision.message == DEFAULT_NOT_ALLOWED_MESSAGE

    @pytest.mark.asyncio
    async def test_non_member_with_hidden_feedback_is_silent(self, make_decider):
        policy = AccessPolicy(restricted=True, allowed_groups={5}, hide_feedback_on_deny=True)

        decision = await make_decider().decide(policy, Visitor(user_id=99))

        assert decision == Decision.deny_silent(DecisionReason.NOT_MEMBER)

    @pytest.mark.asyncio
    async def test_feedback_suppression_disabled_always_shows_message(self, make_decider):
        policy = AccessPolicy(restricted=True, allowed_groups={5}, hide_feedback_on_deny=True)
        settings = Settings(FEEDBACK_SUPPRESSION_ENABLED=False)

        decision = await make_decider(settings=settings).decide(policy, Visitor(user_id=99))

        assert decision.kind == DecisionKind.DENY_MESSAGE

    @pytest.mark.asyncio
    async def test_require_login_does_not_affect_identified_visitors(self, make_decider):
        policy = AccessPolicy(restricted=True, allowed_groups={5}, require_login=True)

        decision = await make_decider().decide(policy, Visitor(user_id=99))

        assert decision.reason == DecisionReason.NOT_MEMBER

    @pytest.mark.asyncio
    async def test_without_hierarchy_child_membership_is_not_enough(
        self, make_decider, restricted_policy
    ):
        decider = make_decider(hierarchy=None)

        decision = await decider.decide(restricted_policy, Visitor(user_id=42))

        assert decision.is_denied

    @pytest.mark.asyncio
    async def test_membership_resolved_fresh_per_call(self, make_decider, members):
        decider = make_decider()
        policy = AccessPolicy(restricted=True, allowed_groups={8})
        visitor = Visitor(user_id=42)

        assert (await decider.decide(policy, visitor)).is_denied
        members.join(42, 8)
        assert (await decider.decide(policy, visitor)).is_allowed


# ---------------------------------------------------------------------------
# Fail closed
# ---------------------------------------------------------------------------


class TestProviderFailures:
    @pytest.mark.asyncio
    async def test_membership_error_denies(self, make_decider, members, restricted_policy):
        members.join(42, 5)
        members.fail_with(ConnectionError("groups API down"))

        decision = await make_decider().decide(restricted_policy, Visitor(user_id=42))

        assert decision.kind == DecisionKind.DENY_MESSAGE
        assert decision.reason == DecisionReason.NOT_MEMBER

    @pytest.mark.asyncio
    async def test_membership_error_with_hidden_feedback_is_silent(self, make_decider, members):
        members.fail_with(RuntimeError("boom"))
        policy = AccessPolicy(restricted=True, allowed_groups={5}, hide_feedback_on_deny=True)

        decision = await make_decider().decide(policy, Visitor(user_id=42))

        assert decision.kind == DecisionKind.DENY_SILENT

    @pytest.mark.asyncio
    @pytest.mark.parametrize("malformed", [1, "yes", None, ["7"]])
    async def test_non_boolean_membership_result_denies(
        self, make_decider, restricted_policy, malformed
    ):
        provider = AsyncMock()
        provider.is_member.return_value = malformed

        decision = await make_decider(membership_provider=provider).decide(
            restricted_policy, Visitor(user_id=42)
        )

        assert decision.is_denied

    @pytest.mark.asyncio
    async def test_membership_timeout_denies(self, make_decider, restricted_policy):
        class _SlowMembers:
            async def is_member(self, user_id, group_ids):
                await asyncio.sleep(5)
                return True

        settings = Settings(PROVIDER_TIMEOUT_SECONDS=0.01)
        decider = make_decider(membership_provider=_SlowMembers(), settings=settings)

        decision = await decider.decide(restricted_policy, Visitor(user_id=42))

        assert decision.is_denied

    @pytest.mark.asyncio
    async def test_membership_raising_before_await_denies(self, make_decider, restricted_policy):
        class _UnreachableMembers:
            def is_member(self, user_id, group_ids):
                raise ConnectionError("groups API down")

        decision = await make_decider(membership_provider=_UnreachableMembers()).decide(
            restricted_policy, Visitor(user_id=42)
        )

        assert decision.kind == DecisionKind.DENY_MESSAGE
        assert decision.reason == DecisionReason.NOT_MEMBER

    @pytest.mark.asyncio
    async def test_hierarchy_raising_before_await_still_checks_configured_groups(
        self, make_decider, members, restricted_policy
    ):
        class _UnreachableHierarchy:
            def children_of(self, group_id):
                raise ConnectionError("hierarchy down")

        members.join(42, 5)

        decision = await make_decider(hierarchy=_UnreachableHierarchy()).decide(
            restricted_policy, Visitor(user_id=42)
        )

        assert decision.is_allowed
        assert members.calls == [(42, frozenset({5}))]

    @pytest.mark.asyncio
    async def test_hierarchy_error_still_checks_configured_groups(
        self, make_decider, hierarchy, members
    ):
        hierarchy.fail_on(5)
        members.join(42, 5)

        decision = await make_decider().decide(
            AccessPolicy(restricted=True, allowed_groups={5}), Visitor(user_id=42)
        )

        assert decision.is_allowed
        assert members.calls == [(42, frozenset({5}))]

    @pytest.mark.asyncio
    async def test_hierarchy_error_never_allows_non_member(
        self, make_decider, hierarchy, restricted_policy
    ):
        hierarchy.fail_on(5)

        decision = await make_decider().decide(restricted_policy, Visitor(user_id=42))

        assert decision.is_denied

    @pytest.mark.asyncio
    async def test_raising_expander_falls_back_to_configured_groups(
        self, make_decider, members, restricted_policy
    ):
        expander = AsyncMock()
        expander.expand.side_effect = RuntimeError("broken expander")
        members.join(42, 5)

        decision = await make_decider(expander=expander).decide(
            restricted_policy, Visitor(user_id=42)
        )

        assert decision.is_allowed


# ---------------------------------------------------------------------------
# Override hooks
# ---------------------------------------------------------------------------


class TestOverrides:
    @pytest.mark.asyncio
    async def test_hook_receives_result_groups_and_visitor(self, make_decider, restricted_policy):
        seen = []

        async def _record(result, groups, visitor):
            seen.append((result, groups, visitor))
            return result

        await make_decider(overrides=[_record]).decide(restricted_policy, Visitor(user_id=42))

        assert seen == [(True, frozenset({5, 6, 7}), Visitor(user_id=42))]

    @pytest.mark.asyncio
    async def test_hook_can_grant(self, make_decider, restricted_policy):
        async def _grant_staff(result, groups, visitor):
            return result or visitor.user_id == 99

        decision = await make_decider(overrides=[_grant_staff]).decide(
            restricted_policy, Visitor(user_id=99)
        )

        assert decision == Decision.allow(DecisionReason.MEMBER)

    @pytest.mark.asyncio
    async def test_hook_can_veto(self, make_decider, restricted_policy):
        async def _veto(result, groups, visitor):
            return False

        decision = await make_decider(overrides=[_veto]).decide(
            restricted_policy, Visitor(user_id=42)
        )

        assert decision.is_denied

    @pytest.mark.asyncio
    async def test_hooks_chain_in_order(self, make_decider, restricted_policy):
        async def _veto(result, groups, visitor):
            return False

        async def _grant(result, groups, visitor):
            return True

        decider = make_decider(overrides=[_veto, _grant])
        assert (await decider.decide(restricted_policy, Visitor(user_id=99))).is_allowed

        decider = make_decider(overrides=[_grant, _veto])
        assert (await decider.decide(restricted_policy, Visitor(user_id=42))).is_denied

    @pytest.mark.asyncio
    async def test_raising_hook_denies(self, make_decider, restricted_policy):
        async def _broken(result, groups, visitor):
            raise ValueError("hook bug")

        async def _grant(result, groups, visitor):
            return True

        decision = await make_decider(overrides=[_broken, _grant]).decide(
            restricted_policy, Visitor(user_id=42)
        )

        assert decision.is_denied

    @pytest.mark.asyncio
    async def test_hooks_not_called_for_anonymous(self, make_decider, restricted_policy):
        hook = AsyncMock(return_value=True)

        decision = await make_decider(overrides=[hook]).decide(
            restricted_policy, Visitor.anonymous()
        )

        assert decision.reason == DecisionReason.NOT_LOGGED_IN
        hook.assert_not_awaited()


# ---------------------------------------------------------------------------
# is_group_member
# ---------------------------------------------------------------------------


class TestIsGroupMember:
    @pytest.mark.asyncio
    async def test_expanded_membership(self, make_decider):
        assert await make_decider().is_group_member([5], 42) is True

    @pytest.mark.asyncio
    async def test_not_member(self, make_decider):
        assert await make_decider().is_group_member(["5"], "99") is False

    @pytest.mark.asyncio
    async def test_empty_groups_skip_provider(self, make_decider, members):
        assert await make_decider().is_group_member([], 42) is False
        assert await make_decider().is_group_member(["x", 0], 42) is False
        assert members.calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("user_id", [None, 0, -5, "guest"])
    async def test_missing_user_is_not_member(self, make_decider, members, user_id):
        assert await make_decider().is_group_member([5], user_id) is False
        assert members.calls == []

    @pytest.mark.asyncio
    async def test_provider_error_is_not_member(self):
        members = FakeMembershipProvider({42: {5}})
        members.fail_with(TimeoutError())
        decider = AccessDecider(GroupExpander(), members, Settings())

        assert await decider.is_group_member([5], 42) is False


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


class TestEvents:
    @pytest.mark.asyncio
    async def test_publishes_evaluated_event(
        self, make_decider, fake_event_bus, restricted_policy
    ):
        decider = make_decider(event_bus=fake_event_bus)

        await decider.decide(restricted_policy, Visitor(user_id=42), resource_id=3)

        event = fake_event_bus.assert_published("access.evaluated")
        assert event.user_id == 42
        assert event.resource_id == 3
        assert event.outcome == "allow"
        assert event.reason == "member"
        assert event.effective_groups == [5, 6, 7]

    @pytest.mark.asyncio
    async def test_no_bus_no_event(self, make_decider, restricted_policy):
        decision = await make_decider().decide(restricted_policy, Visitor(user_id=42))
        assert decision.is_allowed

    @pytest.mark.asyncio
    async def test_publish_failure_does_not_change_decision(self, make_decider, restricted_policy):
        bus = AsyncMock()
        bus.publish.side_effect = RuntimeError("bus down")

        decision = await make_decider(event_bus=bus).decide(
            restricted_policy, Visitor(user_id=99)
        )

        assert decision.kind == DecisionKind.DENY_MESSAGE
        bus.publish.assert_awaited_once()


# ---------------------------------------------------------------------------
# Concurrency
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_concurrent_decisions_are_independent(make_decider, restricted_policy):
    decider = make_decider()
    visitors = [Visitor(user_id=42), Visitor(user_id=99), Visitor.anonymous()] * 10

    decisions = await asyncio.gather(*(decider.decide(restricted_policy, v) for v in visitors))

    for visitor, decision in zip(visitors, decisions):
        if visitor.user_id == 42:
            assert decision.is_allowed
        elif visitor.user_id == 99:
            assert decision.reason == DecisionReason.NOT_MEMBER
        else:
            assert decision.reason == DecisionReason.NOT_LOGGED_IN
