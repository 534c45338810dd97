"""Access decider for membership-gated visibility decisions.

Restriction is opt-in: a policy must be marked restricted and name at least
one group before anything is denied. The empty-group short-circuit runs
before the anonymous-visitor branch on every call path, so a restricted
policy without groups always allows.

Provider faults never escape ``decide``. A failed membership lookup counts
as "not a member"; a failed hierarchy lookup only narrows the expansion.
"""

from typing import Any, Iterable, Optional, Sequence

from formgate.core.config import Settings
from formgate.core.events.access import AccessEvaluatedEvent
from formgate.core.exceptions import ProviderUnavailableError
from formgate.core.logging import ContextualLogger
from formgate.core.logging import logger as default_logger
from formgate.core.protocols.event_bus import EventBus
from formgate.core.provider_calls import call_provider
from formgate.domains.access.protocols import AccessDeciderProtocol, MembershipOverride
from formgate.domains.access.types import AccessPolicy, Decision, DecisionReason, Visitor
from formgate.domains.groups.protocols import GroupExpanderProtocol, MembershipProviderProtocol
from formgate.domains.groups.types import normalize_ids


class AccessDecider(AccessDeciderProtocol):
    """Decides ALLOW / DENY_MESSAGE / DENY_SILENT for a policy and visitor.

    Stateless across calls: membership is resolved fresh for every decision.
    """

    def __init__(
        self,
        expander: GroupExpanderProtocol,
        membership_provider: MembershipProviderProtocol,
        settings: Settings,
        *,
        overrides: Sequence[MembershipOverride] = (),
        event_bus: Optional[EventBus] = None,
        logger: Optional[ContextualLogger] = None,
    ) -> None:
        """Initialize with injected dependencies.

        Args:
            expander: Expands allowed groups to their descendants
            membership_provider: Answers "is user in any of these groups"
            settings: Denial messages, feature flags and provider timeout
            overrides: Hooks applied in order to the membership result
            event_bus: When set, an access.evaluated event is published per decision
            logger: Base logger; defaults to the package logger
        """
        self._expander = expander
        self._membership = membership_provider
        self._settings = settings
        self._overrides = tuple(overrides)
        self._event_bus = event_bus
        self._logger = logger or default_logger.with_context(component="access_decider")

    async def decide(
        self, policy: AccessPolicy, visitor: Visitor, *, resource_id: Optional[int] = None
    ) -> Decision:
        """Evaluate ``policy`` for ``visitor``.

        Steps:
        1. Unrestricted policy or no allowed groups -> ALLOW
        2. Expand allowed groups through the hierarchy
        3. Anonymous visitor -> defer to the resource's login requirement,
           otherwise deny with the not-logged-in message
        4. Identified visitor -> membership lookup (any group suffices),
           then override hooks; deny with feedback unless it is suppressed
        """
        log = self._logger.with_context(user_id=visitor.user_id, resource_id=resource_id)
        decision, effective_groups = await self._evaluate(policy, visitor, log)

        log.debug(f"[AccessDecider] {decision.kind.value} ({decision.reason.value})")
        await self._publish(decision, visitor, effective_groups, resource_id, log)
        return decision

    async def is_group_member(self, group_ids: Iterable[Any], user_id: Any) -> bool:
        """Whether ``user_id`` belongs to any of ``group_ids`` or their descendants.

        Returns False without querying when no valid groups or no valid user
        is given. Override hooks are applied to the provider's answer.
        """
        groups = normalize_ids(group_ids)
        visitor = Visitor(user_id=user_id)
        if not groups or visitor.is_anonymous:
            return False

        log = self._logger.with_context(user_id=visitor.user_id)
        effective_groups = await self._expand(groups, log)
        return await self._resolve_membership(visitor, effective_groups, log)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _evaluate(
        self, policy: AccessPolicy, visitor: Visitor, log: ContextualLogger
    ) -> tuple[Decision, frozenset[int]]:
        if not policy.restricted:
            return Decision.allow(DecisionReason.UNRESTRICTED), frozenset()
        if not policy.allowed_groups:
            return Decision.allow(DecisionReason.NO_GROUPS), frozenset()

        effective_groups = await self._expand(policy.allowed_groups, log)

        if visitor.is_anonymous:
            if policy.require_login:
                return Decision.allow(DecisionReason.LOGIN_DEFERRED), effective_groups
            message = policy.require_login_message or self._settings.NOT_LOGGED_IN_MESSAGE
            return (
                Decision.deny_message(message, DecisionReason.NOT_LOGGED_IN),
                effective_groups,
            )

        if await self._resolve_membership(visitor, effective_groups, log):
            return Decision.allow(DecisionReason.MEMBER), effective_groups

        if policy.hide_feedback_on_deny and self._settings.FEEDBACK_SUPPRESSION_ENABLED:
            return Decision.deny_silent(DecisionReason.NOT_MEMBER), effective_groups
        return (
            Decision.deny_message(self._settings.NOT_ALLOWED_MESSAGE, DecisionReason.NOT_MEMBER),
            effective_groups,
        )

    async def _expand(self, groups: frozenset[int], log: ContextualLogger) -> frozenset[int]:
        try:
            return frozenset(await self._expander.expand(groups)) | groups
        except Exception as e:
            # Expansion is best-effort; the configured groups still apply.
            log.warning(f"[AccessDecider] Group expansion failed, using configured groups: {e}")
            return groups

    async def _resolve_membership(
        self, visitor: Visitor, effective_groups: frozenset[int], log: ContextualLogger
    ) -> bool:
        try:
            result = await call_provider(
                lambda: self._membership.is_member(visitor.user_id, effective_groups),
                provider="membership",
                timeout=self._settings.PROVIDER_TIMEOUT_SECONDS,
            )
        except ProviderUnavailableError as e:
            log.warning(f"[AccessDecider] Membership lookup failed, denying: {e.message}")
            result = False
        else:
            if not isinstance(result, bool):
                log.warning(
                    f"[AccessDecider] Malformed membership result {result!r}, treating as False"
                )
                result = False

        for hook in self._overrides:
            try:
                result = bool(await hook(result, effective_groups, visitor))
            except Exception as e:
                log.error(f"[AccessDecider] Membership override failed, denying: {e}", exc_info=e)
                return False
        return result

    async def _publish(
        self,
        decision: Decision,
        visitor: Visitor,
        effective_groups: frozenset[int],
        resource_id: Optional[int],
        log: ContextualLogger,
    ) -> None:
        if self._event_bus is None:
            return
        event = AccessEvaluatedEvent.evaluated(
            user_id=visitor.user_id,
            resource_id=resource_id,
            outcome=decision.kind.value,
            reason=decision.reason.value,
            effective_groups=effective_groups,
        )
        try:
            await self._event_bus.publish(event)
        except Exception as e:
            log.error(f"[AccessDecider] Failed to publish {event.event_type.value}: {e}")
