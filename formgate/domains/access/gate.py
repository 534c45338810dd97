"""Form access service: the resource-level entry point for the host.

Loads a resource's policy from the resource store, resolves the current
visitor and asks the decider. ``filter_content`` applies the decision to
the form markup the host is about to send.
"""

from collections.abc import Mapping
from typing import Optional

from formgate.core.config import Settings
from formgate.core.exceptions import ProviderUnavailableError
from formgate.core.logging import ContextualLogger
from formgate.core.logging import logger as default_logger
from formgate.core.provider_calls import call_provider
from formgate.domains.access.policy import policy_from_form_meta
from formgate.domains.access.protocols import (
    AccessDeciderProtocol,
    DenialRendererProtocol,
    ResourceStoreProtocol,
    VisitorResolverProtocol,
)
from formgate.domains.access.types import (
    AccessPolicy,
    Decision,
    DecisionKind,
    DecisionReason,
    Visitor,
)


class ParagraphDenialRenderer(DenialRendererProtocol):
    """Renders the denial message as a single paragraph."""

    def render(self, decision: Decision) -> str:
        """Wrap the message in <p> tags."""
        if not decision.message:
            return ""
        return f"<p>{decision.message}</p>"


class FormAccessService:
    """Resolves and applies access decisions for stored resources."""

    def __init__(
        self,
        decider: AccessDeciderProtocol,
        resource_store: ResourceStoreProtocol,
        visitor_resolver: VisitorResolverProtocol,
        settings: Settings,
        *,
        renderer: Optional[DenialRendererProtocol] = None,
        logger: Optional[ContextualLogger] = None,
    ) -> None:
        """Initialize with injected dependencies."""
        self._decider = decider
        self._store = resource_store
        self._resolver = visitor_resolver
        self._settings = settings
        self._renderer = renderer or ParagraphDenialRenderer()
        self._logger = logger or default_logger.with_context(component="form_access")

    async def current_visitor(self) -> Visitor:
        """Resolve the current visitor; a failed lookup yields an anonymous visitor."""
        try:
            user_id = await call_provider(
                self._resolver.current_user,
                provider="visitor_resolver",
                timeout=self._settings.PROVIDER_TIMEOUT_SECONDS,
            )
        except ProviderUnavailableError as e:
            self._logger.warning(
                f"[FormAccess] Visitor lookup failed, using anonymous: {e.message}"
            )
            return Visitor.anonymous()
        return Visitor(user_id=user_id)

    async def decide_for_resource(
        self, resource_id: int, visitor: Optional[Visitor] = None
    ) -> Decision:
        """Decide access to a stored resource.

        A resource without stored settings is unrestricted. A resource store
        failure denies with the not-allowed message.
        """
        log = self._logger.with_context(resource_id=resource_id)
        try:
            stored = await call_provider(
                lambda: self._store.get_policy(resource_id),
                provider="resource_store",
                timeout=self._settings.PROVIDER_TIMEOUT_SECONDS,
            )
        except ProviderUnavailableError as e:
            log.warning(f"[FormAccess] Policy lookup failed, denying: {e.message}")
            return Decision.deny_message(
                self._settings.NOT_ALLOWED_MESSAGE, DecisionReason.POLICY_UNAVAILABLE
            )

        if stored is None:
            log.debug("[FormAccess] No stored policy, resource is unrestricted")
            return Decision.allow(DecisionReason.UNRESTRICTED)

        if isinstance(stored, AccessPolicy):
            policy = stored
        elif isinstance(stored, Mapping):
            policy = policy_from_form_meta(stored)
        else:
            log.warning(f"[FormAccess] Unreadable policy of type {type(stored).__name__}, denying")
            return Decision.deny_message(
                self._settings.NOT_ALLOWED_MESSAGE, DecisionReason.POLICY_UNAVAILABLE
            )

        if visitor is None:
            visitor = await self.current_visitor()
        return await self._decider.decide(policy, visitor, resource_id=resource_id)

    async def filter_content(
        self, resource_id: int, content: str, visitor: Optional[Visitor] = None
    ) -> str:
        """Return the markup to send in place of ``content``.

        Empty content is returned untouched. An allowed visitor gets the
        content, a silent denial gets an empty string, and a denial with
        feedback gets the renderer's markup.
        """
        if not content:
            return content

        decision = await self.decide_for_resource(resource_id, visitor)
        if decision.kind == DecisionKind.ALLOW:
            return content
        if decision.kind == DecisionKind.DENY_SILENT:
            return ""

        try:
            return self._renderer.render(decision)
        except Exception as e:
            self._logger.error(f"[FormAccess] Denial renderer failed, hiding form: {e}", exc_info=e)
            return ""
