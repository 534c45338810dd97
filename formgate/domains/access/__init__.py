"""Access domain: membership-gated visibility decisions.

AccessDecider evaluates an AccessPolicy for a Visitor. FormAccessService is
the resource-level entry point: it loads the stored policy, resolves the
current visitor and applies the decision to form markup.
"""

from formgate.domains.access.decider import AccessDecider
from formgate.domains.access.gate import FormAccessService, ParagraphDenialRenderer
from formgate.domains.access.policy import FormMetaKey, policy_from_form_meta
from formgate.domains.access.types import (
    AccessPolicy,
    Decision,
    DecisionKind,
    DecisionReason,
    Visitor,
)

__all__ = [
    "AccessDecider",
    "AccessPolicy",
    "Decision",
    "DecisionKind",
    "DecisionReason",
    "FormAccessService",
    "FormMetaKey",
    "ParagraphDenialRenderer",
    "Visitor",
    "policy_from_form_meta",
]
