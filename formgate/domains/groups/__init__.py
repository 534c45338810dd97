"""Groups domain: identifier normalisation and hierarchy expansion.

GroupExpander expands a set of allowed groups to include descendant groups
through an optional HierarchyProviderProtocol.
"""

from formgate.domains.groups.expander import GroupExpander
from formgate.domains.groups.types import GroupId, UserId, coerce_id, normalize_ids

__all__ = ["GroupExpander", "GroupId", "UserId", "coerce_id", "normalize_ids"]
