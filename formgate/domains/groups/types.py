"""Group domain types and pure helpers.

Group and user identifiers are owned by the external group system; here they
are only validated. No IO, everything here is deterministic.
"""

from typing import Any, Iterable

from formgate.core.exceptions import InvalidIdentifierError

GroupId = int
UserId = int


def coerce_id(value: Any) -> int:
    """Coerce a host-supplied identifier to a positive int.

    Accepts ints, integral floats and digit strings (surrounding whitespace
    allowed). Booleans are rejected even though they are ints.

    Raises:
        InvalidIdentifierError: The value is not a positive integer.
    """
    if isinstance(value, bool):
        raise InvalidIdentifierError(value)
    if isinstance(value, int):
        result = value
    elif isinstance(value, float) and value.is_integer():
        result = int(value)
    elif isinstance(value, str) and value.strip().isdecimal():
        result = int(value.strip())
    else:
        raise InvalidIdentifierError(value)

    if result <= 0:
        raise InvalidIdentifierError(value)
    return result


def normalize_ids(values: Iterable[Any]) -> frozenset[int]:
    """Coerce every entry, silently dropping the invalid ones."""
    result: set[int] = set()
    for value in values:
        try:
            result.add(coerce_id(value))
        except InvalidIdentifierError:
            continue
    return frozenset(result)
