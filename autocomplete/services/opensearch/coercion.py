"""
Coercion of raw filter operands into ``terms`` values.

A Python ``bool`` is taken as the value it is, so ``False`` filters on false
instead of counting as an absent operand; only ``None`` and ``""`` add no
constraint.
"""

import logging
import re
from typing import Any, List, Optional

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _to_int(token: str) -> int:
    """Parse the leading integer of a token; anything unparseable becomes 0."""
    match = _LEADING_INT.match(token)
    if match is None:
        logger.debug(f"Non-numeric filter value {token!r} treated as 0")
        return 0
    return int(match.group(1))


def val_to_terms(value: Any, allow_zero: bool = False, field_type: Optional[str] = None) -> List[Any]:
    """
    Normalize a filter operand into the list embedded in a ``terms`` clause.

    Args:
        value: Raw operand, usually a query-string value like ``"1,2,3"``
        allow_zero: Keep zero values. Inclusion filters drop them so a bad
            parse cannot match every zero-valued row; exclusion filters keep
            them since an extra excluded 0 is harmless.
        field_type: Declared type of the target field, if known

    Returns:
        Typed values, empty when the field contributes no constraint
    """
    if value is None or value == "":
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    if isinstance(value, bool):
        return [value]

    is_boolean = field_type == "boolean"
    if value == "true" or (is_boolean and value in ("1", 1)):
        return [True]
    if value == "false" or (is_boolean and value in ("0", 0)):
        return [False]

    tokens = str(value).split(",")
    # trailing empty tokens are dropped, inner ones still parse as 0
    while tokens and tokens[-1] == "":
        tokens.pop()
    terms = [_to_int(token) for token in tokens]
    if allow_zero:
        return terms
    return [term for term in terms if term != 0]
