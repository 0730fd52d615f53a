"""Type inference for sampled flat file values.

This module classifies single cell values and widens sequences of
classifications into one column type:
- infer_type: classify one value as integer, number, boolean, null or string
- merge_types: widen two types into their common type
- widen: fold one more sampled value into a column type
- infer_column_type: widen a whole sample
"""

import re
from typing import Iterable, Optional

INTEGER = 'integer'
NUMBER = 'number'
BOOLEAN = 'boolean'
NULL = 'null'
STRING = 'string'

TYPED_VALUES = (INTEGER, NUMBER, BOOLEAN, NULL, STRING)

# ASCII digits only. Leading zeros are reserved for codes and identifiers
# ("007" stays a string).
_INTEGER_PATTERN = re.compile(r'^[+-]?(?:0|[1-9]\d*)$', re.ASCII)
_NUMBER_PATTERN = re.compile(
    r'^[+-]?(?:(?:0|[1-9]\d*)(?:\.\d+)?|\.\d+)(?:[eE][+-]?\d+)?$', re.ASCII)
_BOOLEAN_VALUES = frozenset(['true', 'false'])


def infer_type(value: Optional[str]) -> str:
    """Classifies a single sampled value.

    Args:
        value: The raw cell text; None is treated as blank

    Returns:
        One of 'null', 'integer', 'number', 'boolean' or 'string'
    """
    if value is None:
        return NULL
    text = value.strip()
    if not text:
        return NULL
    if _INTEGER_PATTERN.match(text):
        return INTEGER
    if _NUMBER_PATTERN.match(text):
        return NUMBER
    if text.lower() in _BOOLEAN_VALUES:
        return BOOLEAN
    return STRING


def merge_types(type1: str, type2: str) -> str:
    """Widens two types into the narrowest type that covers both.

    null is neutral, integer and number widen to number, every other
    distinct pair widens to string. The operation is commutative and
    associative, so a sample can be folded in any order.
    """
    if type1 == type2:
        return type1
    if type1 == NULL:
        return type2
    if type2 == NULL:
        return type1
    if {type1, type2} == {INTEGER, NUMBER}:
        return NUMBER
    return STRING


def is_settled(column_type: str) -> bool:
    """True once no further value can widen the type."""
    return column_type == STRING


def widen(column_type: str, value: Optional[str]) -> str:
    """Widens a column type with one more sampled value."""
    return merge_types(column_type, infer_type(value))


def infer_column_type(values: Iterable[Optional[str]]) -> str:
    """Infers the type of a column from its sample values, in order.

    Stops reading values as soon as the type widens to string, since
    nothing can widen it further.
    """
    merged = NULL
    for value in values:
        merged = widen(merged, value)
        if is_settled(merged):
            break
    return merged
