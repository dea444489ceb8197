"""
Runtime value model for the expression engine.

Null handling semantics:
- None is the canonical null value.
- UNDEFINED is a separate sentinel produced by lookup misses and by the
  ``undefined`` literal. It is never equal to None.
- Missing paths resolve to UNDEFINED, never to an error.
"""

import math
import re
from typing import Any, List, Mapping, Optional, Sequence, Union

from .errors import LimitExceededError


class _Undefined:
    """Singleton type of the UNDEFINED value."""

    _instance: Optional["_Undefined"] = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "undefined"

    def __reduce__(self) -> str:
        return "UNDEFINED"


UNDEFINED = _Undefined()

# Runtime value types for the expression language.
ExprValue = Union[
    str,
    float,
    int,
    bool,
    None,
    _Undefined,
    Sequence["ExprValue"],
    Mapping[str, "ExprValue"],
]

# Splits "a.b[0].c" into ["a", "b", "0", "c"]
_PATH_SEGMENT_PATTERN = re.compile(r"[^.\[\]'\"]+")


def is_number(value: Any) -> bool:
    """Checks for int or float. Booleans are not numbers."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_nullish(value: Any) -> bool:
    """Checks for null or undefined."""
    return value is None or value is UNDEFINED


def is_truthy(value: Any) -> bool:
    """
    Truthiness as the expression language defines it.

    null, undefined, false, 0, NaN and the empty string are falsy.
    Everything else is truthy, including empty arrays and objects.
    """
    if is_nullish(value):
        return False
    if isinstance(value, bool):
        return value
    if is_number(value):
        return value != 0 and not (isinstance(value, float) and math.isnan(value))
    if isinstance(value, str):
        return value != ""
    return True


def get_type_name(value: Any) -> str:
    """Gets the type name of a value for error messages."""
    if value is UNDEFINED:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if is_number(value):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__


def values_equal(a: Any, b: Any) -> bool:
    """
    Strict equality: values of different kinds are never equal.

    int and float share the number kind. Arrays and objects compare deeply.
    """
    kind = get_type_name(a)
    if kind != get_type_name(b):
        return False

    if kind == "number":
        return a == b

    if a is b:
        return True

    if kind == "array":
        if len(a) != len(b):
            return False
        return all(values_equal(x, y) for x, y in zip(a, b))

    if kind == "object":
        if set(a.keys()) != set(b.keys()):
            return False
        return all(values_equal(a[key], b[key]) for key in a)

    return a == b


def split_path(path: str) -> List[str]:
    """Splits a dotted/bracketed path into its segments."""
    return _PATH_SEGMENT_PATTERN.findall(path)


def resolve_path(data: Any, path: str, max_depth: Optional[int] = None) -> ExprValue:
    """
    Resolves a dotted path such as ``a.b.c`` or ``items[0].name`` against data.

    A key equal to the whole path wins over a nested lookup. Array elements
    are addressed by integer segments and ``length`` yields the size of an
    array or string. Anything that cannot be resolved gives UNDEFINED.

    Raises:
        LimitExceededError: If the path has more than max_depth segments
    """
    if isinstance(data, Mapping) and path in data:
        return data[path]

    segments = split_path(path)
    if not segments:
        return UNDEFINED
    if max_depth is not None and len(segments) > max_depth:
        raise LimitExceededError("max_path_depth", max_depth, len(segments))

    current: Any = data
    for segment in segments:
        if isinstance(current, Mapping):
            if segment not in current:
                return UNDEFINED
            current = current[segment]
        elif isinstance(current, (list, tuple, str)):
            if segment == "length":
                current = len(current)
            elif segment.isascii() and segment.isdigit() and not isinstance(current, str):
                index = int(segment)
                if index >= len(current):
                    return UNDEFINED
                current = current[index]
            else:
                return UNDEFINED
        else:
            return UNDEFINED

    return current
