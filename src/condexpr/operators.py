"""
Operator registry and semantics.

Every supported operator is registered exactly once in OPERATORS together
with its arity, precedence and implementation. The precedence table and the
set of recognised operator tokens are derived from that registry.

Null handling semantics:
- Arithmetic is strict: only numbers (and string + string) are accepted.
- Ordering comparisons with a null or undefined side are False.
- ``contains`` and ``hasLength`` treat a null or undefined collection as empty.
"""

import json
import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Mapping, Optional

from .errors import EvaluationError
from .values import (
    ExprValue,
    get_type_name,
    is_nullish,
    is_number,
    is_truthy,
    values_equal,
)

logger = logging.getLogger("condexpr.operators")


@dataclass(frozen=True)
class OperatorSpec:
    """A registered operator."""

    # Token text, e.g. "&&" or "contains"
    symbol: str
    # Number of operands: 1 for prefix operators, 2 otherwise
    arity: int
    # Higher binds tighter
    precedence: int
    # Called with (b,) for unary operators and (a, b) for binary ones
    apply: Callable[..., ExprValue]


# Parentheses are priced highest but never compete with operators.
PAREN_PRECEDENCE = 8

# Reserved: priced but not registered, so "^" is not an operator token.
RESERVED_PRECEDENCE: Dict[str, int] = {"^": 6}


# ============================================================
# Arithmetic
# ============================================================


def _require_numbers(symbol: str, verb: str, a: Any, b: Any) -> None:
    if not (is_number(a) and is_number(b)):
        raise EvaluationError(
            f"Cannot {verb} {get_type_name(a)} and {get_type_name(b)}",
            operator=symbol,
        )


def _overflow(symbol: str, verb: str) -> EvaluationError:
    return EvaluationError(f"Cannot {verb}: result out of range", operator=symbol)


def _add(a: Any, b: Any) -> ExprValue:
    if isinstance(a, str) and isinstance(b, str):
        return a + b
    _require_numbers("+", "add", a, b)
    try:
        return a + b
    except OverflowError:
        raise _overflow("+", "add") from None


def _subtract(a: Any, b: Any) -> ExprValue:
    _require_numbers("-", "subtract", a, b)
    try:
        return a - b
    except OverflowError:
        raise _overflow("-", "subtract") from None


def _multiply(a: Any, b: Any) -> ExprValue:
    _require_numbers("*", "multiply", a, b)
    try:
        return a * b
    except OverflowError:
        raise _overflow("*", "multiply") from None


def _divide(a: Any, b: Any) -> ExprValue:
    """True division. Division by zero gives inf, -inf or nan."""
    _require_numbers("/", "divide", a, b)
    if b == 0:
        if a == 0 or (isinstance(a, float) and math.isnan(a)):
            return math.nan
        return math.inf if (a > 0) == (math.copysign(1.0, b) > 0) else -math.inf
    try:
        return a / b
    except OverflowError:
        # Quotient of large ints beyond float range
        return math.inf if (a < 0) == (b < 0) else -math.inf


# ============================================================
# Comparison and logic
# ============================================================


def _ordering(symbol: str, a: Any, b: Any) -> bool:
    if is_nullish(a) or is_nullish(b):
        return False
    comparable = (is_number(a) and is_number(b)) or (
        isinstance(a, str) and isinstance(b, str)
    )
    if not comparable:
        raise EvaluationError(
            f"Cannot compare {get_type_name(a)} and {get_type_name(b)} with {symbol}",
            operator=symbol,
        )
    return a > b if symbol == ">" else a < b


def _greater(a: Any, b: Any) -> bool:
    return _ordering(">", a, b)


def _less(a: Any, b: Any) -> bool:
    return _ordering("<", a, b)


def _equal(a: Any, b: Any) -> bool:
    return values_equal(a, b)


def _not_equal(a: Any, b: Any) -> bool:
    return not values_equal(a, b)


def _and(a: Any, b: Any) -> ExprValue:
    # Operands arrive already evaluated; there is no short-circuit.
    return b if is_truthy(a) else a


def _or(a: Any, b: Any) -> ExprValue:
    return a if is_truthy(a) else b


def _not(b: Any) -> bool:
    return not is_truthy(b)


# ============================================================
# Collections
# ============================================================


def _elements(symbol: str, collection: Any) -> Iterable[Any]:
    """Iterates a collection operand. Null and undefined are empty."""
    if is_nullish(collection):
        return ()
    if isinstance(collection, Mapping):
        return collection.values()
    if isinstance(collection, (list, tuple, str)):
        return collection
    raise EvaluationError(
        f"{symbol} expects an array, object or string, got {get_type_name(collection)}",
        operator=symbol,
    )


def _parse_predicate(needle: Any) -> Optional[Mapping[str, Any]]:
    """Parses a JSON object predicate. Returns None when needle is not one."""
    if not isinstance(needle, str):
        return None
    try:
        parsed = json.loads(needle)
    except (ValueError, RecursionError):
        logger.debug("contains_predicate_not_json", extra={"needle": needle})
        return None
    if not isinstance(parsed, dict):
        logger.debug("contains_predicate_not_object", extra={"needle": needle})
        return None
    return parsed


def is_match(value: Any, source: Any) -> bool:
    """
    Partial deep match of value against source.

    Objects match when every key of source is present and matches; arrays
    match when each source element matches some element of value; anything
    else uses strict equality.
    """
    if isinstance(source, Mapping):
        if not isinstance(value, Mapping):
            return False
        return all(
            key in value and is_match(value[key], expected)
            for key, expected in source.items()
        )
    if isinstance(source, (list, tuple)):
        if not isinstance(value, (list, tuple)):
            return False
        return all(any(is_match(item, expected) for item in value) for expected in source)
    return values_equal(value, source)


def _contains(a: Any, b: Any) -> bool:
    elements = _elements("contains", a)

    predicate = _parse_predicate(b)
    if predicate is not None:
        if not predicate:
            # An empty predicate matches any element
            return any(True for _ in elements)
        return any(is_match(element, predicate) for element in elements)

    if isinstance(a, str):
        return isinstance(b, str) and b in a
    return any(values_equal(element, b) for element in elements)


def _has_length(a: Any, b: Any) -> bool:
    if is_nullish(a):
        length = 0
    elif isinstance(a, Mapping):
        # Objects only have a length through an explicit "length" key
        length = a.get("length")
    elif isinstance(a, (str, list, tuple)):
        length = len(a)
    else:
        return False
    return is_number(b) and is_number(length) and length == b


# ============================================================
# Registry
# ============================================================


def _build_registry(*specs: OperatorSpec) -> Dict[str, OperatorSpec]:
    registry: Dict[str, OperatorSpec] = {}
    for spec in specs:
        if spec.symbol in registry:
            raise ValueError(f"Operator registered twice: {spec.symbol}")
        if spec.arity not in (1, 2):
            raise ValueError(f"Unsupported arity {spec.arity} for {spec.symbol}")
        registry[spec.symbol] = spec
    return registry


OPERATORS: Dict[str, OperatorSpec] = _build_registry(
    OperatorSpec("+", 2, 4, _add),
    OperatorSpec("-", 2, 4, _subtract),
    OperatorSpec("*", 2, 5, _multiply),
    OperatorSpec("/", 2, 5, _divide),
    OperatorSpec("==", 2, 2, _equal),
    OperatorSpec("!=", 2, 2, _not_equal),
    OperatorSpec("&&", 2, 1, _and),
    OperatorSpec("||", 2, 1, _or),
    OperatorSpec(">", 2, 3, _greater),
    OperatorSpec("<", 2, 3, _less),
    OperatorSpec("contains", 2, 3, _contains),
    OperatorSpec("hasLength", 2, 3, _has_length),
    OperatorSpec("!", 1, 7, _not),
)

PRECEDENCE: Dict[str, int] = {
    "(": PAREN_PRECEDENCE,
    ")": PAREN_PRECEDENCE,
    **RESERVED_PRECEDENCE,
    **{symbol: spec.precedence for symbol, spec in OPERATORS.items()},
}


def is_operator(text: str) -> bool:
    """Checks if a token text is a registered operator."""
    return text in OPERATORS


def has_precedence(current: str, stack_top: str) -> bool:
    """
    Returns True if the operator on top of the stack should be applied
    before pushing the current operator.

    Parentheses on the stack act as barriers and never win.
    """
    if stack_top in ("(", ")"):
        return False
    return PRECEDENCE[stack_top] >= PRECEDENCE[current]


def apply_operator(symbol: str, *operands: ExprValue) -> ExprValue:
    """
    Applies a registered operator to its operands.

    Binary operators take (a, b) where b is the right-hand side.
    """
    spec = OPERATORS[symbol]
    if len(operands) != spec.arity:
        raise EvaluationError(
            f"Operator '{symbol}' expects {spec.arity} operand(s), got {len(operands)}",
            operator=symbol,
        )
    return spec.apply(*operands)
