"""
Expression evaluator.

Evaluates a token sequence against a data context with the shunting-yard
algorithm: operands go on a value stack, operators on an operator stack,
and pending operators of equal or higher precedence are applied before a
new operator is pushed. No syntax tree is built.

Null handling semantics:
- Identifiers are dotted paths into the data context.
- Missing paths evaluate to UNDEFINED, never to an error.
- The data context is only read, never modified.
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

from .errors import EvaluationError, ExpressionError, ExpressionSyntaxError
from .limits import DEFAULT_EXPRESSION_LIMITS, ExpressionLimits
from .operators import OPERATORS, has_precedence
from .stack import Stack
from .tokenizer import Token, TokenType, tokenize
from .values import ExprValue, get_type_name, is_truthy, resolve_path

logger = logging.getLogger("condexpr.evaluator")


@dataclass
class EvaluationResult:
    """Result of expression evaluation."""

    value: ExprValue
    """The evaluated value."""

    success: bool
    """Whether evaluation succeeded."""

    error: Optional[str] = None
    """Error message if evaluation failed."""


class Evaluator:
    """Evaluates a token sequence and returns the result."""

    def __init__(
        self,
        data: Any,
        limits: Optional[ExpressionLimits] = None,
        source: Optional[str] = None,
    ):
        self._data = data
        self._limits = limits or DEFAULT_EXPRESSION_LIMITS
        self._source = source or ""

    def evaluate(self, tokens: Sequence[Token]) -> ExprValue:
        """Evaluates tokens and returns the single resulting value."""
        values: Stack[ExprValue] = Stack()
        ops: Stack[Token] = Stack()
        # Token indexes of parentheses without a partner so far
        unbalanced: List[int] = []

        for token in tokens:
            if token.type is TokenType.OPEN_PAREN:
                ops.push(token)
                unbalanced.append(token.index)

            elif token.type is TokenType.CLOSE_PAREN:
                while not ops.empty() and ops.peek().type is not TokenType.OPEN_PAREN:
                    self._apply_top(values, ops)

                if ops.empty():
                    unbalanced.append(token.index)
                else:
                    opening = ops.pop()
                    unbalanced.remove(opening.index)

            elif token.type is TokenType.OPERATOR:
                while not ops.empty() and has_precedence(token.value, ops.peek().value):
                    self._apply_top(values, ops)
                ops.push(token)

            else:
                values.push(self._operand_value(token))

        if unbalanced:
            logger.warning(
                "unbalanced_parens",
                extra={"token_indexes": unbalanced, "expression": self._source},
            )
            raise ExpressionSyntaxError(unbalanced, self._source)

        while not ops.empty():
            self._apply_top(values, ops)

        if len(values) != 1:
            raise EvaluationError(
                f"Expression must reduce to exactly one value, got {len(values)}",
                self._source,
            )
        return values.pop()

    def _operand_value(self, token: Token) -> ExprValue:
        if token.type is TokenType.IDENTIFIER:
            return resolve_path(self._data, token.value, self._limits.max_path_depth)
        return token.value

    def _apply_top(self, values: Stack[ExprValue], ops: Stack[Token]) -> None:
        """Pops one operator, applies it to its operands and pushes the result."""
        token = ops.pop()
        spec = OPERATORS[token.value]

        if len(values) < spec.arity:
            raise EvaluationError(
                f"Operator '{spec.symbol}' expects {spec.arity} operand(s), "
                f"found {len(values)}",
                self._source,
                operator=spec.symbol,
                token_index=token.index,
            )

        # The most recently pushed operand is the right-hand side
        b = values.pop()
        try:
            if spec.arity == 1:
                result = spec.apply(b)
            else:
                a = values.pop()
                result = spec.apply(a, b)
        except EvaluationError as error:
            error.expression = error.expression or self._source
            error.token_index = token.index
            raise

        values.push(result)


def evaluate(
    expression: str,
    data: Any = None,
    limits: Optional[ExpressionLimits] = None,
) -> ExprValue:
    """
    Evaluates an expression against a data context.

    Args:
        expression: The expression to evaluate, e.g. "a.b > 5 && c == 'x'"
        data: Nested mappings/sequences that identifiers are resolved against
        limits: Optional expression limits

    Returns:
        The computed value

    Raises:
        ExpressionSyntaxError: If parentheses are unbalanced
        EvaluationError: On operand/operator mismatch or unsupported operand types
        LimitExceededError: If the expression exceeds the configured limits
    """
    tokens = tokenize(expression, limits)
    logger.debug("expression_tokenized", extra={"token_count": len(tokens)})

    value = Evaluator(data, limits, expression).evaluate(tokens)
    logger.debug("expression_evaluated", extra={"result_type": get_type_name(value)})
    return value


def evaluate_as_boolean(
    expression: str,
    data: Any = None,
    limits: Optional[ExpressionLimits] = None,
) -> Tuple[bool, Optional[str]]:
    """
    Evaluates an expression as a boolean condition.

    Returns:
        Tuple of (value, error_message). The value is the truthiness of the
        result, or False if evaluation fails.
    """
    try:
        return (is_truthy(evaluate(expression, data, limits)), None)
    except ExpressionError as error:
        return (False, error.message)


def try_evaluate(
    expression: str,
    data: Any = None,
    limits: Optional[ExpressionLimits] = None,
) -> EvaluationResult:
    """
    Evaluates an expression and reports failures in the result instead of raising.
    """
    try:
        return EvaluationResult(value=evaluate(expression, data, limits), success=True)
    except ExpressionError as error:
        return EvaluationResult(value=None, success=False, error=error.message)
