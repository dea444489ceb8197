"""
Condition expression engine.

Evaluates small boolean/arithmetic expressions such as
``a.b > 5 && c.d == 'x'`` against a data context without handing the
expression to a general-purpose interpreter.
"""

from .errors import (
    EvaluationError,
    ExpressionError,
    ExpressionSyntaxError,
    LimitExceededError,
    PreparedConditionsError,
)

# Evaluator
from .evaluator import (
    EvaluationResult,
    Evaluator,
    evaluate,
    evaluate_as_boolean,
    try_evaluate,
)
from .fields import get_field_names_from_expression
from .limits import DEFAULT_EXPRESSION_LIMITS, ExpressionLimits

# Operators
from .operators import (
    OPERATORS,
    PRECEDENCE,
    OperatorSpec,
    apply_operator,
    has_precedence,
)
from .prepared import (
    PreparedConditionsDocument,
    load_prepared_conditions,
    populate_prepared_conditions,
)
from .stack import Stack

# Tokenizer
from .tokenizer import (
    Token,
    Tokenizer,
    TokenType,
    classify_token,
    split_expression,
    tokenize,
)
from .values import (
    UNDEFINED,
    ExprValue,
    get_type_name,
    is_truthy,
    resolve_path,
    values_equal,
)

# camelCase aliases
getFieldNamesFromExpression = get_field_names_from_expression
populatePreparedConditions = populate_prepared_conditions

__all__ = [
    # Errors
    "ExpressionError",
    "ExpressionSyntaxError",
    "EvaluationError",
    "LimitExceededError",
    "PreparedConditionsError",
    # Limits
    "ExpressionLimits",
    "DEFAULT_EXPRESSION_LIMITS",
    # Values
    "ExprValue",
    "UNDEFINED",
    "get_type_name",
    "is_truthy",
    "resolve_path",
    "values_equal",
    # Operators
    "OperatorSpec",
    "OPERATORS",
    "PRECEDENCE",
    "apply_operator",
    "has_precedence",
    "Stack",
    # Tokenizer
    "Token",
    "TokenType",
    "Tokenizer",
    "classify_token",
    "split_expression",
    "tokenize",
    # Evaluator
    "EvaluationResult",
    "Evaluator",
    "evaluate",
    "evaluate_as_boolean",
    "try_evaluate",
    # Text utilities
    "get_field_names_from_expression",
    "getFieldNamesFromExpression",
    "populate_prepared_conditions",
    "populatePreparedConditions",
    "PreparedConditionsDocument",
    "load_prepared_conditions",
]
