"""
Error types for the condition expression engine.

All expression errors extend ExpressionError for consistent handling.
"""

from typing import List, Optional, Sequence


class ExpressionError(Exception):
    """
    Base error class for all expression-related errors.
    """

    def __init__(
        self,
        message: str,
        position: Optional[int] = None,
        expression: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.position = position
        self.expression = expression

    def format_with_context(self) -> str:
        """
        Returns a formatted error message with position context.
        """
        if self.expression is None or self.position is None:
            return self.message

        pointer = " " * self.position + "^"
        return f"{self.message}\n  {self.expression}\n  {pointer}"


class ExpressionSyntaxError(ExpressionError):
    """
    Error thrown when parentheses in an expression are unbalanced.

    ``token_indexes`` lists the positions (in the token sequence) of every
    parenthesis left without a partner.
    """

    def __init__(
        self,
        token_indexes: Sequence[int],
        expression: Optional[str] = None,
    ):
        indexes: List[int] = list(token_indexes)
        message = "Parens with the following token indexes are unbalanced: " + ",".join(
            str(i) for i in indexes
        )
        super().__init__(message, None, expression)
        self.token_indexes = indexes


# Shadows the builtin only where imported by name.
SyntaxError = ExpressionSyntaxError


class EvaluationError(ExpressionError):
    """
    Error thrown during evaluation (runtime error).
    """

    def __init__(
        self,
        message: str,
        expression: Optional[str] = None,
        operator: Optional[str] = None,
        token_index: Optional[int] = None,
    ):
        super().__init__(message, None, expression)
        self.operator = operator
        self.token_index = token_index


class LimitExceededError(ExpressionError):
    """
    Error thrown when expression limits are exceeded.
    """

    def __init__(self, limit_name: str, limit: int, actual: int):
        message = f"Limit exceeded: {limit_name} (limit: {limit}, actual: {actual})"
        super().__init__(message)
        self.limit_name = limit_name
        self.limit = limit
        self.actual = actual


class PreparedConditionsError(ExpressionError):
    """
    Error thrown when a prepared conditions document cannot be loaded.
    """

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path
