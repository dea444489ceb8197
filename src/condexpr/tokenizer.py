"""
Tokenizer (lexer) for the condition expression language.

An expression is split on whitespace, on "(" and ")", and on "!" when it
is not the start of "!=". The delimiters themselves are kept as tokens.
Each resulting piece is then classified by an ordered list of rules; the
first rule that matches wins.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional, Tuple

from .limits import ExpressionLimits, check_expression_length, check_token_count
from .operators import is_operator
from .values import UNDEFINED


class TokenType(Enum):
    """Token types produced by the tokenizer."""

    # Structure
    OPERATOR = "OPERATOR"
    OPEN_PAREN = "OPEN_PAREN"
    CLOSE_PAREN = "CLOSE_PAREN"

    # Literals
    INTEGER = "INTEGER"
    STRING = "STRING"
    BOOLEAN = "BOOLEAN"
    NULL = "NULL"
    UNDEFINED = "UNDEFINED"

    # Dotted path resolved against the data context
    IDENTIFIER = "IDENTIFIER"


@dataclass(frozen=True)
class Token:
    """A classified token."""

    type: TokenType
    # Payload: operator symbol, literal value, or identifier path
    value: Any
    # Raw token text
    text: str
    # Position in the token sequence
    index: int


# Capturing group keeps the delimiters in the split output
_SPLIT_PATTERN = re.compile(r"(\s+|\(|\)|!(?!=))")

# Decimal numbers; only the leading integer part is kept
_NUMBER_PATTERN = re.compile(r"([+-]?\d+)(?:\.\d*)?(?:[eE][+-]?\d+)?", re.ASCII)

Classification = Tuple[TokenType, Any]
ClassificationRule = Callable[[str], Optional[Classification]]


def split_expression(expression: str) -> List[str]:
    """
    Splits an expression into raw token strings.

    Pieces are trimmed and empty pieces dropped, so runs of whitespace
    never yield empty tokens.
    """
    pieces = (piece.strip() for piece in _SPLIT_PATTERN.split(expression))
    return [piece for piece in pieces if piece]


def _structural(text: str) -> Optional[Classification]:
    if text == "(":
        return (TokenType.OPEN_PAREN, text)
    if text == ")":
        return (TokenType.CLOSE_PAREN, text)
    if is_operator(text):
        return (TokenType.OPERATOR, text)
    return None


def _null(text: str) -> Optional[Classification]:
    return (TokenType.NULL, None) if text == "null" else None


def _undefined(text: str) -> Optional[Classification]:
    return (TokenType.UNDEFINED, UNDEFINED) if text == "undefined" else None


def _boolean(text: str) -> Optional[Classification]:
    if text == "true":
        return (TokenType.BOOLEAN, True)
    if text == "false":
        return (TokenType.BOOLEAN, False)
    return None


def _integer(text: str) -> Optional[Classification]:
    match = _NUMBER_PATTERN.fullmatch(text)
    if match is None:
        return None
    return (TokenType.INTEGER, int(match.group(1)))


def _string(text: str) -> Optional[Classification]:
    if len(text) >= 2 and text.startswith("'") and text.endswith("'"):
        # Every quote is removed, not only the wrapping pair
        return (TokenType.STRING, text.replace("'", ""))
    return None


CLASSIFICATION_RULES: Tuple[ClassificationRule, ...] = (
    _structural,
    _null,
    _undefined,
    _boolean,
    _integer,
    _string,
)


def classify_token(text: str, index: int = 0) -> Token:
    """Classifies a raw token string."""
    for rule in CLASSIFICATION_RULES:
        classification = rule(text)
        if classification is not None:
            token_type, value = classification
            return Token(token_type, value, text, index)
    # Anything else is a path into the data context
    return Token(TokenType.IDENTIFIER, text, text, index)


class Tokenizer:
    """Tokenizer for expression strings."""

    def __init__(self, source: str, limits: Optional[ExpressionLimits] = None):
        self._source = source
        self._limits = limits

    def tokenize(self) -> List[Token]:
        """Tokenizes the source expression and returns all tokens."""
        check_expression_length(self._source, self._limits)

        pieces = split_expression(self._source)
        check_token_count(len(pieces), self._limits)

        return [classify_token(text, index) for index, text in enumerate(pieces)]


def tokenize(source: str, limits: Optional[ExpressionLimits] = None) -> List[Token]:
    """
    Tokenizes an expression string into tokens.

    Args:
        source: The expression string to tokenize
        limits: Optional expression limits

    Returns:
        List of tokens

    Raises:
        LimitExceededError: If the expression is too long or has too many tokens
    """
    tokenizer = Tokenizer(source, limits)
    return tokenizer.tokenize()
