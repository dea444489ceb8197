"""
Resource limits for expression tokenization and evaluation.

These limits protect against resource exhaustion from overly long
expressions and deeply nested lookups.

Environment variables:
    CONDEXPR_MAX_EXPRESSION_LENGTH - Maximum expression length (default: 4096)
    CONDEXPR_MAX_TOKENS - Maximum number of tokens (default: 512)
    CONDEXPR_MAX_PATH_DEPTH - Maximum dotted path segments (default: 16)
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import LimitExceededError

ENV_VAR_MAX_EXPRESSION_LENGTH = "CONDEXPR_MAX_EXPRESSION_LENGTH"
ENV_VAR_MAX_TOKENS = "CONDEXPR_MAX_TOKENS"
ENV_VAR_MAX_PATH_DEPTH = "CONDEXPR_MAX_PATH_DEPTH"


@dataclass(frozen=True)
class ExpressionLimits:
    """Expression limits configuration."""

    # Maximum expression string length in characters
    max_expression_length: int = 4096

    # Maximum number of tokens after splitting
    max_tokens: int = 512

    # Maximum number of segments in a dotted lookup path
    max_path_depth: int = 16

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ExpressionLimits":
        """
        Builds limits from environment variables, falling back to defaults.

        Raises:
            ValueError: If a variable is set but is not a positive integer
        """
        environ = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            max_expression_length=_read_int(
                environ, ENV_VAR_MAX_EXPRESSION_LENGTH, defaults.max_expression_length
            ),
            max_tokens=_read_int(environ, ENV_VAR_MAX_TOKENS, defaults.max_tokens),
            max_path_depth=_read_int(
                environ, ENV_VAR_MAX_PATH_DEPTH, defaults.max_path_depth
            ),
        )


def _read_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


# Default expression limits.
DEFAULT_EXPRESSION_LIMITS = ExpressionLimits()


def check_expression_length(
    expression: str, limits: Optional[ExpressionLimits] = None
) -> None:
    """Validates that expression length is within limits."""
    limits = limits or DEFAULT_EXPRESSION_LIMITS
    if len(expression) > limits.max_expression_length:
        raise LimitExceededError(
            "max_expression_length", limits.max_expression_length, len(expression)
        )


def check_token_count(count: int, limits: Optional[ExpressionLimits] = None) -> None:
    """Validates the number of tokens produced by the tokenizer."""
    limits = limits or DEFAULT_EXPRESSION_LIMITS
    if count > limits.max_tokens:
        raise LimitExceededError("max_tokens", limits.max_tokens, count)
