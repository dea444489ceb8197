"""
Field name extraction.
"""

import re
from typing import List

# Letter-led alphanumeric segments joined by dots; at least one dot.
# Bare names such as "name" are not reported.
_FIELD_NAME_PATTERN = re.compile(
    r"[a-z]+[a-z0-9]*(?:\.[a-z]+[a-z0-9]*)+", re.IGNORECASE | re.ASCII
)


def get_field_names_from_expression(expression: str) -> List[str]:
    """
    Finds dotted variable names (``a.b``, ``a.b.c``) in an expression.

    Matches are returned left to right, duplicates included.

    Example:
        >>> get_field_names_from_expression("a.b > c.d.e && flag")
        ['a.b', 'c.d.e']
    """
    return _FIELD_NAME_PATTERN.findall(expression)
