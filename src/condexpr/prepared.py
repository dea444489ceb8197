"""
Prepared conditions.

A prepared condition is a named expression fragment that is substituted
into a larger expression before evaluation:

    >>> populate_prepared_conditions("isAdult == true", {"isAdult": "(user.age > 17)"})
    '(user.age > 17) == true'

Prepared conditions can also be kept in a JSON or YAML file, either as a
bare mapping or under a ``conditions`` key:

    conditions:
      canVote: "isAdult && user.citizen"
      isAdult: "(user.age > 17)"

Later names see the text inserted for earlier ones, so above "canVote"
expands to "(user.age > 17) && user.citizen".
"""

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import PreparedConditionsError

logger = logging.getLogger("condexpr.prepared")

# A name may be replaced only between these boundaries
_ALLOWED_BEFORE = r"^|\s|\(|!"
_ALLOWED_AFTER = r"\Z|\s|\)"


def _condition_pattern(name: str) -> "re.Pattern[str]":
    return re.compile(f"({_ALLOWED_BEFORE}){re.escape(name)}(?={_ALLOWED_AFTER})")


def populate_prepared_conditions(
    expression: str,
    prepared_conditions: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Replaces prepared condition names in an expression with their text.

    A name is replaced only where it is preceded by the start of the string,
    whitespace, "(" or "!", and followed by the end of the string, whitespace
    or ")". Conditions are applied one after another in mapping order, so
    text inserted for one name is visible to the names that follow it.

    Args:
        expression: The expression text
        prepared_conditions: Mapping of condition name to replacement text

    Returns:
        The expression with all prepared conditions substituted
    """
    if not prepared_conditions:
        return expression

    for name, replacement in prepared_conditions.items():
        expression, occurrences = _condition_pattern(name).subn(
            lambda match, text=replacement: match.group(1) + text, expression
        )
        if occurrences:
            logger.debug(
                "prepared_condition_substituted",
                extra={"condition": name, "occurrences": occurrences},
            )

    return expression


class PreparedConditionsDocument(BaseModel):
    """Prepared conditions file contents."""

    conditions: Dict[str, str] = Field(
        default_factory=dict,
        description="Condition name to expression text, applied in order",
    )

    model_config = ConfigDict(extra="forbid", coerce_numbers_to_str=True)


def _parse_document(content: str, suffix: str) -> Any:
    if suffix == ".json":
        return json.loads(content)
    return yaml.safe_load(content or "")


def load_prepared_conditions(path: Union[str, Path]) -> Dict[str, str]:
    """
    Loads prepared conditions from a ``.json``, ``.yaml`` or ``.yml`` file.

    Raises:
        PreparedConditionsError: If the file cannot be read, parsed or validated
    """
    file_path = Path(path)

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as e:
        raise PreparedConditionsError(
            f"Cannot read prepared conditions: {e}", path=str(file_path)
        ) from e

    try:
        raw = _parse_document(content, file_path.suffix.lower())
    except (ValueError, yaml.YAMLError) as e:
        raise PreparedConditionsError(
            f"Cannot parse prepared conditions: {e}", path=str(file_path)
        ) from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise PreparedConditionsError(
            "Prepared conditions must be an object", path=str(file_path)
        )
    if not isinstance(raw.get("conditions"), dict):
        raw = {"conditions": raw}

    try:
        document = PreparedConditionsDocument.model_validate(raw)
    except ValidationError as e:
        raise PreparedConditionsError(
            f"Invalid prepared conditions: {e}", path=str(file_path)
        ) from e

    logger.info(
        "prepared_conditions_loaded",
        extra={"path": str(file_path), "count": len(document.conditions)},
    )
    return document.conditions
