"""
Decision table evaluation.

Supports the narrow condition syntax used by the quote validity tables:
  - ``-`` or an empty entry: matches any value
  - exact literals, quoted or bare: ``true``, ``"Valid"``, ``Valid``, ``25``
  - comparisons against a numeric literal: ``< 25``, ``>= 25``
Anything else never matches.
"""

import logging
import math
import operator
import re
from typing import Any, Mapping, Optional, Union

from ..errors import ConfigurationError
from .models import NO_RESULT, DecisionOutcome, DecisionTable, NoResult

logger = logging.getLogger(__name__)

_COMPARISON = re.compile(r"^(<=|>=|<|>)\s*(\S.*)$")

_OPERATORS = {
    "<": operator.lt,
    "<=": operator.le,
    ">": operator.gt,
    ">=": operator.ge,
}


def evaluate(table: Optional[DecisionTable], inputs: Mapping[str, Any]) -> Union[DecisionOutcome, NoResult]:
    """
    Evaluate ``table`` against ``inputs`` and return the selected rule's output.

    Returns NO_RESULT when no rule matches. Raises ConfigurationError when no
    table is loaded, or when a UNIQUE table has more than one matching rule.
    """
    if table is None:
        raise ConfigurationError("no decision table is loaded")

    matched = []
    for index, rule in enumerate(table.rules):
        if not _rule_matches(table, rule.conditions, inputs):
            continue
        outcome = DecisionOutcome(output=strip_quotes(rule.output), rule_index=index)
        if table.hit_policy == "FIRST":
            logger.debug("Decision %s matched rule %d -> %s", table.key, index + 1, outcome.output)
            return outcome
        matched.append(outcome)

    if not matched:
        logger.debug("Decision %s matched no rule for %s", table.key, dict(inputs))
        return NO_RESULT
    if len(matched) > 1:
        rules = ", ".join(str(m.rule_index + 1) for m in matched)
        raise ConfigurationError(f"Decision {table.key} has hit policy UNIQUE but rules {rules} all match")
    return matched[0]


def _rule_matches(table: DecisionTable, conditions, inputs: Mapping[str, Any]) -> bool:
    for name, condition in zip(table.inputs, conditions):
        if not condition_matches(condition, inputs.get(name)):
            return False
    return True


def condition_matches(condition: str, value: Any) -> bool:
    """ Check a single input entry against a variable value. Unparseable entries fail closed. """
    text = (condition or "").strip()
    if text in ("", "-"):
        return True

    comparison = _COMPARISON.match(text)
    if comparison:
        op, right = comparison.groups()
        bound = _parse_number(right)
        if bound is None or not _is_number(value):
            return False
        return _OPERATORS[op](value, bound)

    return _literal_matches(text, value)


def _literal_matches(text: str, value: Any) -> bool:
    if _is_quoted(text):
        return isinstance(value, str) and value == text[1:-1]

    lowered = text.lower()
    if lowered in ("true", "false"):
        return isinstance(value, bool) and value == (lowered == "true")

    number = _parse_number(text)
    if number is not None:
        return _is_number(value) and value == number

    # bare word, e.g. Valid
    return isinstance(value, str) and value == text


def strip_quotes(text: str) -> str:
    text = (text or "").strip()
    return text[1:-1] if _is_quoted(text) else text


def _is_quoted(text: str) -> bool:
    return len(text) >= 2 and text[0] == text[-1] and text[0] in ("'", '"')


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _parse_number(text: str) -> Optional[float]:
    try:
        number = float(text.strip())
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def describe_rules(table: DecisionTable) -> str:
    """ One line per rule, e.g. ``true, - -> "Invalid"``. Used when logging loaded tables. """
    lines = []
    for rule in table.rules:
        entries = ", ".join(c if c.strip() else "-" for c in rule.conditions)
        lines.append(f"{entries} -> {rule.output}")
    return "\n".join(lines)
