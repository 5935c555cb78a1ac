import ast
import logging

logger = logging.getLogger(__name__)

GUARD_VARIABLE = "quoteValidity"
_GUARD_LITERALS = ("Valid", "Invalid")


def evaluate_guard(expression: str, variables: dict) -> bool:
    """
    Evaluate a gateway guard against the process variables.

    Only equality between ``quoteValidity`` and ``Valid``/``Invalid`` is
    understood, with ``=`` or ``==`` and a quoted or bare literal. Every
    other guard is treated as non-matching.
    """
    expression = (expression or "").strip()
    if expression.startswith("="):  # FEEL expression marker
        expression = expression[1:].strip()
    if not expression:
        return False

    try:
        expected = _parse_guard(_normalize(expression))
    except (SyntaxError, ValueError) as e:
        logger.debug("Guard %r not understood (%s), treating as false", expression, e)
        return False

    actual = variables.get(GUARD_VARIABLE)
    result = actual == expected
    logger.debug("Guard %r with %s=%r -> %s", expression, GUARD_VARIABLE, actual, result)
    return result


def _normalize(expression: str) -> str:
    # FEEL uses a single '=' for equality
    if "==" not in expression and expression.count("=") == 1:
        return expression.replace("=", "==")
    return expression


def _parse_guard(expression: str) -> str:
    node = ast.parse(expression, mode="eval").body

    if not isinstance(node, ast.Compare) or len(node.ops) != 1 or not isinstance(node.ops[0], ast.Eq):
        raise ValueError("only a single equality comparison is supported")

    left, right = node.left, node.comparators[0]
    if _is_guard_variable(left):
        literal = right
    elif _is_guard_variable(right):
        literal = left
    else:
        raise ValueError(f"guard must compare {GUARD_VARIABLE}")

    if isinstance(literal, ast.Constant) and isinstance(literal.value, str):
        value = literal.value
    elif isinstance(literal, ast.Name):
        value = literal.id
    else:
        raise ValueError("unsupported literal")

    if value not in _GUARD_LITERALS:
        raise ValueError(f"unsupported literal: {value}")
    return value


def _is_guard_variable(node: ast.AST) -> bool:
    return isinstance(node, ast.Name) and node.id == GUARD_VARIABLE
