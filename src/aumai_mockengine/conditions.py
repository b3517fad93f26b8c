"""Condition evaluation against incoming request bodies.

Type mismatches never raise: an operator that cannot be applied to the
resolved value simply evaluates to ``False``.

A condition that omits ``value`` differs from one whose value is ``null``:
``eq`` with no value holds only for a field that is absent, not for one
that is present and null.  ``contains`` on a string field renders a scalar
value as JSON text first, so ``"a5"`` contains ``5`` and ``"is true"``
contains ``true``.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from typing import Any

import structlog
from pydantic import ValidationError

from aumai_mockengine.models import Condition, ConditionOperator

logger = structlog.get_logger(__name__)

_MISSING: Any = object()


def resolve_field(path: str, body: Any) -> Any:
    """Walk *body* along the dot-separated *path*.

    Mappings are indexed by key and lists by decimal position.  Returns
    the module sentinel ``_MISSING`` when any segment cannot be followed.
    """
    current = body
    for key in path.split("."):
        if isinstance(current, Mapping):
            if key not in current:
                return _MISSING
            current = current[key]
        elif isinstance(current, list) and key.isdigit():
            index = int(key)
            if index >= len(current):
                return _MISSING
            current = current[index]
        else:
            return _MISSING
    return current


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _strict_equals(left: Any, right: Any) -> bool:
    # bool is an int subclass; True must not equal 1.
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    if _is_number(left) and _is_number(right):
        return left == right
    if type(left) is not type(right):
        return False
    return left == right


def _exists(actual: Any, expected: Any) -> bool:
    return actual is not _MISSING and actual is not None


def _eq(actual: Any, expected: Any) -> bool:
    if actual is _MISSING or expected is _MISSING:
        return actual is expected
    return _strict_equals(actual, expected)


def _neq(actual: Any, expected: Any) -> bool:
    return not _eq(actual, expected)


def _gt(actual: Any, expected: Any) -> bool:
    return _is_number(actual) and _is_number(expected) and actual > expected


def _lt(actual: Any, expected: Any) -> bool:
    return _is_number(actual) and _is_number(expected) and actual < expected


def _as_text(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return None


def _contains(actual: Any, expected: Any) -> bool:
    if isinstance(actual, str):
        text = _as_text(expected)
        return text is not None and text in actual
    if isinstance(actual, list):
        return any(_strict_equals(item, expected) for item in actual)
    return False


def _matches(actual: Any, expected: Any) -> bool:
    if not isinstance(actual, str) or not isinstance(expected, str):
        return False
    try:
        return re.search(expected, actual) is not None
    except re.error:
        logger.debug("invalid_condition_pattern", pattern=expected)
        return False


_OPERATORS: dict[ConditionOperator, Callable[[Any, Any], bool]] = {
    ConditionOperator.exists: _exists,
    ConditionOperator.eq: _eq,
    ConditionOperator.neq: _neq,
    ConditionOperator.gt: _gt,
    ConditionOperator.lt: _lt,
    ConditionOperator.contains: _contains,
    ConditionOperator.matches: _matches,
}


def evaluate_condition(
    condition: Condition | Mapping[str, Any],
    request_body: Any,
) -> bool:
    """Return whether *condition* holds for *request_body*.

    Args:
        condition: A :class:`~aumai_mockengine.models.Condition` or its raw
            wire mapping.  A mapping that fails validation (for example an
            unknown operator) evaluates to ``False``.
        request_body: The decoded JSON request body.
    """
    if not isinstance(condition, Condition):
        try:
            condition = Condition.model_validate(condition)
        except ValidationError:
            logger.debug("unparseable_condition", condition=dict(condition))
            return False

    operator = _OPERATORS.get(condition.operator)
    if operator is None:
        return False
    actual = resolve_field(condition.field, request_body)
    expected = condition.value if "value" in condition.model_fields_set else _MISSING
    return operator(actual, expected)


__all__ = ["evaluate_condition", "resolve_field"]
