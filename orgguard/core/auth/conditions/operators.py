"""
Built-in condition operators.

- eq: subset containment when the actual value is a list, equality otherwise
- ne: every expected value differs from the actual value
- in: the actual value equals at least one expected value
- gt / lt: native ordering on numbers or strings, False for anything else

Add custom operators with the @AuthRegistry.operator decorator.
"""

from typing import Any
from ..interfaces import ConditionOperator
from ..registry import AuthRegistry


def as_values(expected: Any) -> list[Any]:
    """Normalize a resolved rule value to a list of expected values."""
    if isinstance(expected, (list, tuple)):
        return list(expected)
    return [expected]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _comparable(actual: Any, expected: Any) -> bool:
    if _is_number(actual):
        return _is_number(expected)
    if isinstance(actual, str):
        return isinstance(expected, str)
    return False


@AuthRegistry.operator("eq")
class EqualsOperator(ConditionOperator):
    name = "eq"

    def apply(self, actual: Any, expected: Any) -> bool:
        values = as_values(expected)
        if isinstance(actual, (list, tuple, set, frozenset)):
            return all(any(value == item for item in actual) for value in values)
        return all(value == actual for value in values)


@AuthRegistry.operator("ne")
class NotEqualsOperator(ConditionOperator):
    name = "ne"

    def apply(self, actual: Any, expected: Any) -> bool:
        return all(value != actual for value in as_values(expected))


@AuthRegistry.operator("in")
class InOperator(ConditionOperator):
    name = "in"

    def apply(self, actual: Any, expected: Any) -> bool:
        return any(value == actual for value in as_values(expected))


class _OrderingOperator(ConditionOperator):
    """Shared guard for gt/lt: both sides must be numbers or both strings."""

    def apply(self, actual: Any, expected: Any) -> bool:
        values = as_values(expected)
        if not values:
            return False
        for value in values:
            if not _comparable(actual, value):
                return False
            if not self._compare(actual, value):
                return False
        return True

    def _compare(self, actual: Any, value: Any) -> bool:
        raise NotImplementedError


@AuthRegistry.operator("gt")
class GreaterThanOperator(_OrderingOperator):
    name = "gt"

    def _compare(self, actual: Any, value: Any) -> bool:
        return actual > value


@AuthRegistry.operator("lt")
class LessThanOperator(_OrderingOperator):
    name = "lt"

    def _compare(self, actual: Any, value: Any) -> bool:
        return actual < value
