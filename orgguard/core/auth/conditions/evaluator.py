"""
Condition evaluation against subject/resource attribute maps.

Condition shape:
    {
        "subject":  {"department": "HR", "roles": {"op": "eq", "value": ["manager"]}},
        "resource": {"ownerId": {"op": "eq", "value": "$subject.userId"}},
    }

Every declared key must pass (AND). A bare value or list is an implicit
"eq"; a {"op", "value"} mapping is a predicate. Anything malformed fails
closed (non-match) instead of raising.
"""

from typing import Any, Mapping

import structlog

from ..registry import AuthRegistry
from ..interfaces import ConditionOperator
from .operands import UnresolvedReference, parse_operand, resolve_operand

# Import to register built-in operators
from . import operators  # noqa: F401

logger = structlog.get_logger()

CONDITION_SIDES = ("subject", "resource")
IMPLICIT_OPERATOR = "eq"


def is_predicate(rule: Any) -> bool:
    """A predicate is a mapping carrying an "op" key."""
    return isinstance(rule, Mapping) and "op" in rule


class ConditionEvaluator:
    """
    Evaluates ABAC policy conditions.

    Stateless apart from a cache of operator instances, so one evaluator
    can be shared across concurrent requests.
    """

    def __init__(self) -> None:
        self._operators: dict[str, ConditionOperator] = {}

    def evaluate(
        self,
        condition: Any,
        subject_attrs: Mapping[str, Any],
        resource_attrs: Mapping[str, Any],
    ) -> bool:
        """
        Evaluate a condition.

        Args:
            condition: Policy condition (None means "always matches")
            subject_attrs: Attributes of the acting subject
            resource_attrs: Attributes of the target resource

        Returns:
            True if every declared rule holds
        """
        if condition is None:
            return True
        if not isinstance(condition, Mapping):
            return False

        attribute_maps = {"subject": subject_attrs, "resource": resource_attrs}
        for side in CONDITION_SIDES:
            rules = condition.get(side)
            if rules is None:
                continue
            if not isinstance(rules, Mapping):
                return False
            actual_attrs = attribute_maps[side]
            for key, rule in rules.items():
                if not self._evaluate_rule(rule, actual_attrs.get(key), subject_attrs, resource_attrs):
                    return False
        return True

    def _evaluate_rule(
        self,
        rule: Any,
        actual: Any,
        subject_attrs: Mapping[str, Any],
        resource_attrs: Mapping[str, Any],
    ) -> bool:
        if is_predicate(rule):
            op_name = rule.get("op")
            raw_value = rule.get("value")
        else:
            op_name = IMPLICIT_OPERATOR
            raw_value = rule

        # No expected value declared for this key
        if raw_value is None:
            return True

        operator = self._get_operator(op_name)
        if operator is None:
            return False

        try:
            expected = resolve_operand(parse_operand(raw_value), subject_attrs, resource_attrs)
        except UnresolvedReference as exc:
            logger.debug("abac.condition.unresolved_reference", reference=str(exc))
            return False

        return operator.apply(actual, expected)

    def _get_operator(self, name: Any) -> ConditionOperator | None:
        if not isinstance(name, str) or not AuthRegistry.has_operator(name):
            return None
        operator = self._operators.get(name)
        if operator is None:
            operator = AuthRegistry.get_operator(name)
            self._operators[name] = operator
        return operator
