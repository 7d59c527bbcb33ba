"""
Condition evaluation for ABAC policies.

Built-in operators:
- eq, ne, in: equality / inequality / membership
- gt, lt: ordering on numbers or strings

Add custom operators with @AuthRegistry.operator decorator.
"""

from .operands import (
    Literal,
    ArrayLiteral,
    SubjectRef,
    ResourceRef,
    Operand,
    UnresolvedReference,
    parse_operand,
    resolve_operand,
)
from .operators import (
    EqualsOperator,
    NotEqualsOperator,
    InOperator,
    GreaterThanOperator,
    LessThanOperator,
)
from .evaluator import ConditionEvaluator

__all__ = [
    "Literal",
    "ArrayLiteral",
    "SubjectRef",
    "ResourceRef",
    "Operand",
    "UnresolvedReference",
    "parse_operand",
    "resolve_operand",
    "EqualsOperator",
    "NotEqualsOperator",
    "InOperator",
    "GreaterThanOperator",
    "LessThanOperator",
    "ConditionEvaluator",
]
