"""
Policy entity and its stored-record schema.

Policy is the immutable, evaluated shape. PolicyRecord is the pydantic
schema raw repository records must satisfy to become a Policy through
full validation.
"""

from dataclasses import dataclass
from typing import Any, Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..registry import AuthRegistry
from ..conditions.evaluator import CONDITION_SIDES, is_predicate

PolicyEffect = Literal["allow", "deny"]
EFFECTS = ("allow", "deny")


@dataclass(frozen=True)
class Policy:
    """
    A normalized ABAC policy.

    Attributes:
        id: Unique id within the tenant
        description: Human-readable summary
        effect: "allow" or "deny"
        actions: Action selectors
        resources: Resource selectors
        condition: Condition mapping, None for unconditional
        priority: Higher values are evaluated first
    """
    id: str
    description: str
    effect: str
    actions: tuple[str, ...]
    resources: tuple[str, ...]
    condition: Any = None
    priority: int = 0

    @property
    def allows(self) -> bool:
        return self.effect == "allow"


class PolicyRecord(BaseModel):
    """Full schema for a stored policy record."""

    model_config = ConfigDict(extra="ignore", strict=True)

    id: str = Field(min_length=1)
    description: str
    effect: PolicyEffect
    actions: list[str] = Field(min_length=1)
    resources: list[str] = Field(min_length=1)
    condition: dict[str, Any] | None = None
    priority: int

    @field_validator("actions", "resources")
    @classmethod
    def validate_selectors(cls, v: list[str]) -> list[str]:
        if any(not selector for selector in v):
            raise ValueError("selectors must be non-empty strings")
        return v

    @field_validator("condition")
    @classmethod
    def validate_condition(cls, v: dict[str, Any] | None) -> dict[str, Any] | None:
        if v is None:
            return v
        for side in CONDITION_SIDES:
            rules = v.get(side)
            if rules is None:
                continue
            if not isinstance(rules, Mapping):
                raise ValueError(f"condition.{side} must be a mapping")
            for key, rule in rules.items():
                if not is_predicate(rule):
                    continue
                op = rule.get("op")
                if not isinstance(op, str) or not AuthRegistry.has_operator(op):
                    raise ValueError(f"condition.{side}.{key}: unknown operator {op!r}")
        return v

    def to_policy(self) -> Policy:
        return Policy(
            id=self.id,
            description=self.description,
            effect=self.effect,
            actions=tuple(self.actions),
            resources=tuple(self.resources),
            condition=self.condition,
            priority=self.priority,
        )
