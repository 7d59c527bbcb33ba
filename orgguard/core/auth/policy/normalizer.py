"""
Policy normalization.

Raw records come from tenant storage and are untrusted. Two validators
run in sequence:

1. validate_policy: full PolicyRecord schema
2. validate_minimal_policy: id, effect, actions, resources only

Records passing only the second are "rescued" so an imperfect but usable
policy is never silently lost. Nothing here raises for bad data.
"""

from typing import Any, Iterable, Mapping

import structlog
from pydantic import ValidationError

from .models import EFFECTS, Policy, PolicyRecord

logger = structlog.get_logger()


# ============================================================
# VALIDATORS
# ============================================================

def validate_policy(raw: Any) -> Policy | None:
    """Validate a raw record against the full schema."""
    if not isinstance(raw, Mapping):
        return None
    try:
        return PolicyRecord.model_validate(dict(raw)).to_policy()
    except ValidationError:
        return None


def _selector_list(value: Any) -> tuple[str, ...] | None:
    if not isinstance(value, (list, tuple)) or not value:
        return None
    if not all(isinstance(item, str) and item for item in value):
        return None
    return tuple(value)


def validate_minimal_policy(raw: Any) -> Policy | None:
    """
    Validate only the fields a policy cannot be evaluated without.

    The condition is carried through as-is; a malformed one fails closed
    at evaluation time.
    """
    if not isinstance(raw, Mapping):
        return None

    policy_id = raw.get("id")
    if not isinstance(policy_id, str) or not policy_id:
        return None
    effect = raw.get("effect")
    if effect not in EFFECTS:
        return None
    actions = _selector_list(raw.get("actions"))
    resources = _selector_list(raw.get("resources"))
    if actions is None or resources is None:
        return None

    description = raw.get("description")
    priority = raw.get("priority")
    if not isinstance(priority, int) or isinstance(priority, bool):
        priority = 0

    return Policy(
        id=policy_id,
        description=description if isinstance(description, str) else "",
        effect=effect,
        actions=actions,
        resources=resources,
        condition=raw.get("condition"),
        priority=priority,
    )


# ============================================================
# NORMALIZATION
# ============================================================

def normalize_policies(raw_policies: Iterable[Any]) -> list[Policy]:
    """Keep records that pass full validation; log and drop the rest."""
    policies: list[Policy] = []
    for index, raw in enumerate(raw_policies):
        policy = validate_policy(raw)
        if policy is None:
            logger.warning(
                "abac.policy.invalid",
                index=index,
                policy_id=raw.get("id") if isinstance(raw, Mapping) else None,
            )
            continue
        policies.append(policy)
    return policies


def rescue_policies(raw_policies: Iterable[Any], normalized: list[Policy]) -> list[Policy]:
    """
    Append minimally valid records missing from the normalized list.

    Deduplicated by id against both the normalized list and earlier
    rescues.
    """
    seen = {policy.id for policy in normalized}
    result = list(normalized)
    for raw in raw_policies:
        policy = validate_minimal_policy(raw)
        if policy is None or policy.id in seen:
            continue
        logger.info("abac.policy.rescued", policy_id=policy.id)
        seen.add(policy.id)
        result.append(policy)
    return result


def sort_by_priority(policies: Iterable[Policy]) -> list[Policy]:
    """Priority descending; ties keep their input order."""
    return sorted(policies, key=lambda policy: -policy.priority)


def resolve_policy_set(raw_policies: Iterable[Any]) -> list[Policy]:
    """
    Turn raw records into the evaluated, priority-sorted policy list.

    Falls back to the minimally validated records when neither full
    validation nor rescue produced anything.
    """
    raw_list = list(raw_policies)
    policies = rescue_policies(raw_list, normalize_policies(raw_list))
    if not policies:
        policies = [
            policy for policy in (validate_minimal_policy(raw) for raw in raw_list)
            if policy is not None
        ]
    return sort_by_priority(policies)
