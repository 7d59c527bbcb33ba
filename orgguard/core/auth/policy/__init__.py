"""
ABAC policies: entity, normalization, bootstrap defaults and resolution.
"""

from .models import Policy, PolicyRecord
from .normalizer import (
    validate_policy,
    validate_minimal_policy,
    normalize_policies,
    rescue_policies,
    sort_by_priority,
    resolve_policy_set,
)
from .defaults import DEFAULT_BOOTSTRAP_POLICIES, get_bootstrap_policies
from .service import PolicyResolutionService, default_repository_factory, has_role

__all__ = [
    "Policy",
    "PolicyRecord",
    "validate_policy",
    "validate_minimal_policy",
    "normalize_policies",
    "rescue_policies",
    "sort_by_priority",
    "resolve_policy_set",
    "DEFAULT_BOOTSTRAP_POLICIES",
    "get_bootstrap_policies",
    "PolicyResolutionService",
    "default_repository_factory",
    "has_role",
]
