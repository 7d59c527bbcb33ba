"""
RBAC (Role-Based Access Control) Extension.

Static role layer of the authorization guard:
- Built-in roles with permission statements over legacy resource keys
- Role name resolution ("HR Admin" -> "hrAdmin", unknown -> "custom")
- Time-bounded delegated admin scopes that override the base role

Usage:
    evaluator = RbacEvaluator()
    decision = evaluator.evaluate(
        "member",
        RbacRequirement(required_permissions={"hrLeave": ["approve"]}),
    )
"""

from .models import DelegatedAdminScope, RbacRequirement, RbacDecision
from .roles import (
    BUILTIN_ROLES,
    CUSTOM_ROLE,
    ROLE_STATEMENTS,
    combine_role_statements,
    get_role_statements,
    is_builtin_role,
    resolve_role_key,
)
from .engine import RbacEvaluator, statements_satisfy

__all__ = [
    "DelegatedAdminScope",
    "RbacRequirement",
    "RbacDecision",
    "BUILTIN_ROLES",
    "CUSTOM_ROLE",
    "ROLE_STATEMENTS",
    "combine_role_statements",
    "get_role_statements",
    "is_builtin_role",
    "resolve_role_key",
    "RbacEvaluator",
    "statements_satisfy",
]
