"""
RBAC evaluator.

Checks a role against required roles and required permissions using the
role's static statements, then falls back to delegated admin scopes.

Logic:
1. Role must be among required_roles (when any are given)
2. Role statements must satisfy required_permissions (no aliasing)
3. On failure, the first active delegated scope that covers the
   requirement grants access. A full-override scope covers anything; a
   scope listing resources only covers missing permissions, never a
   failed role check
"""

from datetime import datetime
from typing import Collection, Mapping

import structlog

from orgguard.utils.timezone import utc_now
from .models import DelegatedAdminScope, RbacDecision, RbacRequirement
from .roles import get_role_statements

logger = structlog.get_logger()


def statements_satisfy(
    granted: Mapping[str, Collection[str]],
    required: Mapping[str, Collection[str]],
) -> bool:
    """Exact-key permission check; required resources with no actions are ignored."""
    for resource, actions in required.items():
        if not actions:
            continue
        allowed = granted.get(resource) or ()
        if not all(action in allowed for action in actions):
            return False
    return True


class RbacEvaluator:
    """
    Static role layer of the authorization guard.

    Stateless; one instance can be shared across requests.
    """

    def evaluate(
        self,
        role: str,
        requirement: RbacRequirement,
        now: datetime | None = None,
    ) -> RbacDecision:
        """
        Evaluate a role against a requirement.

        Args:
            role: Resolved role key ("custom" for unknown roles)
            requirement: Required roles/permissions and delegated scopes
            now: Evaluation time for scope expiry (defaults to utc_now())

        Returns:
            RbacDecision with reasons when the base role failed
        """
        now = now or utc_now()
        reasons: list[str] = []

        role_allowed = not requirement.required_roles or role in requirement.required_roles
        if not role_allowed:
            reasons.append(
                f"Role '{role}' is not one of {list(requirement.required_roles)}"
            )

        if not statements_satisfy(get_role_statements(role), requirement.required_permissions):
            reasons.append(f"Role '{role}' lacks the required permissions")

        if not reasons:
            return RbacDecision(allowed=True)

        scope = self._find_scope(requirement, now, role_allowed)
        if scope is not None:
            logger.debug("rbac.delegated_scope.matched", role=role, module=scope.module)
            return RbacDecision(allowed=True, reasons=reasons, matched_scope=scope)

        return RbacDecision(allowed=False, reasons=reasons)

    def _find_scope(
        self,
        requirement: RbacRequirement,
        now: datetime,
        role_allowed: bool,
    ) -> DelegatedAdminScope | None:
        # Resource/action pairs can cover permissions, never a role requirement
        has_permissions = any(requirement.required_permissions.values())
        for scope in requirement.delegated_scopes:
            if not scope.is_active(now):
                continue
            if scope.is_full_override:
                return scope
            if not role_allowed or not has_permissions:
                continue
            if statements_satisfy(scope.as_permission_map(), requirement.required_permissions):
                return scope
        return None
