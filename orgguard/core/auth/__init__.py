"""
Authorization module - multi-tenant RBAC + ABAC.

Decision layers, in the order the guard applies them:
=====================================================

1. Tenant clearance
-------------------
    Data residency zone must equal the expected zone; data classification
    rank must be at least the required rank.

2. RBAC
-------
    Built-in role statements must satisfy required roles/permissions,
    or an active delegated admin scope must.

3. Permission profiles
----------------------
    At least one required_any_permissions profile must be satisfied by the
    member's granted map; legacy and canonical resource keys interoperate.

4. ABAC
-------
    The tenant's policies (or the bootstrap set when it has none) are
    evaluated in priority order; the first full match decides.

Usage:
======

    from orgguard.core.auth import require_org_access

    @router.post("/leave/{leave_id}/approve")
    async def approve(
        access: Annotated[OrgAccessContext, Depends(require_org_access("approve", "leaveRequest"))],
    ):
        ...

Extensibility:
==============

Add custom condition operators:
    @AuthRegistry.operator("startsWith")
    class StartsWithOperator(ConditionOperator):
        ...

Add custom policy repositories:
    @AuthRegistry.policy_repository("redis")
    class RedisPolicyRepository(PolicyRepository):
        ...
"""

# Core interfaces (for type hints and custom implementations)
from .interfaces import (
    PolicyDecision,
    PolicyRepository,
    ConditionOperator,
)

# Errors
from .errors import (
    GENERIC_DENIAL_MESSAGE,
    AuthorizationError,
    PolicyRepositoryError,
)

# Registry (for extending with custom implementations)
from .registry import AuthRegistry

# Evaluation components
from .selectors import matches_selector
from .conditions import ConditionEvaluator
from .policy import Policy, PolicyResolutionService
from .permissions import (
    PermissionMap,
    expand_resource_keys,
    permissions_satisfy,
    satisfies_any_profile,
)
from .tenancy import (
    DataResidencyZone,
    DataClassificationLevel,
    TenantScope,
)

# Guard (composition)
from .guard import (
    AuthorizationGuard,
    OrgAccessRequest,
    OrgAccessContext,
    assert_actor_or_privileged,
    assert_privileged,
    make_subject,
)

# Dependencies (what you'll use in routes)
from .dependencies import (
    AccessSubject,
    CurrentSubject,
    Guard,
    OrgAccess,
    get_access_subject,
    get_tenant_scope,
    get_authorization_guard,
    require_org_access,
)

__all__ = [
    # Interfaces
    "PolicyDecision",
    "PolicyRepository",
    "ConditionOperator",
    # Errors
    "GENERIC_DENIAL_MESSAGE",
    "AuthorizationError",
    "PolicyRepositoryError",
    # Registry
    "AuthRegistry",
    # Evaluation
    "matches_selector",
    "ConditionEvaluator",
    "Policy",
    "PolicyResolutionService",
    "PermissionMap",
    "expand_resource_keys",
    "permissions_satisfy",
    "satisfies_any_profile",
    "DataResidencyZone",
    "DataClassificationLevel",
    "TenantScope",
    # Guard
    "AuthorizationGuard",
    "OrgAccessRequest",
    "OrgAccessContext",
    "assert_actor_or_privileged",
    "assert_privileged",
    "make_subject",
    # Dependencies
    "AccessSubject",
    "CurrentSubject",
    "Guard",
    "OrgAccess",
    "get_access_subject",
    "get_tenant_scope",
    "get_authorization_guard",
    "require_org_access",
]
