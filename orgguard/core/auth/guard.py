"""
Authorization guard - composition of every authorization step.

Order:
1. Argument check (org_id and user_id are required)
2. Tenant clearance (classification rank, residency zone)
3. RBAC pre-check (required roles/permissions, delegated scopes)
4. Any-of permission profiles against the granted permission map
5. ABAC policy evaluation, when both action and resource_type are given

The first failing step raises AuthorizationError. Call sites only see the
returned OrgAccessContext or the error, never policy internals.

Usage:
    guard = AuthorizationGuard(policy_service)
    context = await guard.assert_access(
        OrgAccessRequest(
            org_id=org_id,
            user_id=user_id,
            subject_roles=("member",),
            action="read",
            resource_type="leaveRequest",
        ),
        tenant,
    )
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Awaitable, Callable, Collection, Mapping, TypeVar

import structlog

from orgguard.core.config import get_settings
from orgguard.extensions.auth.rbac import (
    CUSTOM_ROLE,
    DelegatedAdminScope,
    RbacEvaluator,
    RbacRequirement,
    combine_role_statements,
    resolve_role_key,
)
from orgguard.utils.context import get_correlation_id, tenant_context
from orgguard.utils.timezone import utc_now
from .errors import AuthorizationError
from .permissions import PermissionMap, permissions_satisfy, satisfies_any_profile
from .policy import PolicyResolutionService
from .tenancy import (
    DataClassificationLevel,
    DataResidencyZone,
    TenantScope,
    check_clearance,
)

logger = structlog.get_logger()

T = TypeVar("T")


# ============================================================
# REQUEST / CONTEXT
# ============================================================

@dataclass(frozen=True)
class OrgAccessRequest:
    """What a call site wants to do, and what it requires."""
    org_id: str
    user_id: str
    subject_roles: tuple[str, ...] = ()
    action: str | None = None
    resource_type: str | None = None
    subject_attributes: Mapping[str, Any] = field(default_factory=dict)
    resource_attributes: Mapping[str, Any] = field(default_factory=dict)
    required_roles: tuple[str, ...] = ()
    required_permissions: Mapping[str, Collection[str]] = field(default_factory=dict)
    required_any_permissions: tuple[PermissionMap, ...] = ()
    delegated_scopes: tuple[DelegatedAdminScope, ...] = ()
    expected_residency: DataResidencyZone | None = None
    expected_classification: DataClassificationLevel | None = None
    audit_source: str | None = None
    correlation_id: str | None = None


@dataclass(frozen=True)
class OrgAccessContext:
    """Returned to the call site when every step allowed the request."""
    org_id: str
    user_id: str
    role_key: str
    permissions: PermissionMap
    data_residency: DataResidencyZone
    data_classification: DataClassificationLevel
    audit_source: str
    correlation_id: str
    audit_batch_id: str | None = None
    matched_scope: DelegatedAdminScope | None = None

    def to_tenant_scope(self) -> TenantScope:
        return TenantScope(
            org_id=self.org_id,
            data_residency=self.data_residency,
            data_classification=self.data_classification,
            audit_source=self.audit_source,
            audit_batch_id=self.audit_batch_id,
        )


def make_subject(
    org_id: str,
    user_id: str,
    roles: Collection[str],
    **attributes: Any,
) -> dict[str, Any]:
    """Subject attribute map for ABAC evaluation; identity and role keys are fixed."""
    roles = list(roles)
    return {
        **attributes,
        "orgId": org_id,
        "userId": user_id,
        "roles": roles,
        "role": roles[0] if roles else CUSTOM_ROLE,
    }


def resolve_roles(subject_roles: Collection[str]) -> list[str]:
    """Resolve role names to role keys, keeping order and dropping duplicates."""
    resolved: list[str] = []
    for name in subject_roles:
        key = resolve_role_key(name)
        if key not in resolved:
            resolved.append(key)
    return resolved or [CUSTOM_ROLE]


# ============================================================
# PRIVILEGE CHECKS
# ============================================================

def assert_privileged(
    context: OrgAccessContext,
    profiles: Collection[PermissionMap],
    reason: str = "No privileged permission profile is satisfied",
) -> None:
    """
    Require one of the given profiles on an authorized context. An empty
    profile list grants no privilege.

    Raises:
        AuthorizationError: If no profile is satisfied
    """
    if any(permissions_satisfy(context.permissions, profile) for profile in profiles):
        return
    logger.info(
        "authorization.denied",
        step="privilege",
        reason=reason,
        org_id=context.org_id,
        user_id=context.user_id,
    )
    raise AuthorizationError(reason, step="privilege")


def assert_actor_or_privileged(
    context: OrgAccessContext,
    target_user_id: str,
    profiles: Collection[PermissionMap],
) -> None:
    """Allow members acting on themselves; anyone else needs a privileged profile."""
    if context.user_id == target_user_id:
        return
    assert_privileged(context, profiles, reason="Acting on behalf of another member")


# ============================================================
# GUARD
# ============================================================

class AuthorizationGuard:
    """
    Entry point used by every higher-level call site.

    Side effects are limited to logging and stamping the request context
    with the tenant being authorized. A denied request leaves the context
    as it was.
    """

    def __init__(
        self,
        policy_service: PolicyResolutionService,
        rbac_evaluator: RbacEvaluator | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.policy_service = policy_service
        self.rbac_evaluator = rbac_evaluator or RbacEvaluator()
        self.clock = clock

    async def assert_access(
        self,
        request: OrgAccessRequest,
        tenant: TenantScope,
        granted_permissions: PermissionMap | None = None,
    ) -> OrgAccessContext:
        """
        Run every authorization step for a request.

        Args:
            request: The access request
            tenant: The organization's residency/classification scope
            granted_permissions: Member's effective permission map
                (defaults to the combined statements of their roles)

        Returns:
            OrgAccessContext

        Raises:
            ValueError: If org_id or user_id is missing
            AuthorizationError: If any step denies
            PolicyRepositoryError: If tenant policies cannot be loaded
        """
        if not request.org_id or not request.user_id:
            raise ValueError("org_id and user_id are required for guard evaluation.")

        with tenant_context(request.org_id, request.user_id):
            return await self._evaluate(request, tenant, granted_permissions)

    async def _evaluate(
        self,
        request: OrgAccessRequest,
        tenant: TenantScope,
        granted_permissions: PermissionMap | None,
    ) -> OrgAccessContext:
        if tenant.org_id != request.org_id:
            self._deny(request, "tenant", "Tenant scope does not belong to the organization")

        reason = check_clearance(
            tenant,
            expected_residency=request.expected_residency,
            expected_classification=request.expected_classification,
        )
        if reason:
            self._deny(request, "tenant", reason)

        roles = resolve_roles(request.subject_roles)
        role_key = roles[0]
        if granted_permissions is None:
            granted_permissions = combine_role_statements(roles)

        # RBAC
        matched_scope = None
        requirement = RbacRequirement(
            required_roles=tuple(request.required_roles),
            required_permissions=request.required_permissions,
            delegated_scopes=tuple(request.delegated_scopes),
        )
        if not requirement.is_empty:
            decision = self.rbac_evaluator.evaluate(role_key, requirement, self.clock())
            if not decision.allowed:
                self._deny(request, "rbac", "; ".join(decision.reasons))
            matched_scope = decision.matched_scope

        # Any-of permission profiles
        if not satisfies_any_profile(granted_permissions, request.required_any_permissions):
            self._deny(request, "permissions", "No required permission profile is satisfied")

        # ABAC
        if request.action and request.resource_type:
            subject = make_subject(
                request.org_id,
                request.user_id,
                roles,
                **dict(request.subject_attributes),
            )
            resource = {
                **dict(request.resource_attributes),
                "residency": DataResidencyZone(tenant.data_residency).value,
                "classification": DataClassificationLevel(tenant.data_classification).value,
            }
            decision = await self.policy_service.decide(
                request.org_id,
                request.action,
                request.resource_type,
                subject,
                resource,
            )
            if not decision.allowed:
                self._deny(request, "abac", decision.reason or "ABAC policy denied this action")

        return OrgAccessContext(
            org_id=request.org_id,
            user_id=request.user_id,
            role_key=role_key,
            permissions=granted_permissions,
            data_residency=tenant.data_residency,
            data_classification=tenant.data_classification,
            audit_source=(
                request.audit_source
                or tenant.audit_source
                or get_settings().auth.default_audit_source
            ),
            audit_batch_id=tenant.audit_batch_id,
            correlation_id=request.correlation_id or get_correlation_id() or str(uuid.uuid4()),
            matched_scope=matched_scope,
        )

    async def is_allowed(
        self,
        request: OrgAccessRequest,
        tenant: TenantScope,
        granted_permissions: PermissionMap | None = None,
    ) -> bool:
        """Boolean form of assert_access()."""
        try:
            await self.assert_access(request, tenant, granted_permissions)
        except AuthorizationError:
            return False
        return True

    async def with_org_context(
        self,
        request: OrgAccessRequest,
        tenant: TenantScope,
        handler: Callable[[OrgAccessContext], Awaitable[T]],
        granted_permissions: PermissionMap | None = None,
    ) -> T:
        """Authorize, then run handler with the resulting context."""
        context = await self.assert_access(request, tenant, granted_permissions)
        return await handler(context)

    def _deny(self, request: OrgAccessRequest, step: str, reason: str) -> None:
        logger.info(
            "authorization.denied",
            step=step,
            reason=reason,
            org_id=request.org_id,
            user_id=request.user_id,
            action=request.action,
            resource_type=request.resource_type,
        )
        raise AuthorizationError(reason, step=step)
