"""
FastAPI dependencies for the authorization guard.

The authenticated subject and the tenant scope are resolved upstream
(session handling lives outside this package) and placed on
request.state; override get_access_subject / get_tenant_scope to source
them differently.

Usage:
    from orgguard.core.auth import require_org_access, OrgAccess

    @router.get("/leave/{leave_id}")
    async def read_leave(
        leave_id: str,
        access: Annotated[OrgAccessContext, Depends(require_org_access("read", "leaveRequest"))],
    ):
        ...
"""

from dataclasses import dataclass, field
from typing import Annotated, Any, Callable, Collection, Mapping

import structlog
from fastapi import Depends, HTTPException, Request, status

from .errors import AuthorizationError, PolicyRepositoryError
from .guard import AuthorizationGuard, OrgAccessContext, OrgAccessRequest
from .permissions import PermissionMap
from .tenancy import DataClassificationLevel, DataResidencyZone, TenantScope

logger = structlog.get_logger()

NOT_AUTHORIZED_DETAIL = "Not authorized"


@dataclass(frozen=True)
class AccessSubject:
    """The authenticated member acting inside an organization."""
    org_id: str
    user_id: str
    roles: tuple[str, ...] = ()
    attributes: Mapping[str, Any] = field(default_factory=dict)
    permissions: PermissionMap | None = None


# ============================================================
# COLLABORATOR DEPENDENCIES
# ============================================================

async def get_access_subject(request: Request) -> AccessSubject:
    """
    Get the authenticated subject from request state.

    Raises:
        HTTPException 401: If no subject was resolved upstream
    """
    subject = getattr(request.state, "access_subject", None)
    if subject is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return subject


async def get_tenant_scope(request: Request) -> TenantScope:
    """
    Get the organization's tenant scope from request state.

    Raises:
        HTTPException 401: If no tenant was resolved upstream
    """
    tenant = getattr(request.state, "tenant_scope", None)
    if tenant is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return tenant


def get_authorization_guard() -> AuthorizationGuard:
    """FastAPI dependency for the guard owned by the container."""
    from orgguard.core.container import container

    return container.guard


# ============================================================
# GUARD DEPENDENCY FACTORY
# ============================================================

def require_org_access(
    action: str | None = None,
    resource_type: str | None = None,
    *,
    required_roles: Collection[str] = (),
    required_permissions: PermissionMap | None = None,
    required_any_permissions: Collection[PermissionMap] = (),
    expected_residency: DataResidencyZone | None = None,
    expected_classification: DataClassificationLevel | None = None,
    audit_source: str | None = None,
    resource_attributes: Callable[[Request], Mapping[str, Any]] | None = None,
) -> Callable[..., Any]:
    """
    Build a dependency that authorizes the request or raises.

    Resource attributes default to the route's path parameters.

    Raises (from the dependency):
        HTTPException 403: If any guard step denies
        HTTPException 503: If the tenant's policies cannot be loaded
    """

    async def dependency(
        request: Request,
        subject: Annotated[AccessSubject, Depends(get_access_subject)],
        tenant: Annotated[TenantScope, Depends(get_tenant_scope)],
        guard: Annotated[AuthorizationGuard, Depends(get_authorization_guard)],
    ) -> OrgAccessContext:
        if resource_attributes is not None:
            attributes = resource_attributes(request)
        else:
            attributes = dict(request.path_params)

        access_request = OrgAccessRequest(
            org_id=subject.org_id,
            user_id=subject.user_id,
            subject_roles=tuple(subject.roles),
            action=action,
            resource_type=resource_type,
            subject_attributes=subject.attributes,
            resource_attributes=attributes,
            required_roles=tuple(required_roles),
            required_permissions=required_permissions or {},
            required_any_permissions=tuple(required_any_permissions),
            expected_residency=expected_residency,
            expected_classification=expected_classification,
            audit_source=audit_source,
            correlation_id=getattr(request.state, "correlation_id", None),
        )

        try:
            return await guard.assert_access(access_request, tenant, subject.permissions)
        except AuthorizationError:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=NOT_AUTHORIZED_DETAIL,
            )
        except PolicyRepositoryError as exc:
            logger.error("authorization.unavailable", org_id=exc.org_id)
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Authorization service unavailable",
            )

    return dependency


# ============================================================
# TYPE ALIASES FOR CLEAN SIGNATURES
# ============================================================

# Guard for manual checks inside handlers
Guard = Annotated[AuthorizationGuard, Depends(get_authorization_guard)]

# Authenticated subject (required)
CurrentSubject = Annotated[AccessSubject, Depends(get_access_subject)]

# Organization membership with no specific requirement
OrgAccess = Annotated[OrgAccessContext, Depends(require_org_access())]
