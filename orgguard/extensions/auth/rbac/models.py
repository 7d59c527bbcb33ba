"""
RBAC value types - requirements, delegated scopes, decisions.

These are per-request values built from session/role data and discarded
after the decision.

Usage:
    scope = DelegatedAdminScope(
        module="hr",
        expires_at=datetime(2030, 1, 1, tzinfo=UTC),
        allowed_resources=("hrSettings",),
        allowed_actions=("update",),
    )
    requirement = RbacRequirement(
        required_permissions={"hrSettings": ["update"]},
        delegated_scopes=(scope,),
    )
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Collection, Mapping

from orgguard.utils.timezone import ensure_utc


@dataclass(frozen=True)
class DelegatedAdminScope:
    """
    Temporary permission override, independent of the base role.

    A scope without allowed_resources is a full override for its module.
    Otherwise it grants every allowed action on every allowed resource.
    """
    module: str
    expires_at: datetime | None = None
    allowed_resources: tuple[str, ...] | None = None
    allowed_actions: tuple[str, ...] | None = None
    audit_source: str | None = None

    def is_active(self, now: datetime) -> bool:
        """Active while expires_at is absent or in the future."""
        if self.expires_at is None:
            return True
        return ensure_utc(self.expires_at) > ensure_utc(now)

    @property
    def is_full_override(self) -> bool:
        return not self.allowed_resources

    def as_permission_map(self) -> dict[str, set[str]]:
        actions = set(self.allowed_actions or ())
        return {resource: set(actions) for resource in self.allowed_resources or ()}


@dataclass(frozen=True)
class RbacRequirement:
    required_roles: tuple[str, ...] = ()
    required_permissions: Mapping[str, Collection[str]] = field(default_factory=dict)
    delegated_scopes: tuple[DelegatedAdminScope, ...] = ()

    @property
    def is_empty(self) -> bool:
        """True when there is nothing to check."""
        return not self.required_roles and not any(self.required_permissions.values())


@dataclass
class RbacDecision:
    """
    Result of an RBAC evaluation.

    Attributes:
        allowed: Whether the requirement is met
        reasons: Why the base role failed (logs only)
        matched_scope: Delegated scope that granted access, if any
    """
    allowed: bool
    reasons: list[str] = field(default_factory=list)
    matched_scope: DelegatedAdminScope | None = None
