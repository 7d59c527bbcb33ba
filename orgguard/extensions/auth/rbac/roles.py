"""
Built-in organization roles and their permission statements.

Statements are keyed by legacy resource keys. The static role layer does
no alias expansion; that belongs to the dynamic permission-map layer.

Unknown role names resolve to "custom", which carries no statements.
"""

import re
from types import MappingProxyType
from typing import Iterable, Mapping

CUSTOM_ROLE = "custom"

_CRUD = ("read", "list", "create", "update", "delete")

_HR_ADMIN_STATEMENTS: dict[str, tuple[str, ...]] = {
    "hrSettings": ("read", "update"),
    "hrLeave": _CRUD + ("approve", "cancel"),
    "hrLeaveBalance": ("read", "list", "adjust"),
    "hrLeavePolicy": _CRUD,
    "hrAbsence": _CRUD + ("acknowledge", "cancel"),
    "hrAbsenceSettings": ("read", "update"),
    "hrCompliance": _CRUD + ("review", "assign"),
    "hrComplianceTemplate": _CRUD,
    "hrNotification": _CRUD,
    "hrOnboarding": _CRUD + ("send", "complete"),
    "hrChecklistTemplate": _CRUD,
    "employeeProfile": _CRUD,
    "employmentContract": _CRUD,
    "hrPerformance": _CRUD,
    "hrPerformanceGoal": _CRUD,
    "hrPolicy": _CRUD + ("publish", "unpublish", "acknowledge"),
    "hrTimeEntry": _CRUD + ("approve",),
    "hrTraining": _CRUD + ("enroll", "complete"),
}

_ORG_ADMIN_STATEMENTS: dict[str, tuple[str, ...]] = {
    "organization": ("read", "update"),
    "member": _CRUD + ("invite",),
    "invitation": ("create", "cancel"),
    "audit": ("read", "list"),
    **_HR_ADMIN_STATEMENTS,
}

ROLE_STATEMENTS: Mapping[str, Mapping[str, tuple[str, ...]]] = MappingProxyType({
    "owner": MappingProxyType({
        **_ORG_ADMIN_STATEMENTS,
        "organization": ("read", "update", "delete"),
        "billing": ("read", "update"),
    }),
    "orgAdmin": MappingProxyType(_ORG_ADMIN_STATEMENTS),
    "hrAdmin": MappingProxyType({
        "organization": ("read",),
        "member": ("read", "list"),
        **_HR_ADMIN_STATEMENTS,
    }),
    "manager": MappingProxyType({
        "organization": ("read",),
        "member": ("read", "list"),
        "hrLeave": ("read", "list", "approve"),
        "hrAbsence": ("read", "list", "acknowledge"),
        "employeeProfile": ("read", "list"),
        "hrPerformance": ("read", "list", "create", "update"),
        "hrPerformanceGoal": ("read", "list", "create", "update"),
        "hrTimeEntry": ("read", "list", "approve"),
        "hrPolicy": ("read", "list", "acknowledge"),
    }),
    "compliance": MappingProxyType({
        "organization": ("read",),
        "member": ("read", "list"),
        "hrCompliance": ("read", "list", "review", "assign"),
        "hrComplianceTemplate": _CRUD,
        "hrPolicy": ("read", "list", "acknowledge"),
        "audit": ("read", "list"),
    }),
    "member": MappingProxyType({
        "organization": ("read",),
        "hrLeave": ("read", "create", "cancel"),
        "hrAbsence": ("read", "create", "cancel"),
        "employeeProfile": ("read",),
        "hrPolicy": ("read", "acknowledge"),
        "hrTimeEntry": ("read", "create", "update"),
        "hrTraining": ("read", "enroll"),
    }),
})

BUILTIN_ROLES = tuple(ROLE_STATEMENTS.keys())


def is_builtin_role(role: str | None) -> bool:
    return role in ROLE_STATEMENTS


def get_role_statements(role: str | None) -> Mapping[str, tuple[str, ...]]:
    """Statements for a role; empty for custom or unknown roles."""
    return ROLE_STATEMENTS.get(role or CUSTOM_ROLE, MappingProxyType({}))


def combine_role_statements(roles: Iterable[str]) -> dict[str, set[str]]:
    """Union the statements of several roles into one permission map."""
    combined: dict[str, set[str]] = {}
    for role in roles:
        for resource, actions in get_role_statements(role).items():
            combined.setdefault(resource, set()).update(actions)
    return combined


# ============================================================
# ROLE NAME RESOLUTION
# ============================================================

def _normalize_role_name(value: str) -> str:
    return re.sub(r"[^a-zA-Z0-9]", "", value).lower()


_ROLE_LOOKUP = {_normalize_role_name(role): role for role in BUILTIN_ROLES}


def _infer_role(normalized: str) -> str | None:
    if "orgadmin" in normalized or "organizationadmin" in normalized:
        return "orgAdmin"
    if "hr" in normalized and "admin" in normalized:
        return "hrAdmin"
    if "owner" in normalized:
        return "owner"
    if "manager" in normalized:
        return "manager"
    if "compliance" in normalized:
        return "compliance"
    if any(word in normalized for word in ("member", "employee", "staff")):
        return "member"
    return None


def resolve_role_key(role_name: str | None) -> str:
    """
    Map a membership's role name onto a built-in role.

    Examples:
        resolve_role_key("hrAdmin")       -> "hrAdmin"
        resolve_role_key("HR Admin")      -> "hrAdmin"
        resolve_role_key("Staff")         -> "member"
        resolve_role_key("Night Auditor") -> "custom"
    """
    if not role_name:
        return CUSTOM_ROLE
    if is_builtin_role(role_name):
        return role_name
    normalized = _normalize_role_name(role_name)
    return _ROLE_LOOKUP.get(normalized) or _infer_role(normalized) or CUSTOM_ROLE
