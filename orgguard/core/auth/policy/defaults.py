"""
Bootstrap policies.

Substituted wholesale for a tenant that has no stored policies so a new
organization is usable before an administrator authors anything. Never
merged with stored policies.
"""

from typing import Any

HR_RESOURCE_SELECTORS = [
    "hr*",
    "leave*",
    "absence*",
    "employee*",
    "employment*",
    "compliance*",
    "policy*",
    "timeEntry*",
    "training*",
    "onboarding*",
    "performance*",
]

SELF_SERVICE_RESOURCE_SELECTORS = ["leave*", "absence*"]


def _role_condition(role: str) -> dict[str, Any]:
    return {"subject": {"roles": [role]}}


DEFAULT_BOOTSTRAP_POLICIES: tuple[dict[str, Any], ...] = (
    {
        "id": "default:owner:all",
        "description": "Owners can perform any action on any resource",
        "effect": "allow",
        "actions": ["*"],
        "resources": ["*"],
        "condition": _role_condition("owner"),
        "priority": 1000,
    },
    {
        "id": "default:org-admin:all",
        "description": "Organization admins can perform any action on any resource",
        "effect": "allow",
        "actions": ["*"],
        "resources": ["*"],
        "condition": _role_condition("orgAdmin"),
        "priority": 900,
    },
    {
        "id": "default:hr-admin:hr",
        "description": "HR admins can manage HR resources",
        "effect": "allow",
        "actions": ["*"],
        "resources": HR_RESOURCE_SELECTORS,
        "condition": _role_condition("hrAdmin"),
        "priority": 800,
    },
    {
        "id": "default:member:self-service",
        "description": "Members can manage their own leave and absence requests",
        "effect": "allow",
        "actions": ["create", "update", "cancel"],
        "resources": SELF_SERVICE_RESOURCE_SELECTORS,
        "condition": {
            "subject": {"roles": ["member"]},
            "resource": {"userId": {"op": "eq", "value": "$subject.userId"}},
        },
        "priority": 750,
    },
    {
        "id": "default:member:read",
        "description": "Members can read and list resources",
        "effect": "allow",
        "actions": ["read", "list"],
        "resources": ["*"],
        "condition": _role_condition("member"),
        "priority": 700,
    },
)


def get_bootstrap_policies() -> list[dict[str, Any]]:
    """Fresh copies of the bootstrap records, in raw record form."""
    return [
        {
            **record,
            "actions": list(record["actions"]),
            "resources": list(record["resources"]),
        }
        for record in DEFAULT_BOOTSTRAP_POLICIES
    ]
