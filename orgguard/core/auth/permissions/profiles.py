"""
Prebuilt HR permission profiles.

Each profile is a required permission map keyed by canonical resource
keys. Pass them as required_permissions (all-of) or as entries of
required_any_permissions (any-of) on an OrgAccessRequest.

Profile groups name the any-of lists used for "can manage"/"can approve"
style checks:

    if has_profile_group(context.permissions, "LEAVE_APPROVAL"):
        ...
"""

from types import MappingProxyType
from typing import Mapping

from .resolver import PermissionMap, permissions_satisfy, satisfies_any_profile

_CRUD = ("read", "list", "create", "update", "delete")


def _profile(**resources: tuple[str, ...]) -> PermissionMap:
    return MappingProxyType({key.replace("__", "."): actions for key, actions in resources.items()})


HR_PERMISSION_PROFILES: Mapping[str, PermissionMap] = MappingProxyType({
    # Absence
    "ABSENCE_READ": _profile(hr__absence=("read",)),
    "ABSENCE_LIST": _profile(hr__absence=("list",)),
    "ABSENCE_CREATE": _profile(hr__absence=("create",)),
    "ABSENCE_UPDATE": _profile(hr__absence=("update",)),
    "ABSENCE_DELETE": _profile(hr__absence=("delete",)),
    "ABSENCE_ACKNOWLEDGE": _profile(hr__absence=("acknowledge",)),
    "ABSENCE_CANCEL": _profile(hr__absence=("cancel",)),
    "ABSENCE_MANAGE": _profile(hr__absence=("read", "list", "update", "delete", "acknowledge", "cancel")),
    "ABSENCE_SETTINGS_READ": _profile(hr__absence__settings=("read",)),
    "ABSENCE_SETTINGS_UPDATE": _profile(hr__absence__settings=("update",)),
    # Compliance
    "COMPLIANCE_READ": _profile(hr__compliance__item=("read",)),
    "COMPLIANCE_LIST": _profile(hr__compliance__item=("list",)),
    "COMPLIANCE_CREATE": _profile(hr__compliance__item=("create",)),
    "COMPLIANCE_UPDATE": _profile(hr__compliance__item=("update",)),
    "COMPLIANCE_DELETE": _profile(hr__compliance__item=("delete",)),
    "COMPLIANCE_REVIEW": _profile(hr__compliance__item=("review",)),
    "COMPLIANCE_ASSIGN": _profile(hr__compliance__item=("assign",)),
    "COMPLIANCE_MANAGE": _profile(hr__compliance__item=_CRUD + ("review", "assign")),
    "COMPLIANCE_TEMPLATE_READ": _profile(hr__compliance__template=("read",)),
    "COMPLIANCE_TEMPLATE_MANAGE": _profile(hr__compliance__template=_CRUD),
    # Leave
    "LEAVE_READ": _profile(hr__leave__request=("read",)),
    "LEAVE_LIST": _profile(hr__leave__request=("list",)),
    "LEAVE_CREATE": _profile(hr__leave__request=("create",)),
    "LEAVE_UPDATE": _profile(hr__leave__request=("update",)),
    "LEAVE_DELETE": _profile(hr__leave__request=("delete",)),
    "LEAVE_APPROVE": _profile(hr__leave__request=("approve",)),
    "LEAVE_CANCEL": _profile(hr__leave__request=("cancel",)),
    "LEAVE_MANAGE": _profile(hr__leave__request=("read", "list", "update", "delete", "approve", "cancel")),
    "LEAVE_BALANCE_READ": _profile(hr__leave__balance=("read",)),
    "LEAVE_BALANCE_ADJUST": _profile(hr__leave__balance=("adjust",)),
    "LEAVE_POLICY_READ": _profile(hr__leave__policy=("read",)),
    "LEAVE_POLICY_MANAGE": _profile(hr__leave__policy=_CRUD),
    # Notifications
    "NOTIFICATION_READ": _profile(hr__notification=("read",)),
    "NOTIFICATION_LIST": _profile(hr__notification=("list",)),
    "NOTIFICATION_CREATE": _profile(hr__notification=("create",)),
    "NOTIFICATION_MANAGE": _profile(hr__notification=_CRUD),
    "REMINDER_MANAGE": _profile(hr__reminder=("read", "list", "create", "update")),
    # Onboarding
    "ONBOARDING_READ": _profile(hr__onboarding__task=("read",)),
    "ONBOARDING_LIST": _profile(hr__onboarding__task=("list",)),
    "ONBOARDING_CREATE": _profile(hr__onboarding__task=("create",)),
    "ONBOARDING_UPDATE": _profile(hr__onboarding__task=("update",)),
    "ONBOARDING_SEND": _profile(hr__onboarding__invite=("send",)),
    "ONBOARDING_COMPLETE": _profile(hr__onboarding__task=("complete",)),
    "ONBOARDING_MANAGE": _profile(
        hr__onboarding__task=_CRUD + ("complete",),
        hr__onboarding__invite=("send",),
    ),
    "CHECKLIST_TEMPLATE_READ": _profile(hr__checklist__template=("read",)),
    "CHECKLIST_TEMPLATE_MANAGE": _profile(hr__checklist__template=_CRUD),
    # People
    "PROFILE_READ": _profile(hr__people__profile=("read",)),
    "PROFILE_LIST": _profile(hr__people__profile=("list",)),
    "PROFILE_CREATE": _profile(hr__people__profile=("create",)),
    "PROFILE_UPDATE": _profile(hr__people__profile=("update",)),
    "PROFILE_DELETE": _profile(hr__people__profile=("delete",)),
    "PROFILE_MANAGE": _profile(hr__people__profile=_CRUD),
    "CONTRACT_READ": _profile(hr__people__contract=("read",)),
    "CONTRACT_LIST": _profile(hr__people__contract=("list",)),
    "CONTRACT_MANAGE": _profile(hr__people__contract=_CRUD),
    # Performance
    "PERFORMANCE_READ": _profile(hr__performance__review=("read",)),
    "PERFORMANCE_LIST": _profile(hr__performance__review=("list",)),
    "PERFORMANCE_CREATE": _profile(hr__performance__review=("create",)),
    "PERFORMANCE_UPDATE": _profile(hr__performance__review=("update",)),
    "PERFORMANCE_DELETE": _profile(hr__performance__review=("delete",)),
    "PERFORMANCE_FEEDBACK": _profile(hr__performance__feedback=("create", "update")),
    "PERFORMANCE_MANAGE": _profile(hr__performance__review=_CRUD),
    "PERFORMANCE_GOAL_READ": _profile(hr__performance__goal=("read",)),
    "PERFORMANCE_GOAL_MANAGE": _profile(hr__performance__goal=_CRUD),
    # Handbook policies
    "POLICY_READ": _profile(hr__policy=("read",)),
    "POLICY_LIST": _profile(hr__policy=("list",)),
    "POLICY_CREATE": _profile(hr__policy=("create",)),
    "POLICY_UPDATE": _profile(hr__policy=("update",)),
    "POLICY_ACKNOWLEDGE": _profile(hr__policy__acknowledgment=("acknowledge",)),
    "POLICY_PUBLISH": _profile(hr__policy=("publish",)),
    "POLICY_MANAGE": _profile(hr__policy=_CRUD + ("publish", "unpublish")),
    # Settings
    "SETTINGS_READ": _profile(hr__settings=("read",)),
    "SETTINGS_UPDATE": _profile(hr__settings=("update",)),
    "ORG_SETTINGS_READ": _profile(org__settings=("read",)),
    "ORG_SETTINGS_UPDATE": _profile(org__settings=("update",)),
    # Time tracking
    "TIME_ENTRY_READ": _profile(hr__time__entry=("read",)),
    "TIME_ENTRY_LIST": _profile(hr__time__entry=("list",)),
    "TIME_ENTRY_CREATE": _profile(hr__time__entry=("create",)),
    "TIME_ENTRY_UPDATE": _profile(hr__time__entry=("update",)),
    "TIME_ENTRY_DELETE": _profile(hr__time__entry=("delete",)),
    "TIME_ENTRY_APPROVE": _profile(hr__time__entry=("approve",)),
    "TIME_ENTRY_MANAGE": _profile(hr__time__entry=_CRUD + ("approve",)),
    # Training
    "TRAINING_READ": _profile(hr__training__record=("read",)),
    "TRAINING_LIST": _profile(hr__training__record=("list",)),
    "TRAINING_ENROLL": _profile(hr__training__enrollment=("enroll",)),
    "TRAINING_COMPLETE": _profile(hr__training__enrollment=("complete",)),
    "TRAINING_MANAGE": _profile(
        hr__training__record=_CRUD,
        hr__training__enrollment=("enroll", "complete"),
    ),
})


def _group(*names: str) -> tuple[PermissionMap, ...]:
    return tuple(HR_PERMISSION_PROFILES[name] for name in names)


# Any-of lists: satisfying one profile is enough
HR_PROFILE_GROUPS: Mapping[str, tuple[PermissionMap, ...]] = MappingProxyType({
    "ABSENCE_MANAGEMENT": _group("ABSENCE_MANAGE", "ABSENCE_SETTINGS_UPDATE"),
    "LEAVE_APPROVAL": _group("LEAVE_APPROVE", "LEAVE_MANAGE"),
    "LEAVE_MANAGEMENT": _group("LEAVE_MANAGE", "LEAVE_POLICY_MANAGE", "LEAVE_BALANCE_ADJUST"),
    "COMPLIANCE_MANAGEMENT": _group("COMPLIANCE_MANAGE", "COMPLIANCE_TEMPLATE_MANAGE"),
    "TIME_ENTRY_APPROVAL": _group("TIME_ENTRY_APPROVE", "TIME_ENTRY_MANAGE"),
    "TIME_TRACKING_MANAGEMENT": _group("TIME_ENTRY_MANAGE"),
    "TRAINING_MANAGEMENT": _group("TRAINING_MANAGE"),
    "ONBOARDING_MANAGEMENT": _group("ONBOARDING_MANAGE", "CHECKLIST_TEMPLATE_MANAGE"),
    "PERFORMANCE_MANAGEMENT": _group("PERFORMANCE_MANAGE", "PERFORMANCE_GOAL_MANAGE"),
    "POLICY_MANAGEMENT": _group("POLICY_MANAGE", "POLICY_PUBLISH"),
    "PEOPLE_MANAGEMENT": _group("PROFILE_MANAGE", "CONTRACT_MANAGE"),
    "NOTIFICATION_MANAGEMENT": _group("NOTIFICATION_MANAGE", "REMINDER_MANAGE"),
})


# ============================================================
# LOOKUPS
# ============================================================

def get_profile(name: str) -> PermissionMap:
    """
    Get a prebuilt profile by name.

    Raises:
        ValueError: If profile not found
    """
    profile = HR_PERMISSION_PROFILES.get(name)
    if profile is None:
        available = list(HR_PERMISSION_PROFILES.keys())
        raise ValueError(
            f"Unknown permission profile: '{name}'. "
            f"Available: {available}"
        )
    return profile


def get_profile_group(name: str) -> tuple[PermissionMap, ...]:
    """
    Get a profile group by name.

    Raises:
        ValueError: If group not found
    """
    group = HR_PROFILE_GROUPS.get(name)
    if group is None:
        available = list(HR_PROFILE_GROUPS.keys())
        raise ValueError(
            f"Unknown permission profile group: '{name}'. "
            f"Available: {available}"
        )
    return group


def has_profile(granted: PermissionMap, name: str) -> bool:
    """Check a granted map against one named profile."""
    return permissions_satisfy(granted, get_profile(name))


def has_profile_group(granted: PermissionMap, name: str) -> bool:
    """Check a granted map against any profile of a named group."""
    return satisfies_any_profile(granted, get_profile_group(name))
