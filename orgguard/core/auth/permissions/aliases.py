"""
Resource key aliases.

Permission maps are authored under two naming conventions: canonical
dotted keys ("hr.leave.request") and legacy short keys ("hrLeave"). The
table below maps each canonical key to its legacy keys; forward and
reverse lookups are built once at import.
"""

from types import MappingProxyType
from typing import Mapping

RESOURCE_ALIASES: Mapping[str, tuple[str, ...]] = MappingProxyType({
    # Absence
    "hr.absence": ("hrAbsence",),
    "hr.absence.settings": ("hrAbsenceSettings",),
    "hr.absence.attachment": ("hrAbsence",),
    # Compliance
    "hr.compliance.item": ("hrCompliance",),
    "hr.compliance.template": ("hrComplianceTemplate",),
    "hr.compliance.review": ("hrCompliance",),
    # Leave
    "hr.leave.request": ("hrLeave",),
    "hr.leave.balance": ("hrLeaveBalance",),
    "hr.leave.policy": ("hrLeavePolicy",),
    "hr.leave.type": ("hrLeavePolicy",),
    # Notifications
    "hr.notification": ("hrNotification",),
    "hr.reminder": ("hrNotification",),
    # Onboarding
    "hr.onboarding.invite": ("hrOnboarding",),
    "hr.onboarding.task": ("hrOnboarding",),
    "hr.onboarding.checklist": ("hrOnboarding",),
    "hr.checklist.template": ("hrChecklistTemplate",),
    # People
    "hr.people.profile": ("employeeProfile",),
    "hr.people.contract": ("employmentContract",),
    # Performance
    "hr.performance.review": ("hrPerformance",),
    "hr.performance.goal": ("hrPerformanceGoal",),
    "hr.performance.feedback": ("hrPerformance",),
    # Policies
    "hr.policy": ("hrPolicy",),
    "hr.policy.acknowledgment": ("hrPolicy",),
    # Settings
    "hr.settings": ("hrSettings",),
    "org.settings": ("organization",),
    # Time tracking
    "hr.time.entry": ("hrTimeEntry",),
    "hr.time.sheet": ("hrTimeEntry",),
    # Training
    "hr.training.record": ("hrTraining",),
    "hr.training.enrollment": ("hrTraining",),
})


def _build_reverse(forward: Mapping[str, tuple[str, ...]]) -> Mapping[str, tuple[str, ...]]:
    reverse: dict[str, list[str]] = {}
    for canonical, legacy_keys in forward.items():
        for legacy in legacy_keys:
            reverse.setdefault(legacy, []).append(canonical)
    return MappingProxyType({legacy: tuple(keys) for legacy, keys in reverse.items()})


# legacy key -> canonical keys aliasing to it
LEGACY_TO_CANONICAL = _build_reverse(RESOURCE_ALIASES)


def expand_resource_keys(resource_key: str) -> tuple[str, ...]:
    """
    All keys a granted permission may be stored under for a resource.

    Examples:
        expand_resource_keys("hr.leave.request") -> ("hr.leave.request", "hrLeave")
        expand_resource_keys("hrLeave")          -> ("hrLeave", "hr.leave.request")
    """
    keys = [resource_key]
    for alias in RESOURCE_ALIASES.get(resource_key, ()) + LEGACY_TO_CANONICAL.get(resource_key, ()):
        if alias not in keys:
            keys.append(alias)
    return tuple(keys)
