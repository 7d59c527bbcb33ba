"""
Permission maps, resource aliasing and profile checks.
"""

from .aliases import RESOURCE_ALIASES, LEGACY_TO_CANONICAL, expand_resource_keys
from .resolver import (
    PermissionMap,
    resolve_granted_actions,
    permissions_satisfy,
    satisfies_any_profile,
    merge_permission_maps,
)
from .profiles import (
    HR_PERMISSION_PROFILES,
    HR_PROFILE_GROUPS,
    get_profile,
    get_profile_group,
    has_profile,
    has_profile_group,
)

__all__ = [
    "RESOURCE_ALIASES",
    "LEGACY_TO_CANONICAL",
    "expand_resource_keys",
    "PermissionMap",
    "resolve_granted_actions",
    "permissions_satisfy",
    "satisfies_any_profile",
    "merge_permission_maps",
    "HR_PERMISSION_PROFILES",
    "HR_PROFILE_GROUPS",
    "get_profile",
    "get_profile_group",
    "has_profile",
    "has_profile_group",
]
