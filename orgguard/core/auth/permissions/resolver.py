"""
Permission profile resolution.

A permission map is {resource_key: [actions]}. A "profile" is a required
permission map; a granted map satisfies it when every required
(resource, action) pair is granted under the resource key or one of its
aliases.
"""

from typing import Collection, Iterable, Mapping

from .aliases import expand_resource_keys

PermissionMap = Mapping[str, Collection[str]]


def resolve_granted_actions(granted: PermissionMap, resource_key: str) -> set[str]:
    """Union of actions granted under a resource key and its aliases."""
    actions: set[str] = set()
    for key in expand_resource_keys(resource_key):
        actions.update(granted.get(key) or ())
    return actions


def permissions_satisfy(granted: PermissionMap, required: PermissionMap) -> bool:
    """Check that every required (resource, action) pair is granted."""
    for resource_key, required_actions in required.items():
        if not required_actions:
            continue
        granted_actions = resolve_granted_actions(granted, resource_key)
        if not all(action in granted_actions for action in required_actions):
            return False
    return True


def satisfies_any_profile(granted: PermissionMap, profiles: Iterable[PermissionMap]) -> bool:
    """
    Check that at least one profile is satisfied.

    An empty profile list places no restriction.
    """
    profiles = list(profiles)
    if not profiles:
        return True
    return any(permissions_satisfy(granted, profile) for profile in profiles)


def merge_permission_maps(*maps: PermissionMap) -> dict[str, set[str]]:
    """Union several permission maps into one."""
    merged: dict[str, set[str]] = {}
    for permission_map in maps:
        for resource_key, actions in permission_map.items():
            merged.setdefault(resource_key, set()).update(actions)
    return merged
