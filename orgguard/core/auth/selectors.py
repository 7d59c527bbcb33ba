"""
Selector matching for policy actions and resources.

A selector is either "*" (everything), a string ending in "*" (prefix
match on a non-empty prefix), or an exact string. No regex semantics.
"""

from typing import Iterable

WILDCARD = "*"


def matches_selector(value: str, patterns: Iterable[str]) -> bool:
    """
    Check whether a literal action/resource matches any selector.

    Examples:
        matches_selector("read", ["*"])              -> True
        matches_selector("hr.leave", ["hr.*"])       -> True
        matches_selector("xhr.leave", ["hr*"])       -> False
        matches_selector("read", ["read", "list"])   -> True
    """
    for pattern in patterns:
        if not isinstance(pattern, str):
            continue
        if pattern == WILDCARD:
            return True
        if pattern.endswith(WILDCARD):
            prefix = pattern[:-1]
            if prefix and value.startswith(prefix):
                return True
            continue
        if pattern == value:
            return True
    return False
