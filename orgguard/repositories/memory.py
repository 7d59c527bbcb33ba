"""
In-memory policy repository.

For development and testing. Data is lost on restart.
"""

import copy
from typing import Any, Iterable

from orgguard.core.auth.interfaces import PolicyRepository
from orgguard.core.auth.registry import AuthRegistry


@AuthRegistry.policy_repository("memory")
class MemoryPolicyRepository(PolicyRepository):
    """
    Dict-backed policy storage keyed by organization id.

    Returns deep copies so callers can never mutate stored records.
    """

    def __init__(self, policies: dict[str, Iterable[Any]] | None = None):
        self._policies: dict[str, list[Any]] = {
            org_id: list(records) for org_id, records in (policies or {}).items()
        }

    async def get_policies_for_org(self, org_id: str) -> list[Any]:
        """Return the raw records stored for an organization."""
        return copy.deepcopy(self._policies.get(org_id, []))

    def set_policies(self, org_id: str, records: Iterable[Any]) -> None:
        """Replace an organization's records."""
        self._policies[org_id] = list(records)
