"""
Authorization interfaces - Core abstractions.

These define the contracts that evaluation components and collaborators
must follow. The guard and the policy resolution service depend ONLY on
these interfaces, never on concrete repositories.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


# ============================================================
# POLICY DECISION
# ============================================================

@dataclass
class PolicyDecision:
    """
    Result of an ABAC evaluation.

    Attributes:
        allowed: Whether the action is permitted
        reason: Internal explanation (for logging only, never shown to users)
        matched_policy_id: Id of the policy that decided, if any
    """
    allowed: bool
    reason: str | None = None
    matched_policy_id: str | None = None

    @classmethod
    def allow(cls, reason: str | None = None, policy_id: str | None = None) -> "PolicyDecision":
        return cls(allowed=True, reason=reason, matched_policy_id=policy_id)

    @classmethod
    def deny(cls, reason: str = "Permission denied", policy_id: str | None = None) -> "PolicyDecision":
        return cls(allowed=False, reason=reason, matched_policy_id=policy_id)


# ============================================================
# POLICY REPOSITORY
# ============================================================

class PolicyRepository(ABC):
    """
    Source of a tenant's stored ABAC policy records.

    Records are untrusted JSON-like values; they may be partially malformed.
    Implementations must return an empty list for "no policies" and raise
    for infrastructure failures.

    Implementations:
    - MemoryPolicyRepository: dict-backed (tests, development)
    - DatabasePolicyRepository: SQLAlchemy async
    """

    @abstractmethod
    async def get_policies_for_org(self, org_id: str) -> list[Any]:
        """Return the raw policy records stored for an organization."""
        pass


# ============================================================
# CONDITION OPERATOR
# ============================================================

class ConditionOperator(ABC):
    """
    Applies one comparison operator of a policy condition.

    Register implementations with @AuthRegistry.operator("name").
    Operators must never raise for odd inputs; they return False instead.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Operator identifier used in policy predicates (e.g. "eq")."""
        pass

    @abstractmethod
    def apply(self, actual: Any, expected: Any) -> bool:
        """
        Compare an actual attribute value with the resolved expected value.

        Args:
            actual: Value read from the subject or resource attribute map
            expected: Resolved rule value (scalar or list)

        Returns:
            True if the comparison holds
        """
        pass
