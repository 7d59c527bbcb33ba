"""
Policy resolution service - ABAC decision loop.

Loads a tenant's policy set, substitutes the bootstrap list when the tenant
has none, and returns the effect of the first policy whose action
selector, resource selector and condition all match. No match denies.

Usage:
    service = PolicyResolutionService()
    allowed = await service.evaluate(
        org_id, "read", "leaveRequest",
        subject_attrs={"userId": user_id, "roles": ["member"]},
        resource_attrs={"userId": owner_id},
    )
"""

import asyncio
from typing import Any, Awaitable, Callable, Mapping

import structlog

from orgguard.core.config import get_settings
from ..errors import PolicyRepositoryError
from ..interfaces import PolicyDecision, PolicyRepository
from ..registry import AuthRegistry
from ..selectors import matches_selector
from ..conditions.evaluator import ConditionEvaluator
from .defaults import get_bootstrap_policies
from .models import Policy
from .normalizer import resolve_policy_set

logger = structlog.get_logger()

RepositoryFactory = Callable[[], Awaitable[PolicyRepository]]


async def default_repository_factory() -> PolicyRepository:
    """Build the repository backend named in settings."""
    # Import to register built-in repositories
    import orgguard.repositories  # noqa: F401

    return AuthRegistry.get_policy_repository(get_settings().auth.policy_repository)


def has_role(subject_attrs: Mapping[str, Any], role: str) -> bool:
    """Check a subject's "roles" list or single "role" value."""
    roles = subject_attrs.get("roles")
    if isinstance(roles, (list, tuple, set, frozenset)) and role in roles:
        return True
    return subject_attrs.get("role") == role


def _consume_discarded_init(task: asyncio.Future) -> None:
    """Retrieve a replaced initialization's outcome, logging a failure."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.debug("abac.repository.discarded_init_failed", error=str(exc))


class PolicyResolutionService:
    """
    First-match-wins ABAC evaluation over a tenant's policy set.

    The repository is acquired lazily on first use. Concurrent first
    callers share one in-flight initialization task; set_repository()
    replaces the repository and discards that task.
    """

    def __init__(
        self,
        repository_factory: RepositoryFactory | None = None,
        condition_evaluator: ConditionEvaluator | None = None,
        owner_role: str | None = None,
    ):
        self._repository_factory = repository_factory or default_repository_factory
        self.condition_evaluator = condition_evaluator or ConditionEvaluator()
        self.owner_role = owner_role or get_settings().auth.owner_role
        self._repository: PolicyRepository | None = None
        self._repository_init: asyncio.Future | None = None

    # ============================================================
    # REPOSITORY LIFECYCLE
    # ============================================================

    async def get_repository(self) -> PolicyRepository:
        """Return the memoized repository, creating it on first call."""
        if self._repository is not None:
            return self._repository

        task = self._repository_init
        if task is None:
            task = asyncio.ensure_future(self._repository_factory())
            self._repository_init = task

        try:
            repository = await asyncio.shield(task)
        except Exception:
            if self._repository_init is task:
                self._repository_init = None
            elif self._repository is not None:
                return self._repository
            raise

        if self._repository_init is task:
            self._repository = repository
            self._repository_init = None
            return repository

        # Replaced while initializing
        if self._repository is not None:
            return self._repository
        return repository

    @property
    def repository(self) -> PolicyRepository | None:
        """The acquired repository, None before first use."""
        return self._repository

    def set_repository(self, repository: PolicyRepository) -> None:
        """Replace the repository, discarding any in-flight initialization."""
        self._discard_init()
        self._repository = repository

    def reset_repository(self) -> None:
        """Forget the repository so the next call acquires a new one."""
        self._discard_init()
        self._repository = None

    def _discard_init(self) -> None:
        task, self._repository_init = self._repository_init, None
        if task is not None:
            task.add_done_callback(_consume_discarded_init)

    # ============================================================
    # POLICY LOADING
    # ============================================================

    async def get_policies(self, org_id: str) -> list[Policy]:
        """
        Load the tenant's policies, priority descending.

        Raises:
            PolicyRepositoryError: If the repository cannot be reached
        """
        try:
            repository = await self.get_repository()
            raw_policies = await repository.get_policies_for_org(org_id)
        except PolicyRepositoryError:
            raise
        except Exception as exc:
            logger.error("abac.repository.failed", org_id=org_id, error=str(exc))
            raise PolicyRepositoryError(org_id) from exc

        raw_policies = list(raw_policies or [])
        if not raw_policies:
            logger.debug("abac.policies.bootstrap", org_id=org_id)
            raw_policies = get_bootstrap_policies()

        return resolve_policy_set(raw_policies)

    # ============================================================
    # EVALUATION
    # ============================================================

    async def decide(
        self,
        org_id: str,
        action: str,
        resource_type: str,
        subject_attrs: Mapping[str, Any] | None = None,
        resource_attrs: Mapping[str, Any] | None = None,
    ) -> PolicyDecision:
        """
        Evaluate an action on a resource type for a subject.

        Returns:
            PolicyDecision carrying the deciding policy id (for logs only)
        """
        subject_attrs = subject_attrs or {}
        resource_attrs = resource_attrs or {}

        if has_role(subject_attrs, self.owner_role):
            return PolicyDecision.allow(reason="Owner role")

        policies = await self.get_policies(org_id)
        for policy in policies:
            if not matches_selector(action, policy.actions):
                continue
            if not matches_selector(resource_type, policy.resources):
                continue
            if not self.condition_evaluator.evaluate(policy.condition, subject_attrs, resource_attrs):
                continue

            logger.debug(
                "abac.policy.matched",
                org_id=org_id,
                policy_id=policy.id,
                effect=policy.effect,
                action=action,
                resource_type=resource_type,
            )
            if policy.allows:
                return PolicyDecision.allow(reason=policy.description, policy_id=policy.id)
            return PolicyDecision.deny(reason=f"Denied by policy {policy.id}", policy_id=policy.id)

        return PolicyDecision.deny(reason="No matching policy")

    async def evaluate(
        self,
        org_id: str,
        action: str,
        resource_type: str,
        subject_attrs: Mapping[str, Any] | None = None,
        resource_attrs: Mapping[str, Any] | None = None,
    ) -> bool:
        """Boolean form of decide()."""
        decision = await self.decide(org_id, action, resource_type, subject_attrs, resource_attrs)
        return decision.allowed
