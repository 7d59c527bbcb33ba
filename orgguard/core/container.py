"""
Dependency injection container.
Owns the lifecycle of the authorization services.
"""

from typing import Any
from dataclasses import dataclass, field

from .auth.guard import AuthorizationGuard
from .auth.interfaces import PolicyRepository
from .auth.policy.service import PolicyResolutionService, RepositoryFactory


@dataclass
class Container:
    """
    Dependency injection container.

    Holds service instances and creates them lazily on first access.

    Example:
    ```python
    from orgguard.core.container import container

    guard = container.guard
    context = await guard.assert_access(request, tenant)

    # Tests: swap the policy store
    container.policy_service.set_repository(MemoryPolicyRepository({...}))
    ```
    """

    _instances: dict[str, Any] = field(default_factory=dict)

    # Custom repository factory (defaults to the backend named in settings)
    repository_factory: RepositoryFactory | None = None

    def configure(self, repository_factory: RepositoryFactory | None = None) -> None:
        """Configure how the policy repository is built; resets instances."""
        self.repository_factory = repository_factory
        self._instances.clear()

    @property
    def policy_service(self) -> PolicyResolutionService:
        """Get the policy resolution service."""
        if "policy_service" not in self._instances:
            self._instances["policy_service"] = PolicyResolutionService(
                repository_factory=self.repository_factory,
            )
        return self._instances["policy_service"]

    @property
    def guard(self) -> AuthorizationGuard:
        """Get the authorization guard."""
        if "guard" not in self._instances:
            self._instances["guard"] = AuthorizationGuard(self.policy_service)
        return self._instances["guard"]

    def set_policy_repository(self, repository: PolicyRepository) -> None:
        """Inject a policy repository, replacing any in-flight initialization."""
        self.policy_service.set_repository(repository)

    async def shutdown(self) -> None:
        """Release the policy repository's resources."""
        service = self._instances.get("policy_service")
        if service is None:
            return
        repository = service.repository
        close = getattr(repository, "close", None)
        if close is not None:
            await close()
        service.reset_repository()


# Global container instance
container = Container()
