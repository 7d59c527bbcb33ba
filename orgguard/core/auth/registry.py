"""
Authorization plugin registry.

Allows registering condition operators and policy repositories without
modifying core code. Implementations register themselves using decorators.

Usage:
    @AuthRegistry.operator("eq")
    class EqualsOperator(ConditionOperator):
        ...

    @AuthRegistry.policy_repository("memory")
    class MemoryPolicyRepository(PolicyRepository):
        ...

    # Later, get by name:
    repository = AuthRegistry.get_policy_repository("memory")
"""

from typing import Type, Callable, Any
from .interfaces import ConditionOperator, PolicyRepository


class AuthRegistry:
    """
    Central registry for authorization components.

    Components register themselves using decorators.
    This enables extensibility without modifying factory code.
    """

    _operators: dict[str, Type[ConditionOperator]] = {}
    _policy_repositories: dict[str, Type[PolicyRepository]] = {}

    # ============================================================
    # REGISTRATION DECORATORS
    # ============================================================

    @classmethod
    def operator(cls, name: str) -> Callable[[Type[ConditionOperator]], Type[ConditionOperator]]:
        """
        Decorator to register a condition operator.

        Usage:
            @AuthRegistry.operator("gt")
            class GreaterThanOperator(ConditionOperator):
                ...
        """
        def decorator(operator_class: Type[ConditionOperator]) -> Type[ConditionOperator]:
            cls._operators[name] = operator_class
            return operator_class
        return decorator

    @classmethod
    def policy_repository(cls, name: str) -> Callable[[Type[PolicyRepository]], Type[PolicyRepository]]:
        """
        Decorator to register a policy repository backend.

        Usage:
            @AuthRegistry.policy_repository("database")
            class DatabasePolicyRepository(PolicyRepository):
                ...
        """
        def decorator(repository_class: Type[PolicyRepository]) -> Type[PolicyRepository]:
            cls._policy_repositories[name] = repository_class
            return repository_class
        return decorator

    # ============================================================
    # GETTERS
    # ============================================================

    @classmethod
    def get_operator(cls, name: str, **kwargs: Any) -> ConditionOperator:
        """
        Get a condition operator by name.

        Raises:
            ValueError: If operator not found
        """
        operator_class = cls._operators.get(name)
        if not operator_class:
            available = list(cls._operators.keys())
            raise ValueError(
                f"Unknown condition operator: '{name}'. "
                f"Available: {available}"
            )
        return operator_class(**kwargs)

    @classmethod
    def get_policy_repository(cls, name: str, **kwargs: Any) -> PolicyRepository:
        """
        Get a policy repository by name.

        Args:
            name: Registered name of the backend
            **kwargs: Arguments to pass to the repository constructor

        Raises:
            ValueError: If repository not found
        """
        repository_class = cls._policy_repositories.get(name)
        if not repository_class:
            available = list(cls._policy_repositories.keys())
            raise ValueError(
                f"Unknown policy repository: '{name}'. "
                f"Available: {available}"
            )
        return repository_class(**kwargs)

    # ============================================================
    # INTROSPECTION
    # ============================================================

    @classmethod
    def has_operator(cls, name: str) -> bool:
        """Check if an operator is registered."""
        return name in cls._operators

    @classmethod
    def has_policy_repository(cls, name: str) -> bool:
        """Check if a policy repository is registered."""
        return name in cls._policy_repositories
