"""
Policy repositories.

Importing this package registers the built-in backends:
- "memory": MemoryPolicyRepository
- "database": DatabasePolicyRepository
"""

from .memory import MemoryPolicyRepository
from .database import DatabasePolicyRepository

__all__ = ["MemoryPolicyRepository", "DatabasePolicyRepository"]
