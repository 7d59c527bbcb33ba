"""SQLAlchemy models."""

from .base import Base, TimestampMixin
from .abac_policy import AbacPolicyRecord
from .database import create_engine, create_session_factory, init_db

__all__ = [
    "Base",
    "TimestampMixin",
    "AbacPolicyRecord",
    "create_engine",
    "create_session_factory",
    "init_db",
]
