"""
Database policy repository.

Stores one raw policy record per row (SQLAlchemy async). Rows are read
in position order so equal-priority policies keep the order their
administrator saved them in.
"""

from typing import Any, Iterable

import structlog
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from orgguard.core.auth.interfaces import PolicyRepository
from orgguard.core.auth.registry import AuthRegistry
from orgguard.models.abac_policy import AbacPolicyRecord
from orgguard.models.database import create_engine, create_session_factory

logger = structlog.get_logger()


@AuthRegistry.policy_repository("database")
class DatabasePolicyRepository(PolicyRepository):
    """
    SQL-backed policy storage.

    Without a session factory the engine is created from settings on
    first use and disposed by close().
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession] | None = None):
        self._session_factory = session_factory
        self._engine: AsyncEngine | None = None

    def _get_session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            self._engine = create_engine()
            self._session_factory = create_session_factory(self._engine)
        return self._session_factory

    async def get_policies_for_org(self, org_id: str) -> list[Any]:
        """Return the raw records stored for an organization."""
        query = (
            select(AbacPolicyRecord.payload)
            .where(AbacPolicyRecord.org_id == org_id)
            .order_by(AbacPolicyRecord.position, AbacPolicyRecord.id)
        )
        async with self._get_session_factory()() as session:
            result = await session.execute(query)
            records = list(result.scalars().all())

        logger.debug("abac.repository.loaded", org_id=org_id, count=len(records))
        return records

    async def save_policies(self, org_id: str, records: Iterable[Any]) -> None:
        """Replace an organization's records (seeding and fixtures)."""
        async with self._get_session_factory()() as session:
            async with session.begin():
                await session.execute(
                    delete(AbacPolicyRecord).where(AbacPolicyRecord.org_id == org_id)
                )
                session.add_all([
                    AbacPolicyRecord(org_id=org_id, position=position, payload=record)
                    for position, record in enumerate(records)
                ])

    async def close(self) -> None:
        """Dispose the engine this repository created, if any."""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
