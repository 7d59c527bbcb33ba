"""
Database connection and session management.
"""

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    create_async_engine,
    async_sessionmaker,
)

from orgguard.core.config import DatabaseSettings, get_settings


def create_engine(database: DatabaseSettings | None = None) -> AsyncEngine:
    """Create an async engine from database settings."""
    database = database or get_settings().database
    options = {"echo": database.echo}
    if not database.url.startswith("sqlite"):
        options.update(
            pool_size=database.pool_size,
            max_overflow=database.pool_overflow,
            pool_timeout=database.pool_timeout,
        )
    return create_async_engine(database.url, **options)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to an engine."""
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def init_db(engine: AsyncEngine) -> None:
    """Initialize database (create tables)."""
    from .base import Base
    from . import abac_policy  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
