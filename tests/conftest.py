"""
Pytest fixtures for testing.

Provides:
- Memory-backed policy service and guard
- Tenant scope for a UK_ONLY / OFFICIAL_SENSITIVE organization
- Async SQLite engine with the policy table created
- Test client for a FastAPI app using the guard dependency
"""

from typing import Annotated, AsyncGenerator

import pytest
import pytest_asyncio
from fastapi import Depends, FastAPI, Request
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from orgguard.core.auth import (
    AuthorizationGuard,
    DataClassificationLevel,
    DataResidencyZone,
    OrgAccessContext,
    PolicyResolutionService,
    TenantScope,
)
from orgguard.core.auth.dependencies import (
    AccessSubject,
    get_authorization_guard,
    require_org_access,
)
from orgguard.models.base import Base
from orgguard.repositories import MemoryPolicyRepository
from orgguard.utils.context import RequestContextMiddleware


# Test database URL (SQLite in-memory for speed)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

ORG_ID = "org-1"
USER_ID = "user-1"


@pytest.fixture
def memory_repository() -> MemoryPolicyRepository:
    """Empty in-memory policy store."""
    return MemoryPolicyRepository()


@pytest.fixture
def policy_service(memory_repository: MemoryPolicyRepository) -> PolicyResolutionService:
    """Policy service reading from the memory repository."""

    async def factory():
        return memory_repository

    return PolicyResolutionService(repository_factory=factory)


@pytest.fixture
def guard(policy_service: PolicyResolutionService) -> AuthorizationGuard:
    return AuthorizationGuard(policy_service)


@pytest.fixture
def tenant() -> TenantScope:
    return TenantScope(
        org_id=ORG_ID,
        data_residency=DataResidencyZone.UK_ONLY,
        data_classification=DataClassificationLevel.OFFICIAL_SENSITIVE,
    )


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def session_factory(db_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture(scope="function")
async def client(guard: AuthorizationGuard, tenant: TenantScope) -> AsyncGenerator[AsyncClient, None]:
    """
    Test client for an app whose routes use require_org_access.

    The subject is taken from X-Test-* headers by a stand-in middleware.
    """
    app: FastAPI = build_app(tenant)
    app.dependency_overrides[get_authorization_guard] = lambda: guard

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()


# ============ Test App ============


def build_app(tenant: TenantScope) -> FastAPI:
    """
    Minimal app exercising the guard dependency.

    Session handling is out of scope, so a stand-in middleware builds the
    subject from X-Test-User / X-Test-Roles headers.
    """
    app = FastAPI()
    app.add_middleware(RequestContextMiddleware)

    @app.middleware("http")
    async def attach_subject(request: Request, call_next):
        user_id = request.headers.get("X-Test-User")
        if user_id:
            roles = tuple(filter(None, request.headers.get("X-Test-Roles", "").split(",")))
            request.state.access_subject = AccessSubject(
                org_id=tenant.org_id,
                user_id=user_id,
                roles=roles,
            )
            request.state.tenant_scope = tenant
        return await call_next(request)

    @app.get("/leave/{userId}")
    async def read_leave(
        userId: str,
        access: Annotated[OrgAccessContext, Depends(require_org_access("read", "leaveRequest"))],
    ):
        return {"user_id": access.user_id, "correlation_id": access.correlation_id}

    @app.delete("/leave/{userId}")
    async def delete_leave(
        userId: str,
        access: Annotated[OrgAccessContext, Depends(require_org_access("delete", "leaveRequest"))],
    ):
        return {"deleted": userId}

    @app.get("/secret")
    async def read_secret(
        access: Annotated[
            OrgAccessContext,
            Depends(require_org_access(expected_classification=DataClassificationLevel.SECRET)),
        ],
    ):
        return {"ok": True}

    return app
