"""
Tests for the FastAPI guard dependency.
"""

import pytest
from httpx import AsyncClient


MEMBER_HEADERS = {"X-Test-User": "user-1", "X-Test-Roles": "member"}


@pytest.mark.asyncio
async def test_allowed_request(client: AsyncClient):
    """Test a member can read leave through the bootstrap policies."""
    response = await client.get("/leave/user-1", headers=MEMBER_HEADERS)

    assert response.status_code == 200
    assert response.json()["user_id"] == "user-1"


@pytest.mark.asyncio
async def test_denied_request_is_generic_403(client: AsyncClient):
    """Test a denial maps to 403 without policy details."""
    response = await client.delete("/leave/user-1", headers=MEMBER_HEADERS)

    assert response.status_code == 403
    assert response.json() == {"detail": "Not authorized"}


@pytest.mark.asyncio
async def test_owner_can_delete(client: AsyncClient):
    response = await client.delete(
        "/leave/user-2",
        headers={"X-Test-User": "user-9", "X-Test-Roles": "owner"},
    )

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_clearance_denial_is_403(client: AsyncClient):
    response = await client.get("/secret", headers=MEMBER_HEADERS)

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_unauthenticated_request_is_401(client: AsyncClient):
    response = await client.get("/leave/user-1")

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_correlation_id_propagates(client: AsyncClient):
    """Test the request correlation id is stamped on the access context."""
    response = await client.get(
        "/leave/user-1",
        headers={**MEMBER_HEADERS, "X-Correlation-ID": "corr-42"},
    )

    assert response.json()["correlation_id"] == "corr-42"
    assert response.headers["X-Correlation-ID"] == "corr-42"


@pytest.mark.asyncio
async def test_repository_failure_is_503(client: AsyncClient, policy_service):
    """Test an unavailable policy store is not reported as a denial."""

    class Broken:
        async def get_policies_for_org(self, org_id):
            raise ConnectionError("down")

    policy_service.set_repository(Broken())

    response = await client.get("/leave/user-1", headers=MEMBER_HEADERS)

    assert response.status_code == 503
