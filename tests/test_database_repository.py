"""
Tests for the SQL policy repository.
"""

import pytest

from orgguard.core.auth import PolicyResolutionService
from orgguard.repositories import DatabasePolicyRepository


RECORDS = [
    {
        "id": "hr-read",
        "description": "HR can read",
        "effect": "allow",
        "actions": ["read"],
        "resources": ["employee*"],
        "condition": {"subject": {"department": "HR"}},
        "priority": 5,
    },
    {"id": "partial", "effect": "deny", "actions": ["delete"], "resources": ["*"]},
    "not even a record",
]


@pytest.mark.asyncio
async def test_round_trip_keeps_raw_records_in_order(session_factory):
    """Test stored records come back untouched and in saved order."""
    repository = DatabasePolicyRepository(session_factory=session_factory)

    await repository.save_policies("org-1", RECORDS)

    assert await repository.get_policies_for_org("org-1") == RECORDS


@pytest.mark.asyncio
async def test_tenants_are_isolated(session_factory):
    repository = DatabasePolicyRepository(session_factory=session_factory)

    await repository.save_policies("org-1", RECORDS)

    assert await repository.get_policies_for_org("org-2") == []


@pytest.mark.asyncio
async def test_save_replaces_existing_records(session_factory):
    repository = DatabasePolicyRepository(session_factory=session_factory)

    await repository.save_policies("org-1", RECORDS)
    await repository.save_policies("org-1", RECORDS[:1])

    assert await repository.get_policies_for_org("org-1") == RECORDS[:1]


@pytest.mark.asyncio
async def test_service_evaluates_stored_policies(session_factory):
    """Test the service normalizes records read from the database."""
    repository = DatabasePolicyRepository(session_factory=session_factory)
    await repository.save_policies("org-1", RECORDS)

    async def factory():
        return repository

    service = PolicyResolutionService(repository_factory=factory)

    assert [p.id for p in await service.get_policies("org-1")] == ["hr-read", "partial"]
    assert await service.evaluate("org-1", "read", "employeeProfile", {"department": "HR"})
    assert not await service.evaluate("org-1", "delete", "employeeProfile", {"department": "HR"})
