"""
Tests for ABAC policy resolution.
"""

import asyncio

import pytest

from orgguard.core.auth import PolicyRepository, PolicyRepositoryError, PolicyResolutionService
from orgguard.core.auth.policy import DEFAULT_BOOTSTRAP_POLICIES
from orgguard.repositories import MemoryPolicyRepository

ORG_ID = "org-1"


def policy(policy_id, effect, priority, actions=("read",), resources=("leaveRequest",), condition=None):
    record = {
        "id": policy_id,
        "description": f"{effect} {policy_id}",
        "effect": effect,
        "actions": list(actions),
        "resources": list(resources),
        "priority": priority,
    }
    if condition is not None:
        record["condition"] = condition
    return record


class FailingRepository(PolicyRepository):
    async def get_policies_for_org(self, org_id):
        raise ConnectionError("database unreachable")


# ============ Owner bypass ============


@pytest.mark.asyncio
async def test_owner_always_allowed(policy_service, memory_repository):
    """Test owners are allowed even when a policy denies everything."""
    memory_repository.set_policies(ORG_ID, [policy("deny-all", "deny", 10_000, ("*",), ("*",))])

    assert await policy_service.evaluate(ORG_ID, "delete", "organization", {"roles": ["owner"]})
    assert await policy_service.evaluate(ORG_ID, "delete", "organization", {"role": "owner"})


@pytest.mark.asyncio
async def test_owner_bypass_skips_repository():
    """Test the owner check does no repository I/O."""
    calls = []

    async def factory():
        calls.append(1)
        return FailingRepository()

    service = PolicyResolutionService(repository_factory=factory)

    assert await service.evaluate(ORG_ID, "read", "anything", {"roles": ["owner"]})
    assert calls == []


# ============ First match ============


@pytest.mark.asyncio
async def test_first_match_wins(policy_service, memory_repository):
    """Test the highest-priority matching policy decides."""
    memory_repository.set_policies(ORG_ID, [
        policy("deny", "deny", 5),
        policy("allow", "allow", 10),
    ])
    assert await policy_service.evaluate(ORG_ID, "read", "leaveRequest", {"roles": ["member"]})

    memory_repository.set_policies(ORG_ID, [
        policy("deny", "deny", 10),
        policy("allow", "allow", 5),
    ])
    assert not await policy_service.evaluate(ORG_ID, "read", "leaveRequest", {"roles": ["member"]})


@pytest.mark.asyncio
async def test_equal_priority_keeps_input_order(policy_service, memory_repository):
    """Test ties are broken by stored order, repeatably."""
    memory_repository.set_policies(ORG_ID, [
        policy("first", "deny", 5),
        policy("second", "allow", 5),
    ])

    for _ in range(3):
        decision = await policy_service.decide(ORG_ID, "read", "leaveRequest", {"roles": ["member"]})
        assert not decision.allowed
        assert decision.matched_policy_id == "first"


@pytest.mark.asyncio
async def test_non_matching_policies_are_skipped(policy_service, memory_repository):
    """Test action, resource and condition must all match."""
    memory_repository.set_policies(ORG_ID, [
        policy("wrong-action", "deny", 30, actions=("delete",)),
        policy("wrong-resource", "deny", 20, resources=("absence*",)),
        policy("wrong-dept", "deny", 15, condition={"subject": {"department": "Finance"}}),
        policy("hr-read", "allow", 10, resources=("leave*",), condition={"subject": {"department": "HR"}}),
    ])

    decision = await policy_service.decide(ORG_ID, "read", "leaveRequest", {"department": "HR"})

    assert decision.allowed
    assert decision.matched_policy_id == "hr-read"


@pytest.mark.asyncio
async def test_default_deny(policy_service, memory_repository):
    """Test no matching policy denies."""
    memory_repository.set_policies(ORG_ID, [policy("other", "allow", 10, resources=("absence",))])

    assert not await policy_service.evaluate(ORG_ID, "read", "leaveRequest", {"roles": ["member"]})


@pytest.mark.asyncio
async def test_rescued_policy_is_evaluated(policy_service, memory_repository):
    """Test a record missing optional fields still decides."""
    memory_repository.set_policies(ORG_ID, [
        {"id": "bare", "effect": "allow", "actions": ["read"], "resources": ["leaveRequest"]},
    ])

    decision = await policy_service.decide(ORG_ID, "read", "leaveRequest", {})

    assert decision.allowed
    assert decision.matched_policy_id == "bare"


# ============ Bootstrap ============


@pytest.mark.asyncio
async def test_bootstrap_when_tenant_has_no_policies(policy_service):
    """Test members read via bootstrap policies but cannot delete."""
    member = {"userId": "u1", "roles": ["member"]}

    assert await policy_service.evaluate(ORG_ID, "read", "leaveRequest", member)
    assert not await policy_service.evaluate(ORG_ID, "delete", "leaveRequest", member)


@pytest.mark.asyncio
async def test_bootstrap_member_self_service(policy_service):
    """Test members create leave only for themselves."""
    member = {"userId": "u1", "roles": ["member"]}

    assert await policy_service.evaluate(ORG_ID, "create", "leaveRequest", member, {"userId": "u1"})
    assert not await policy_service.evaluate(ORG_ID, "create", "leaveRequest", member, {"userId": "u2"})


@pytest.mark.asyncio
async def test_bootstrap_policy_set(policy_service):
    """Test the bootstrap set is used wholesale, priority 1000 down to 700."""
    policies = await policy_service.get_policies(ORG_ID)

    assert [p.id for p in policies] == [record["id"] for record in DEFAULT_BOOTSTRAP_POLICIES]
    assert policies[0].priority == 1000
    assert policies[-1].priority == 700


@pytest.mark.asyncio
async def test_stored_policies_replace_bootstrap(policy_service, memory_repository):
    """Test bootstrap policies are never merged into a stored set."""
    memory_repository.set_policies(ORG_ID, [policy("only", "allow", 1, actions=("approve",))])

    policies = await policy_service.get_policies(ORG_ID)

    assert [p.id for p in policies] == ["only"]
    assert not await policy_service.evaluate(ORG_ID, "read", "leaveRequest", {"roles": ["member"]})


# ============ Repository failures ============


@pytest.mark.asyncio
async def test_repository_failure_propagates():
    """Test a failed fetch raises instead of falling back to bootstrap."""

    async def factory():
        return FailingRepository()

    service = PolicyResolutionService(repository_factory=factory)

    with pytest.raises(PolicyRepositoryError) as exc_info:
        await service.evaluate(ORG_ID, "read", "leaveRequest", {"roles": ["member"]})

    assert exc_info.value.org_id == ORG_ID
    assert isinstance(exc_info.value.__cause__, ConnectionError)


@pytest.mark.asyncio
async def test_repository_factory_failure_is_retried():
    """Test a failed initialization is not memoized."""
    attempts = []
    repository = MemoryPolicyRepository()

    async def factory():
        attempts.append(1)
        if len(attempts) == 1:
            raise ConnectionError("not yet")
        return repository

    service = PolicyResolutionService(repository_factory=factory)

    with pytest.raises(PolicyRepositoryError):
        await service.get_policies(ORG_ID)

    assert await service.get_repository() is repository
    assert len(attempts) == 2


# ============ Lazy repository ============


@pytest.mark.asyncio
async def test_concurrent_first_calls_share_initialization():
    """Test concurrent first callers create one repository."""
    created = []

    async def factory():
        await asyncio.sleep(0.01)
        repository = MemoryPolicyRepository()
        created.append(repository)
        return repository

    service = PolicyResolutionService(repository_factory=factory)

    results = await asyncio.gather(*(service.get_repository() for _ in range(5)))

    assert len(created) == 1
    assert all(result is created[0] for result in results)
    assert await service.get_repository() is created[0]


@pytest.mark.asyncio
async def test_set_repository_replaces_in_flight_initialization():
    """Test an injected repository wins over a slow initialization."""
    release = asyncio.Event()
    slow = MemoryPolicyRepository()
    injected = MemoryPolicyRepository({ORG_ID: [policy("injected", "allow", 1)]})

    async def factory():
        await release.wait()
        return slow

    service = PolicyResolutionService(repository_factory=factory)

    pending = asyncio.ensure_future(service.get_repository())
    await asyncio.sleep(0)
    service.set_repository(injected)
    release.set()

    assert await pending is injected
    assert await service.get_repository() is injected
    assert [p.id for p in await service.get_policies(ORG_ID)] == ["injected"]


@pytest.mark.asyncio
async def test_discarded_initialization_failure_is_consumed(monkeypatch):
    """Test a replaced initialization that later fails is observed and logged."""
    events = []

    class RecordingLogger:
        def debug(self, event, **kwargs):
            events.append(event)

    monkeypatch.setattr("orgguard.core.auth.policy.service.logger", RecordingLogger())

    release = asyncio.Event()

    async def factory():
        await release.wait()
        raise RuntimeError("connection refused")

    service = PolicyResolutionService(repository_factory=factory)

    pending = asyncio.ensure_future(service.get_repository())
    await asyncio.sleep(0)
    discarded = service._repository_init

    injected = MemoryPolicyRepository()
    service.set_repository(injected)
    release.set()

    assert await pending is injected
    await asyncio.sleep(0)

    assert discarded.done()
    assert events == ["abac.repository.discarded_init_failed"]


@pytest.mark.asyncio
async def test_reset_repository_reacquires():
    """Test reset_repository forces a new acquisition."""
    created = []

    async def factory():
        repository = MemoryPolicyRepository()
        created.append(repository)
        return repository

    service = PolicyResolutionService(repository_factory=factory)

    first = await service.get_repository()
    service.reset_repository()
    second = await service.get_repository()

    assert first is not second
    assert len(created) == 2
