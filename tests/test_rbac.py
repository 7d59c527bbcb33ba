"""
Tests for the RBAC layer.
"""

from datetime import datetime, timedelta

import pytest

from orgguard.extensions.auth.rbac import (
    CUSTOM_ROLE,
    DelegatedAdminScope,
    RbacEvaluator,
    RbacRequirement,
    combine_role_statements,
    get_role_statements,
    resolve_role_key,
)
from orgguard.utils.timezone import UTC

NOW = datetime(2026, 6, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def evaluator() -> RbacEvaluator:
    return RbacEvaluator()


def hr_settings_scope(**overrides) -> DelegatedAdminScope:
    values = {
        "module": "hr",
        "expires_at": NOW + timedelta(days=1),
        "allowed_resources": ("hrSettings",),
        "allowed_actions": ("update",),
    }
    values.update(overrides)
    return DelegatedAdminScope(**values)


# ============ Roles ============


def test_resolve_role_key():
    """Test role names resolve to built-in roles or custom."""
    assert resolve_role_key("hrAdmin") == "hrAdmin"
    assert resolve_role_key("HR Admin") == "hrAdmin"
    assert resolve_role_key("org-admin") == "orgAdmin"
    assert resolve_role_key("Staff") == "member"
    assert resolve_role_key("Night Auditor") == CUSTOM_ROLE
    assert resolve_role_key(None) == CUSTOM_ROLE


def test_custom_role_has_no_statements():
    assert dict(get_role_statements(CUSTOM_ROLE)) == {}
    assert dict(get_role_statements("unknown")) == {}


def test_combine_role_statements():
    """Test statements of several roles are unioned."""
    combined = combine_role_statements(["member", "manager"])

    assert {"create", "approve"} <= combined["hrLeave"]
    assert "hrCompliance" not in combined


# ============ Requirements ============


def test_empty_requirement_allows(evaluator):
    decision = evaluator.evaluate("member", RbacRequirement(), NOW)

    assert decision.allowed
    assert decision.reasons == []


def test_required_roles(evaluator):
    """Test required roles must include the role."""
    assert evaluator.evaluate("hrAdmin", RbacRequirement(required_roles=("hrAdmin", "orgAdmin")), NOW).allowed

    decision = evaluator.evaluate("member", RbacRequirement(required_roles=("hrAdmin",)), NOW)
    assert not decision.allowed
    assert decision.reasons


def test_required_permissions_use_exact_keys(evaluator):
    """Test static statements are not alias-expanded."""
    assert evaluator.evaluate(
        "manager", RbacRequirement(required_permissions={"hrLeave": ["approve"]}), NOW
    ).allowed
    assert not evaluator.evaluate(
        "manager", RbacRequirement(required_permissions={"hr.leave.request": ["approve"]}), NOW
    ).allowed


def test_failures_accumulate_reasons(evaluator):
    decision = evaluator.evaluate(
        "member",
        RbacRequirement(required_roles=("hrAdmin",), required_permissions={"hrSettings": ["update"]}),
        NOW,
    )

    assert not decision.allowed
    assert len(decision.reasons) == 2


# ============ Delegated scopes ============


def test_delegated_scope_grants_listed_resource(evaluator):
    """Test a scope allows updating hrSettings and nothing else."""
    scope = hr_settings_scope()

    allowed = evaluator.evaluate(
        "member",
        RbacRequirement(required_permissions={"hrSettings": ["update"]}, delegated_scopes=(scope,)),
        NOW,
    )
    assert allowed.allowed
    assert allowed.matched_scope is scope

    denied = evaluator.evaluate(
        "member",
        RbacRequirement(required_permissions={"organization": ["update"]}, delegated_scopes=(scope,)),
        NOW,
    )
    assert not denied.allowed
    assert denied.matched_scope is None


def test_expired_scope_is_ignored(evaluator):
    scope = hr_settings_scope(expires_at=NOW - timedelta(seconds=1))

    decision = evaluator.evaluate(
        "member",
        RbacRequirement(required_permissions={"hrSettings": ["update"]}, delegated_scopes=(scope,)),
        NOW,
    )

    assert not decision.allowed


def test_scope_without_expiry_is_active():
    assert hr_settings_scope(expires_at=None).is_active(NOW)


def test_naive_expiry_is_treated_as_utc():
    scope = hr_settings_scope(expires_at=datetime(2026, 6, 1, 13, 0))

    assert scope.is_active(NOW)


def test_full_override_scope(evaluator):
    """Test a scope without resources overrides any requirement."""
    scope = DelegatedAdminScope(module="org", expires_at=NOW + timedelta(hours=1))

    decision = evaluator.evaluate(
        "member",
        RbacRequirement(
            required_roles=("orgAdmin",),
            required_permissions={"organization": ["delete"]},
            delegated_scopes=(scope,),
        ),
        NOW,
    )

    assert decision.allowed
    assert decision.matched_scope is scope


def test_first_satisfying_scope_wins(evaluator):
    """Test scopes are scanned in order, skipping ineligible ones."""
    expired = hr_settings_scope(expires_at=NOW - timedelta(days=1))
    unrelated = hr_settings_scope(allowed_resources=("hrLeave",))
    match = hr_settings_scope(audit_source="delegation-1")
    later = hr_settings_scope(audit_source="delegation-2")

    decision = evaluator.evaluate(
        "member",
        RbacRequirement(
            required_permissions={"hrSettings": ["update"]},
            delegated_scopes=(expired, unrelated, match, later),
        ),
        NOW,
    )

    assert decision.matched_scope is match


def test_resource_scope_does_not_satisfy_required_roles(evaluator):
    """Test a scope listing resources cannot stand in for a missing role."""
    scope = hr_settings_scope()

    decision = evaluator.evaluate(
        "member",
        RbacRequirement(required_roles=("orgAdmin",), delegated_scopes=(scope,)),
        NOW,
    )

    assert not decision.allowed
    assert decision.matched_scope is None


def test_resource_scope_does_not_cover_role_and_permissions(evaluator):
    """Test a failed role check stays failed even when the scope covers the permissions."""
    scope = hr_settings_scope()

    decision = evaluator.evaluate(
        "member",
        RbacRequirement(
            required_roles=("orgAdmin",),
            required_permissions={"hrSettings": ["update"]},
            delegated_scopes=(scope,),
        ),
        NOW,
    )

    assert not decision.allowed


def test_resource_scope_covers_permissions_when_role_passes(evaluator):
    scope = hr_settings_scope()

    decision = evaluator.evaluate(
        "member",
        RbacRequirement(
            required_roles=("member",),
            required_permissions={"hrSettings": ["update"]},
            delegated_scopes=(scope,),
        ),
        NOW,
    )

    assert decision.allowed
    assert decision.matched_scope is scope
