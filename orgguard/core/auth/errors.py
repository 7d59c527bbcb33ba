"""
Authorization errors.

AuthorizationError is an expected outcome (a denial), not a system failure.
Its message is deliberately generic; the internal reason is kept on the
exception for logs and must never be echoed to end users.
"""

GENERIC_DENIAL_MESSAGE = "You are not authorized to perform this action."


class AuthorizationError(Exception):
    """Raised by the guard when any authorization step denies access."""

    def __init__(self, reason: str, *, step: str = "abac"):
        super().__init__(GENERIC_DENIAL_MESSAGE)
        self.reason = reason
        self.step = step


class PolicyRepositoryError(Exception):
    """Raised when a tenant's policies cannot be fetched."""

    def __init__(self, org_id: str, message: str = "Policy repository unavailable"):
        super().__init__(f"{message} (org_id={org_id})")
        self.org_id = org_id
