"""
Request Context Utilities.

Provides correlation IDs and tenant context for:
- Log correlation of authorization decisions
- Stamping guard results with the caller's correlation ID

Usage:
    # In middleware (automatic)
    app.add_middleware(RequestContextMiddleware)

    # Access anywhere in request lifecycle
    from orgguard.utils.context import get_correlation_id

    correlation_id = get_correlation_id()
    logger.info("Evaluating", correlation_id=correlation_id)
"""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Callable, Iterator, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


# ============================================================
# CONTEXT VARIABLES
# ============================================================

# Request-scoped context using contextvars (async-safe)
_correlation_id: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)
_org_id: ContextVar[Optional[str]] = ContextVar("org_id", default=None)
_user_id: ContextVar[Optional[str]] = ContextVar("user_id", default=None)


# ============================================================
# CONTEXT ACCESSORS
# ============================================================

def get_correlation_id() -> Optional[str]:
    """
    Get the current correlation ID.

    Returns None if called outside of a request context.
    """
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> None:
    """Set the correlation ID for the current context."""
    _correlation_id.set(correlation_id)


@contextmanager
def tenant_context(org_id: str, user_id: Optional[str] = None) -> Iterator[None]:
    """
    Bind the tenant and actor being authorized.

    Log lines emitted inside the block carry org_id/user_id. If the block
    raises, the previous values are restored.
    """
    org_token = _org_id.set(org_id)
    user_token = _user_id.set(user_id) if user_id is not None else None
    try:
        yield
    except BaseException:
        _org_id.reset(org_token)
        if user_token is not None:
            _user_id.reset(user_token)
        raise


def get_context_tenant() -> tuple[Optional[str], Optional[str]]:
    """Get (org_id, user_id) for the current context."""
    return _org_id.get(), _user_id.get()


# ============================================================
# MIDDLEWARE
# ============================================================

class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Middleware that sets the correlation ID for each request.

    Uses the X-Correlation-ID header when present, otherwise generates one,
    and echoes it on the response.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        correlation_id = (
            request.headers.get("X-Correlation-ID") or
            request.headers.get("X-Request-ID") or
            str(uuid.uuid4())
        )
        _correlation_id.set(correlation_id)
        request.state.correlation_id = correlation_id

        response = await call_next(request)
        response.headers["X-Correlation-ID"] = correlation_id
        return response


# ============================================================
# STRUCTLOG PROCESSOR
# ============================================================

def add_request_context(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """
    Structlog processor that adds request context to all logs.

    Installed by orgguard.core.logging.configure_logging.
    """
    correlation_id = get_correlation_id()
    if correlation_id:
        event_dict.setdefault("correlation_id", correlation_id)

    org_id, user_id = get_context_tenant()
    if org_id:
        event_dict.setdefault("org_id", org_id)
    if user_id:
        event_dict.setdefault("user_id", user_id)

    return event_dict
