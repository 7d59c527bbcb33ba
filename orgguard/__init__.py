"""
orgguard - multi-tenant authorization core.

Combines static role permissions (RBAC), per-tenant attribute policies
(ABAC) and tenant data clearance checks behind a single guard.
"""

__version__ = "0.1.0"
