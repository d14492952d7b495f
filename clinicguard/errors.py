"""
Authorization error taxonomy and the stable denial reasons.

Every error subclasses ``ValueError`` so request handlers can keep a single
``except ValueError`` branch for expected, recoverable outcomes.
"""

from typing import Optional

# ── Denial reasons (machine-checkable, stable) ───────────────────────
CROSS_TENANT = "cross-tenant access"
NO_TENANT_CONTEXT = "no tenant context"
UNAUTHORIZED = "unauthorized"
CANNOT_MODIFY_SUPER_ADMIN = "cannot modify super admin role"
CANNOT_GRANT_SUPER_ADMIN = "cannot grant super admin role"
CANNOT_REMOVE_SELF = "cannot remove yourself"
SUPER_ADMIN_ONLY_TENANTS = "only super admins can create tenants"
SUPER_ADMIN_ONLY = "only super admins can perform this action"
MISSING_CAPABILITY = "missing capability"
VIEW_NOT_PERMITTED = "view not permitted"
TENANT_PENDING = "tenant pending approval"


class AuthorizationError(ValueError):
    """Base class for every outcome the kernel reports by raising."""


class PrincipalNotFound(AuthorizationError):
    """The calling user record could not be loaded."""

    def __init__(self, principal_id: str):
        self.principal_id = principal_id
        super().__init__(f"Principal {principal_id!r} not found")


class Denied(AuthorizationError):
    """A capability, view, tenant or privilege check failed.

    ``reason`` is one of the module-level reason constants and is safe to
    assert on; the message shown to end users should stay generic.
    """

    def __init__(self, reason: str, detail: Optional[str] = None):
        self.reason = reason
        self.detail = detail
        msg = f"Denied: {reason}"
        if detail:
            msg += f" ({detail})"
        super().__init__(msg)


class TargetNotFound(AuthorizationError):
    """A role change or removal referenced a missing or out-of-tenant user."""

    def __init__(self, target_id: str, tenant_id: Optional[str] = None):
        self.target_id = target_id
        self.tenant_id = tenant_id
        msg = f"User {target_id!r} not found"
        if tenant_id is not None:
            msg += f" (tenant={tenant_id})"
        super().__init__(msg)


class UnknownCapabilityError(AuthorizationError):
    """A guard referenced a capability missing from the catalog.

    This is a configuration error in the calling code, not a runtime denial.
    """

    def __init__(self, capability: str):
        self.capability = capability
        super().__init__(f"Capability {capability!r} is not defined in the catalog")
