"""
Tenant isolation guard.

``authorize_tenant_access`` holds the only SuperAdmin bypass in the kernel.
Everything else that needs tenant scoping calls it rather than re-checking
the role inline.
"""

import logging
from typing import Optional, Tuple

from clinicguard.context import resolve_context
from clinicguard.errors import CROSS_TENANT, Denied, NO_TENANT_CONTEXT
from clinicguard.models import Decision, Tenant, User
from clinicguard.permissions import require_capability
from clinicguard.roles import Role, normalize_role
from clinicguard.store import TenantStore

logger = logging.getLogger(__name__)


def authorize_tenant_access(principal: User, target_tenant_id: Optional[str]) -> Decision:
    role = normalize_role(principal.role)
    if role is Role.SUPER_ADMIN:
        return Decision.allow()

    if not principal.tenant_id:
        return Decision.deny(NO_TENANT_CONTEXT)

    if principal.tenant_id == target_tenant_id:
        return Decision.allow()

    return Decision.deny(CROSS_TENANT)


def require_tenant_access(principal: User, target_tenant_id: Optional[str]) -> None:
    """Raise ``Denied`` unless *principal* may touch *target_tenant_id*."""
    decision = authorize_tenant_access(principal, target_tenant_id)
    if not decision.allowed:
        logger.warning(
            "Tenant access denied: user=%s tenant=%s target=%s reason=%s",
            principal.id, principal.tenant_id, target_tenant_id, decision.reason,
            extra={"tenant_id": target_tenant_id, "security_code": decision.reason},
        )
        raise Denied(decision.reason)


def ensure_context(store: TenantStore, principal_id: str) -> Tuple[User, Optional[Tenant]]:
    """Resolve the caller for "operate within my own clinic" requests.

    Non-privileged callers must end up with a clinic; SuperAdmin may not.
    """
    user, tenant = resolve_context(store, principal_id)
    if tenant is None and normalize_role(user.role) is not Role.SUPER_ADMIN:
        logger.warning("No tenant context for user=%s", user.id)
        raise Denied(NO_TENANT_CONTEXT)
    return user, tenant


def has_access_to_tenant(store: TenantStore, principal_id: str, tenant_id: str) -> bool:
    user = store.get_user_by_id(principal_id)
    if user is None:
        return False
    return authorize_tenant_access(user, tenant_id).allowed


def guard_action(
    store: TenantStore,
    principal_id: str,
    capability: str,
    tenant_id: Optional[str] = None,
) -> Tuple[User, Optional[Tenant]]:
    """Load the caller, require *capability* and, if given, access to *tenant_id*."""
    user, tenant = resolve_context(store, principal_id)
    require_capability(user.role, capability)
    if tenant_id is not None:
        require_tenant_access(user, tenant_id)
    return user, tenant
