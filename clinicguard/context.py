"""
Tenant context resolution: the single read path into the store.
"""

from typing import List, Optional, Tuple

from clinicguard.errors import PrincipalNotFound
from clinicguard.models import Tenant, User
from clinicguard.roles import is_super_admin
from clinicguard.store import TenantStore


def resolve_context(store: TenantStore, principal_id: str) -> Tuple[User, Optional[Tenant]]:
    """Load the caller and, when bound to one, their clinic.

    A SuperAdmin without a clinic resolves with ``None``; so does a user whose
    clinic row no longer exists.
    """
    user = store.get_user_by_id(principal_id)
    if user is None:
        raise PrincipalNotFound(principal_id)

    tenant = None
    if user.tenant_id:
        tenant = store.get_tenant_by_id(user.tenant_id)
    return user, tenant


def accessible_tenants(store: TenantStore, principal_id: str) -> List[Tenant]:
    """Clinics the principal may see: all for SuperAdmin, else at most one."""
    user = store.get_user_by_id(principal_id)
    if user is None:
        return []

    if is_super_admin(user.role):
        return store.list_tenants()

    if user.tenant_id:
        tenant = store.get_tenant_by_id(user.tenant_id)
        return [tenant] if tenant else []

    return []
