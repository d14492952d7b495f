"""
Privilege-change guard: role mutation, member removal and clinic provisioning.

Requesters are already-resolved ``User`` values; only the target of a role
change is loaded here.
"""

import logging
import re
from typing import List

from clinicguard.errors import (
    CANNOT_GRANT_SUPER_ADMIN,
    CANNOT_MODIFY_SUPER_ADMIN,
    CANNOT_REMOVE_SELF,
    Denied,
    SUPER_ADMIN_ONLY,
    SUPER_ADMIN_ONLY_TENANTS,
    TargetNotFound,
    UNAUTHORIZED,
)
from clinicguard.isolation import authorize_tenant_access
from clinicguard.models import Tenant, TenantSpec, User
from clinicguard.roles import Role, is_super_admin, normalize_role, to_storage
from clinicguard.store import TenantStore

logger = logging.getLogger(__name__)


def _deny(requester: User, reason: str, **details) -> Denied:
    logger.warning("Privilege change denied: requester=%s reason=%s %s",
                   requester.id, reason, details,
                   extra={"security_code": reason})
    return Denied(reason)


def require_tenant_admin(principal: User, tenant_id: str) -> User:
    """Allow clinic admins of *tenant_id* and super admins; deny everyone else."""
    if normalize_role(principal.role) not in (Role.ADMIN, Role.SUPER_ADMIN):
        raise _deny(principal, UNAUTHORIZED, tenant_id=tenant_id)
    if not authorize_tenant_access(principal, tenant_id).allowed:
        raise _deny(principal, UNAUTHORIZED, tenant_id=tenant_id)
    return principal


def require_super_admin(principal: User) -> User:
    if not is_super_admin(principal.role):
        raise _deny(principal, SUPER_ADMIN_ONLY)
    return principal


def change_role(
    store: TenantStore,
    requester: User,
    tenant_id: str,
    target_user_id: str,
    new_role,
) -> None:
    """Change a clinic member's role.

    Only a super admin may touch a super admin or hand out the role. The
    update is filtered on (target id, clinic id).
    """
    require_tenant_admin(requester, tenant_id)

    wanted = normalize_role(new_role)
    if wanted is Role.UNKNOWN:
        raise ValueError(f"Unsupported role '{new_role}'.")

    target = store.get_user_by_id(target_user_id)
    if target is None:
        raise TargetNotFound(target_user_id, tenant_id)

    requester_is_super = is_super_admin(requester.role)
    if is_super_admin(target.role) and not requester_is_super:
        raise _deny(requester, CANNOT_MODIFY_SUPER_ADMIN, target=target_user_id)
    if wanted is Role.SUPER_ADMIN and not requester_is_super:
        raise _deny(requester, CANNOT_GRANT_SUPER_ADMIN, target=target_user_id)

    if not store.update_user_role(target_user_id, tenant_id, to_storage(wanted)):
        raise TargetNotFound(target_user_id, tenant_id)

    logger.info("Role changed: requester=%s target=%s tenant=%s role=%s",
                requester.id, target_user_id, tenant_id, wanted,
                extra={"tenant_id": tenant_id})


def remove_member(
    store: TenantStore,
    requester: User,
    tenant_id: str,
    target_user_id: str,
) -> None:
    """Deactivate a member and clear their clinic, scoped by *tenant_id*.

    Self-removal is refused before any role check. Only a super admin may
    remove a super admin, whatever clinic id the target row still carries.
    """
    if requester.id == target_user_id:
        raise _deny(requester, CANNOT_REMOVE_SELF)

    require_tenant_admin(requester, tenant_id)

    target = store.get_user_by_id(target_user_id)
    if target is None:
        raise TargetNotFound(target_user_id, tenant_id)
    if is_super_admin(target.role) and not is_super_admin(requester.role):
        raise _deny(requester, CANNOT_MODIFY_SUPER_ADMIN, target=target_user_id)

    if not store.update_user_membership(target_user_id, tenant_id, "deactivated"):
        raise TargetNotFound(target_user_id, tenant_id)

    logger.info("Member removed: requester=%s target=%s tenant=%s",
                requester.id, target_user_id, tenant_id,
                extra={"tenant_id": tenant_id})


def slugify(name: str) -> str:
    """URL-safe clinic slug: "Test Hospital!! " -> "test-hospital"."""
    s = re.sub(r"[^a-z0-9\s-]", "", name.lower()).strip()
    s = re.sub(r"\s+", "-", s)
    return re.sub(r"-{2,}", "-", s).strip("-")


def provision_tenant(store: TenantStore, requester: User, spec: TenantSpec) -> Tenant:
    if not is_super_admin(requester.role):
        raise _deny(requester, SUPER_ADMIN_ONLY_TENANTS)

    slug = slugify(spec.name or "")
    if not slug:
        raise ValueError(f"Clinic name {spec.name!r} does not produce a usable slug.")

    tenant = store.insert_tenant(spec, slug, status="active")
    logger.info("Tenant provisioned: id=%s slug=%s by=%s",
                tenant.id, tenant.slug, requester.id,
                extra={"tenant_id": tenant.id})
    return tenant


def list_tenant_users(store: TenantStore, requester: User, tenant_id: str) -> List[User]:
    require_tenant_admin(requester, tenant_id)
    return store.list_tenant_users(tenant_id)


# Call-site names used by the clinic and organisation screens.
require_clinic_admin = require_tenant_admin
require_org_admin = require_tenant_admin
get_clinic_users = list_tenant_users
get_tenant_users = list_tenant_users
create_clinic = provision_tenant
