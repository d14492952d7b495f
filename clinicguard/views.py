"""
View access matrix: which roles may enter which application surface.
"""

import logging
from types import MappingProxyType
from typing import List, Optional

from clinicguard.errors import TENANT_PENDING, VIEW_NOT_PERMITTED
from clinicguard.models import Decision, Tenant, User
from clinicguard.roles import Role, normalize_role

logger = logging.getLogger(__name__)

_SA = frozenset({Role.SUPER_ADMIN})
_CLINIC_STAFF = frozenset({
    Role.ADMIN, Role.DOCTOR, Role.NURSE, Role.RECEPTIONIST,
    Role.PHARMACIST, Role.LAB_TECH, Role.ACCOUNTANT,
})

VIEW_ACCESS = MappingProxyType({
    # Platform views
    "sa-overview": _SA,
    "sa-clinics": _SA,
    "sa-approvals": _SA,
    "sa-payments": _SA,
    "sa-support": _SA,
    "sa-settings": _SA,

    # Clinic views
    "dashboard": _CLINIC_STAFF,
    "reception": frozenset({Role.ADMIN, Role.RECEPTIONIST}),
    "triage": frozenset({Role.ADMIN, Role.NURSE, Role.DOCTOR}),
    "consultation": frozenset({Role.ADMIN, Role.DOCTOR}),
    "lab-work": frozenset({Role.ADMIN, Role.LAB_TECH, Role.DOCTOR}),
    "billing-desk": frozenset({Role.ADMIN, Role.RECEPTIONIST, Role.ACCOUNTANT}),
    "pharmacy": frozenset({Role.ADMIN, Role.PHARMACIST, Role.DOCTOR}),
    "patients": frozenset({Role.ADMIN, Role.DOCTOR, Role.NURSE, Role.RECEPTIONIST}),
    "appointments": frozenset({Role.ADMIN, Role.DOCTOR, Role.NURSE, Role.RECEPTIONIST}),
    "whatsapp-agent": frozenset({
        Role.ADMIN, Role.DOCTOR, Role.NURSE, Role.RECEPTIONIST, Role.PHARMACIST,
    }),
    "bulk-sms": frozenset({Role.ADMIN, Role.RECEPTIONIST}),
    "reports": frozenset({Role.ADMIN, Role.DOCTOR, Role.ACCOUNTANT}),
    "settings": frozenset({Role.ADMIN}),
    "helpdesk": _CLINIC_STAFF,
    "profile": _CLINIC_STAFF | _SA,
})

FALLBACK_VIEW = "dashboard"

_DEFAULT_VIEWS = MappingProxyType({
    Role.SUPER_ADMIN: "sa-overview",
    Role.ADMIN: "dashboard",
    Role.DOCTOR: "consultation",
    Role.NURSE: "triage",
    Role.RECEPTIONIST: "reception",
    Role.PHARMACIST: "pharmacy",
    Role.LAB_TECH: "lab-work",
    Role.ACCOUNTANT: "billing-desk",
})


def can_enter_view(role, view: str) -> bool:
    allowed = VIEW_ACCESS.get(view)
    if not allowed:
        return False
    return normalize_role(role) in allowed


def default_view_for(role) -> str:
    """Landing view for *role*; never fails."""
    return _DEFAULT_VIEWS.get(normalize_role(role), FALLBACK_VIEW)


def accessible_views(role) -> List[str]:
    r = normalize_role(role)
    return [view for view, allowed in VIEW_ACCESS.items() if r in allowed]


def authorize_view(principal: User, tenant: Optional[Tenant], view: str) -> Decision:
    """Decide view entry, including the pending-clinic gate.

    Members of a clinic awaiting approval see nothing of the main
    application. SuperAdmin is exempt from that gate.
    """
    role = normalize_role(principal.role)
    if role is not Role.SUPER_ADMIN and tenant is not None and tenant.is_pending:
        logger.info("View %s blocked for user %s: tenant %s pending",
                    view, principal.id, tenant.id)
        return Decision.deny(TENANT_PENDING)
    if not can_enter_view(role, view):
        return Decision.deny(VIEW_NOT_PERMITTED)
    return Decision.allow()
