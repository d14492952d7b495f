"""
Permission catalogue and the static role -> capability matrix.

Lookups are pure functions over tables built once at import time; they do
no I/O and need no cache.
"""

import logging
from types import MappingProxyType
from typing import FrozenSet, Iterable, Set

from clinicguard.errors import Denied, MISSING_CAPABILITY, UnknownCapabilityError
from clinicguard.roles import Role, normalize_role

logger = logging.getLogger(__name__)

CAPABILITIES: FrozenSet[str] = frozenset({
    "patient.view", "patient.create", "patient.edit", "patient.delete",
    "appointment.view", "appointment.create", "appointment.edit", "appointment.delete",
    "inventory.view", "inventory.create", "inventory.edit", "inventory.delete",
    "prescription.view", "prescription.create", "prescription.dispense",
    "visit.view", "visit.create", "visit.edit", "visit.complete",
    "reports.view", "reports.export",
    "settings.view", "settings.edit",
    "team.view", "team.manage",
    "payments.view", "payments.process",
    "audit.view",
    "sms.send",
    "whatsapp.manage",
    "backup.create", "backup.restore",
    "clinic.manage", "clinic.billing",
    "system.config",
})

_ADMIN = CAPABILITIES - {"backup.restore", "clinic.manage", "system.config"}

ROLE_CAPABILITIES = MappingProxyType({
    Role.SUPER_ADMIN: CAPABILITIES,
    Role.ADMIN: frozenset(_ADMIN),
    Role.DOCTOR: frozenset({
        "patient.view", "patient.create", "patient.edit",
        "appointment.view", "appointment.create", "appointment.edit",
        "inventory.view",
        "prescription.view", "prescription.create", "prescription.dispense",
        "visit.view", "visit.create", "visit.edit", "visit.complete",
        "reports.view",
    }),
    Role.NURSE: frozenset({
        "patient.view", "patient.create", "patient.edit",
        "appointment.view",
        "visit.view", "visit.create", "visit.edit",
        "inventory.view",
    }),
    Role.RECEPTIONIST: frozenset({
        "patient.view", "patient.create", "patient.edit",
        "appointment.view", "appointment.create", "appointment.edit", "appointment.delete",
        "visit.view", "visit.create",
        "sms.send",
        "payments.view",
    }),
    Role.PHARMACIST: frozenset({
        "patient.view",
        "inventory.view", "inventory.create", "inventory.edit", "inventory.delete",
        "prescription.view", "prescription.dispense",
        "visit.view",
        "reports.view",
    }),
    Role.LAB_TECH: frozenset({
        "patient.view", "visit.view", "visit.edit", "inventory.view", "reports.view",
    }),
    Role.ACCOUNTANT: frozenset({
        "patient.view",
        "appointment.view",
        "inventory.view",
        "reports.view", "reports.export",
        "payments.view", "payments.process",
        "audit.view",
    }),
})

for _caps in ROLE_CAPABILITIES.values():
    for _c in _caps - CAPABILITIES:
        raise UnknownCapabilityError(_c)


def _check_defined(capability: str) -> None:
    if capability not in CAPABILITIES:
        raise UnknownCapabilityError(capability)


def _grants(role) -> FrozenSet[str]:
    return ROLE_CAPABILITIES.get(normalize_role(role), frozenset())


def has_capability(role, capability: str) -> bool:
    _check_defined(capability)
    return capability in _grants(role)


def has_all(role, capabilities: Iterable[str]) -> bool:
    """True only if every capability is granted (vacuously true when empty)."""
    wanted = list(capabilities)
    for c in wanted:
        _check_defined(c)
    return set(wanted).issubset(_grants(role))


def has_any(role, capabilities: Iterable[str]) -> bool:
    wanted = list(capabilities)
    for c in wanted:
        _check_defined(c)
    return not _grants(role).isdisjoint(wanted)


def list_capabilities(role) -> Set[str]:
    """Full grant set for rendering decisions.

    Not a substitute for ``has_capability`` at the point of the action.
    """
    return set(_grants(role))


def can(role, resource: str, action: str) -> bool:
    return has_capability(role, f"{resource}.{action}")


def roles_with_capability(capability: str) -> Set[Role]:
    _check_defined(capability)
    return {r for r, caps in ROLE_CAPABILITIES.items() if capability in caps}


def require_capability(role, capability: str) -> None:
    """Raise ``Denied`` unless *role* holds *capability*."""
    if not has_capability(role, capability):
        logger.warning("Capability denied: role=%s capability=%s",
                       normalize_role(role), capability)
        raise Denied(MISSING_CAPABILITY, capability)
