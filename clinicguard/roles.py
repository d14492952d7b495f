"""
Role catalogue and normalisation of the many spellings roles arrive in.

Role strings come from legacy rows ("super_admin", "lab_tech"), the current
schema ("SuperAdmin", "Lab Tech") and hand-typed input ("Super Admin").
Everything is folded to one key before matching; anything that does not
match becomes ``Role.UNKNOWN`` rather than an error or a default role.
"""

import re
from enum import Enum
from typing import Optional, Union


class Role(str, Enum):
    SUPER_ADMIN = "SuperAdmin"
    ADMIN = "Admin"
    DOCTOR = "Doctor"
    NURSE = "Nurse"
    RECEPTIONIST = "Receptionist"
    PHARMACIST = "Pharmacist"
    LAB_TECH = "Lab Tech"
    ACCOUNTANT = "Accountant"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


KNOWN_ROLES = tuple(r for r in Role if r is not Role.UNKNOWN)

_SEPARATORS = re.compile(r"[\s_\-]+")


def _fold(raw: str) -> str:
    return _SEPARATORS.sub("", raw.strip().lower())


_ROLE_BY_KEY = {_fold(r.value): r for r in KNOWN_ROLES}

# Snake-case spelling written by the store.
_STORAGE_NAMES = {
    Role.SUPER_ADMIN: "super_admin",
    Role.ADMIN: "admin",
    Role.DOCTOR: "doctor",
    Role.NURSE: "nurse",
    Role.RECEPTIONIST: "receptionist",
    Role.PHARMACIST: "pharmacist",
    Role.LAB_TECH: "lab_tech",
    Role.ACCOUNTANT: "accountant",
}


def normalize_role(raw: Optional[Union[str, Role]]) -> Role:
    """Map any role spelling to a ``Role``; unrecognised input gives UNKNOWN."""
    if isinstance(raw, Role):
        return raw
    if not raw or not isinstance(raw, str):
        return Role.UNKNOWN
    return _ROLE_BY_KEY.get(_fold(raw), Role.UNKNOWN)


def is_super_admin(raw) -> bool:
    return normalize_role(raw) is Role.SUPER_ADMIN


def is_admin(raw) -> bool:
    """True for clinic admins and super admins."""
    return normalize_role(raw) in (Role.ADMIN, Role.SUPER_ADMIN)


def to_storage(raw) -> str:
    """Return the spelling persisted in ``users.role``."""
    role = normalize_role(raw)
    if role is Role.UNKNOWN:
        raise ValueError(f"Unsupported role '{raw}'.")
    return _STORAGE_NAMES[role]
