"""
Unit tests for the view access matrix and the pending-clinic gate.
"""

import pytest

from clinicguard.errors import TENANT_PENDING, VIEW_NOT_PERMITTED
from clinicguard.models import Tenant, User
from clinicguard.roles import KNOWN_ROLES, Role
from clinicguard.views import (
    FALLBACK_VIEW,
    VIEW_ACCESS,
    accessible_views,
    authorize_view,
    can_enter_view,
    default_view_for,
)


def test_every_view_has_roles():
    for view, roles in VIEW_ACCESS.items():
        assert roles, view
        assert Role.UNKNOWN not in roles


def test_lab_tech_scenario():
    assert can_enter_view("Lab Tech", "lab-work") is True
    assert can_enter_view("Lab Tech", "settings") is False


def test_unknown_view_denies_everyone():
    for role in KNOWN_ROLES:
        assert can_enter_view(role, "billing-secret") is False


def test_unknown_role_enters_nothing():
    for view in VIEW_ACCESS:
        assert can_enter_view("wizard", view) is False
    assert accessible_views("wizard") == []


def test_super_admin_spellings_reach_platform_views():
    for raw in ("SuperAdmin", "superadmin", "super_admin", "Super Admin"):
        assert can_enter_view(raw, "sa-clinics")
        assert not can_enter_view(raw, "pharmacy")


@pytest.mark.parametrize("role,view", [
    ("SuperAdmin", "sa-overview"),
    ("Admin", "dashboard"),
    ("Doctor", "consultation"),
    ("Nurse", "triage"),
    ("Receptionist", "reception"),
    ("Pharmacist", "pharmacy"),
    ("lab_tech", "lab-work"),
    ("Accountant", "billing-desk"),
    ("wizard", FALLBACK_VIEW),
    (None, FALLBACK_VIEW),
])
def test_default_view_is_total(role, view):
    assert default_view_for(role) == view


def test_known_roles_can_enter_their_landing_view():
    for role in KNOWN_ROLES:
        assert can_enter_view(role, default_view_for(role))


# ── authorize_view ───────────────────────────────────────────────────

def test_pending_clinic_blocks_members():
    pending = Tenant(id="A", name="A", slug="a", status="pending")
    nurse = User(id="n", role="Nurse", tenant_id="A")
    decision = authorize_view(nurse, pending, "triage")
    assert not decision.allowed
    assert decision.reason == TENANT_PENDING


def test_pending_gate_does_not_apply_to_super_admin():
    pending = Tenant(id="A", name="A", slug="a", status="Pending")
    sa = User(id="s", role="SuperAdmin")
    assert authorize_view(sa, pending, "sa-approvals").allowed


def test_active_clinic_falls_through_to_matrix():
    active = Tenant(id="A", name="A", slug="a", status="active")
    nurse = User(id="n", role="Nurse", tenant_id="A")
    assert authorize_view(nurse, active, "triage").allowed
    decision = authorize_view(nurse, active, "settings")
    assert decision.reason == VIEW_NOT_PERMITTED
