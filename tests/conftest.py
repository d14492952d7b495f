"""
Shared fakes for the kernel tests.
"""

import pytest

from clinicguard.models import Tenant, User


class FakeStore:
    """In-memory TenantStore that records every call it receives."""

    def __init__(self, users=(), tenants=()):
        self.users = {u.id: u for u in users}
        self.tenants = {t.id: t for t in tenants}
        self.calls = []
        self._next_id = 1

    def get_user_by_id(self, user_id):
        self.calls.append(("get_user_by_id", user_id))
        return self.users.get(user_id)

    def get_tenant_by_id(self, tenant_id):
        self.calls.append(("get_tenant_by_id", tenant_id))
        return self.tenants.get(tenant_id)

    def update_user_role(self, user_id, tenant_id, role):
        self.calls.append(("update_user_role", user_id, tenant_id, role))
        user = self.users.get(user_id)
        if user is None or user.tenant_id != tenant_id:
            return False
        user.role = role
        return True

    def update_user_membership(self, user_id, tenant_id, status):
        self.calls.append(("update_user_membership", user_id, tenant_id, status))
        user = self.users.get(user_id)
        if user is None or user.tenant_id != tenant_id:
            return False
        user.status = status
        user.tenant_id = None
        return True

    def insert_tenant(self, spec, slug, status="active"):
        self.calls.append(("insert_tenant", spec.name, slug, status))
        tenant = Tenant(
            id=f"t-{self._next_id}", name=spec.name, slug=slug,
            plan="free", plan_seats=5, status=status,
            settings=dict(spec.settings), email=spec.email,
            country=spec.country, currency=spec.currency, timezone=spec.timezone,
        )
        self._next_id += 1
        self.tenants[tenant.id] = tenant
        return tenant

    def list_tenants(self):
        self.calls.append(("list_tenants",))
        return sorted(self.tenants.values(), key=lambda t: t.name)

    def list_tenant_users(self, tenant_id):
        self.calls.append(("list_tenant_users", tenant_id))
        return [u for u in self.users.values() if u.tenant_id == tenant_id]

    def mutations(self):
        return [c for c in self.calls if c[0].startswith(("update_", "insert_"))]


@pytest.fixture
def clinic_a():
    return Tenant(id="A", name="Alpha Clinic", slug="alpha-clinic")


@pytest.fixture
def clinic_b():
    return Tenant(id="B", name="Beta Clinic", slug="beta-clinic")


@pytest.fixture
def store(clinic_a, clinic_b):
    return FakeStore(
        users=[
            User(id="sa", role="super_admin"),
            User(id="admin-a", role="Admin", tenant_id="A"),
            User(id="admin-b", role="admin", tenant_id="B"),
            User(id="doc-a", role="Doctor", tenant_id="A"),
            User(id="nurse-b", role="nurse", tenant_id="B"),
            User(id="orphan", role="Receptionist"),
            User(id="ghost", role="Pharmacist", tenant_id="gone"),
        ],
        tenants=[clinic_a, clinic_b],
    )
