"""
Store collaborator: the only reads and writes the kernel performs.

Every tenant-scoped mutation filters on both the row id and the clinic id,
so a stale or forged target id can never touch a user of another clinic.
"""

import json
import uuid
from abc import ABC, abstractmethod
from typing import List, Optional

from sqlalchemy import text

from clinicguard.config import DEFAULT_TENANT_PLAN, DEFAULT_TENANT_SEATS
from clinicguard.models import Tenant, TenantSpec, User


class TenantStore(ABC):
    """Abstract store contract consumed by the resolver and guards."""

    @abstractmethod
    def get_user_by_id(self, user_id: str) -> Optional[User]:
        ...

    @abstractmethod
    def get_tenant_by_id(self, tenant_id: str) -> Optional[Tenant]:
        ...

    @abstractmethod
    def update_user_role(self, user_id: str, tenant_id: str, role: str) -> bool:
        """Return False when no row matched (id, tenant_id)."""

    @abstractmethod
    def update_user_membership(self, user_id: str, tenant_id: str, status: str) -> bool:
        """Set *status* and clear membership; False when no row matched."""

    @abstractmethod
    def insert_tenant(self, spec: TenantSpec, slug: str, status: str = "active") -> Tenant:
        ...

    @abstractmethod
    def list_tenants(self) -> List[Tenant]:
        ...

    @abstractmethod
    def list_tenant_users(self, tenant_id: str) -> List[User]:
        ...


def _user_from_row(row) -> User:
    return User(
        id=str(row["id"]),
        role=str(row["role"]) if row["role"] is not None else "",
        status=str(row["status"]),
        tenant_id=str(row["clinic_id"]) if row["clinic_id"] is not None else None,
        email=row["email"],
        full_name=row["full_name"],
    )


def _tenant_from_row(row) -> Tenant:
    raw_settings = row["settings"]
    settings = json.loads(raw_settings) if raw_settings else {}
    return Tenant(
        id=str(row["id"]),
        name=str(row["name"]),
        slug=str(row["slug"]),
        plan=str(row["plan"]),
        plan_seats=int(row["plan_seats"]),
        status=str(row["status"]),
        settings=settings,
        email=row["email"],
        phone=row["phone"],
        location=row["location"],
        country=row["country"],
        currency=row["currency"],
        timezone=row["timezone"],
    )


_USER_COLUMNS = "id, clinic_id, email, full_name, role, status"
_TENANT_COLUMNS = (
    "id, name, slug, email, phone, location, country, currency, timezone, "
    "plan, plan_seats, status, settings"
)


class SqlTenantStore(TenantStore):
    """SQLAlchemy implementation over the ``users`` and ``clinics`` tables."""

    def __init__(self, engine):
        self.engine = engine

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        sql = text(f"SELECT {_USER_COLUMNS} FROM users WHERE id = :id")
        with self.engine.connect() as conn:
            row = conn.execute(sql, {"id": user_id}).mappings().first()
        return _user_from_row(row) if row else None

    def get_tenant_by_id(self, tenant_id: str) -> Optional[Tenant]:
        sql = text(f"SELECT {_TENANT_COLUMNS} FROM clinics WHERE id = :id")
        with self.engine.connect() as conn:
            row = conn.execute(sql, {"id": tenant_id}).mappings().first()
        return _tenant_from_row(row) if row else None

    def update_user_role(self, user_id: str, tenant_id: str, role: str) -> bool:
        sql = text("""
            UPDATE users SET role = :role
            WHERE id = :id AND clinic_id = :tid
        """)
        with self.engine.begin() as conn:
            result = conn.execute(sql, {"role": role, "id": user_id, "tid": tenant_id})
        return result.rowcount > 0

    def update_user_membership(self, user_id: str, tenant_id: str, status: str) -> bool:
        sql = text("""
            UPDATE users SET clinic_id = NULL, status = :status
            WHERE id = :id AND clinic_id = :tid
        """)
        with self.engine.begin() as conn:
            result = conn.execute(sql, {"status": status, "id": user_id, "tid": tenant_id})
        return result.rowcount > 0

    def insert_tenant(self, spec: TenantSpec, slug: str, status: str = "active") -> Tenant:
        tenant = Tenant(
            id=str(uuid.uuid4()),
            name=spec.name,
            slug=slug,
            plan=DEFAULT_TENANT_PLAN,
            plan_seats=DEFAULT_TENANT_SEATS,
            status=status,
            settings=dict(spec.settings),
            email=spec.email,
            phone=spec.phone,
            location=spec.location,
            country=spec.country,
            currency=spec.currency,
            timezone=spec.timezone,
        )
        sql = text("""
            INSERT INTO clinics (id, name, slug, email, phone, location, country,
                                 currency, timezone, plan, plan_seats, status, settings)
            VALUES (:id, :name, :slug, :email, :phone, :location, :country,
                    :currency, :timezone, :plan, :plan_seats, :status, :settings)
        """)
        with self.engine.begin() as conn:
            conn.execute(sql, {
                "id": tenant.id, "name": tenant.name, "slug": tenant.slug,
                "email": tenant.email, "phone": tenant.phone,
                "location": tenant.location, "country": tenant.country,
                "currency": tenant.currency, "timezone": tenant.timezone,
                "plan": tenant.plan, "plan_seats": tenant.plan_seats,
                "status": tenant.status, "settings": json.dumps(tenant.settings),
            })
        return tenant

    def list_tenants(self) -> List[Tenant]:
        sql = text(f"SELECT {_TENANT_COLUMNS} FROM clinics ORDER BY name")
        with self.engine.connect() as conn:
            rows = conn.execute(sql).mappings().all()
        return [_tenant_from_row(r) for r in rows]

    def list_tenant_users(self, tenant_id: str) -> List[User]:
        sql = text(f"""
            SELECT {_USER_COLUMNS} FROM users
            WHERE clinic_id = :tid
            ORDER BY created_at DESC
        """)
        with self.engine.connect() as conn:
            rows = conn.execute(sql, {"tid": tenant_id}).mappings().all()
        return [_user_from_row(r) for r in rows]
