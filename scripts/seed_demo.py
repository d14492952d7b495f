#!/usr/bin/env python3
"""
Create the clinics/users tables and seed demo clinics and staff.
Uses DB_URI from your .env file.
"""

from sqlalchemy import insert

from clinicguard.database import create_schema, init_engine, users
from clinicguard.models import TenantSpec, User
from clinicguard.privilege import provision_tenant
from clinicguard.roles import to_storage
from clinicguard.store import SqlTenantStore

SUPER_ADMIN_ID = "00000000-0000-0000-0000-000000000001"

DEMO_CLINICS = [
    (TenantSpec(name="Demo Clinic", email="admin@democlinic.com",
                location="Nairobi, Kenya", country="KE"),
     [("admin", "Admin"), ("doctor", "Doctor"), ("receptionist", "Receptionist")]),
    (TenantSpec(name="Test Hospital", email="admin@testhospital.com",
                location="Kisumu, Kenya", country="KE"),
     [("admin", "Admin"), ("pharmacist", "Pharmacist"), ("labtech", "Lab Tech")]),
]


if __name__ == "__main__":
    print("=" * 60)
    print("Demo Clinic Seeder")
    print("=" * 60)

    engine = init_engine()
    create_schema(engine)
    store = SqlTenantStore(engine)

    super_admin = User(id=SUPER_ADMIN_ID, role="SuperAdmin", email="superadmin@example.com")
    with engine.begin() as conn:
        conn.execute(insert(users).values(
            id=super_admin.id, role=to_storage(super_admin.role),
            email=super_admin.email, full_name="System Admin", clinic_id=None,
        ))
    print(f"\n[seed] Super admin: {super_admin.id}")

    for spec, staff in DEMO_CLINICS:
        clinic = provision_tenant(store, super_admin, spec)
        print(f"\n[seed] Clinic {clinic.name} ({clinic.slug}) id={clinic.id}")
        domain = clinic.slug.replace("-", "") + ".example.com"
        with engine.begin() as conn:
            for n, (local, role) in enumerate(staff, 1):
                user_id = clinic.id[:-2] + f"{n:02d}"
                conn.execute(insert(users).values(
                    id=user_id, role=to_storage(role), clinic_id=clinic.id,
                    email=f"{local}@{domain}", full_name=f"Demo {role}",
                ))
                print(f"  - {role:<12} {user_id}")

    print("\n" + "=" * 60)
    print("Use these ids as the JWT 'sub' claim or at the CLI prompt.")
    print("=" * 60)
