"""
Database engine initialisation and the clinic/user table definitions.
"""

import sys

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    create_engine,
    func,
    text,
)

from clinicguard.config import get_env, STORE_TIMEOUT_SECONDS

metadata = MetaData()

clinics = Table(
    "clinics", metadata,
    Column("id", String(36), primary_key=True),
    Column("name", String(255), nullable=False),
    Column("slug", String(255), nullable=False, unique=True),
    Column("email", String(255)),
    Column("phone", String(64)),
    Column("location", String(255)),
    Column("country", String(64)),
    Column("currency", String(8)),
    Column("timezone", String(64)),
    Column("plan", String(32), nullable=False, server_default="free"),
    Column("plan_seats", Integer, nullable=False, server_default="5"),
    Column("status", String(32), nullable=False, server_default="pending"),
    Column("settings", Text, nullable=False, server_default="{}"),
    Column("created_at", DateTime, server_default=func.now()),
)

users = Table(
    "users", metadata,
    Column("id", String(36), primary_key=True),
    Column("clinic_id", String(36), ForeignKey("clinics.id"), index=True),
    Column("email", String(255)),
    Column("full_name", String(255)),
    Column("role", String(64), nullable=False),
    Column("status", String(32), nullable=False, server_default="active"),
    Column("created_at", DateTime, server_default=func.now()),
)


def init_engine(db_uri=None):
    """Create a SQLAlchemy engine and verify the connection."""
    db_uri = db_uri or get_env("DB_URI")
    options = {"echo": False, "future": True}
    # Bounds the wait for a connection (pool or SQLite lock), not statement runtime.
    if db_uri.startswith("sqlite"):
        options["connect_args"] = {"timeout": STORE_TIMEOUT_SECONDS}
    else:
        options["pool_timeout"] = STORE_TIMEOUT_SECONDS
        options["pool_pre_ping"] = True
    engine = create_engine(db_uri, **options)
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception as e:
        print("ERROR: could not connect to DB:", e, file=sys.stderr)
        sys.exit(1)
    print("[init] Connected to DB.")
    return engine


def create_schema(engine) -> None:
    """Create the clinics and users tables if they are missing."""
    metadata.create_all(engine)
