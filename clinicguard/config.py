"""
Centralised configuration constants and environment helpers.
"""

import os
import sys

from dotenv import load_dotenv

load_dotenv()

# ── Store ────────────────────────────────────────────────────────────
STORE_TIMEOUT_SECONDS = float(os.getenv("STORE_TIMEOUT_SECONDS", "5"))

# ── Tenant provisioning defaults ─────────────────────────────────────
DEFAULT_TENANT_PLAN = "free"
DEFAULT_TENANT_SEATS = 5
DEFAULT_COUNTRY = os.getenv("DEFAULT_COUNTRY", "Kenya")
DEFAULT_CURRENCY = os.getenv("DEFAULT_CURRENCY", "KES")
DEFAULT_TIMEZONE = os.getenv("DEFAULT_TIMEZONE", "Africa/Nairobi")

# Tenant and user lifecycle values as stored.
TENANT_STATUSES = {"active", "suspended", "pending", "cancelled"}
TENANT_PLANS = {"free", "pro", "enterprise"}
USER_STATUSES = {"active", "invited", "suspended", "deactivated"}

# ── API server ───────────────────────────────────────────────────────
SECRET_KEY = os.getenv("JWT_SECRET_KEY", "dev-secret-key-change-in-production")
JWT_ALGORITHM = "HS256"
API_HOST = os.getenv("API_HOST", "0.0.0.0")
API_PORT = int(os.getenv("API_PORT", "8000"))


def get_env(name: str) -> str:
    """Return an environment variable or exit with an error message."""
    value = os.getenv(name)
    if not value:
        print(f"ERROR: env var {name} is not set", file=sys.stderr)
        sys.exit(1)
    return value
