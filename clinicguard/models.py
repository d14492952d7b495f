"""
Domain dataclasses used across the application.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from clinicguard.config import (
    DEFAULT_COUNTRY,
    DEFAULT_CURRENCY,
    DEFAULT_TIMEZONE,
)


@dataclass
class User:
    """A principal as loaded from the store."""
    id: str
    role: str                        # raw role string, normalised on use
    status: str = "active"           # active, invited, suspended, deactivated
    tenant_id: Optional[str] = None  # absent only for SuperAdmin
    email: Optional[str] = None
    full_name: Optional[str] = None


@dataclass
class Tenant:
    """One clinic: the unit of data partitioning."""
    id: str
    name: str
    slug: str
    plan: str = "free"
    plan_seats: int = 5
    status: str = "active"           # active, suspended, pending, cancelled
    settings: Dict[str, Any] = field(default_factory=dict)
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    country: Optional[str] = None
    currency: Optional[str] = None
    timezone: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return (self.status or "").strip().lower() == "pending"


@dataclass
class TenantSpec:
    """Input for tenant provisioning."""
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    location: Optional[str] = None
    country: str = DEFAULT_COUNTRY
    currency: str = DEFAULT_CURRENCY
    timezone: str = DEFAULT_TIMEZONE
    settings: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Decision:
    """Allow, or deny with a stable reason."""
    allowed: bool
    reason: Optional[str] = None

    @classmethod
    def allow(cls) -> "Decision":
        return cls(True)

    @classmethod
    def deny(cls, reason: str) -> "Decision":
        return cls(False, reason)

    def __bool__(self) -> bool:
        return self.allowed
