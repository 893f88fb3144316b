"""Domain entities for metered API access: plans and keys."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any
from uuid import uuid4


@dataclass
class ApiPlan:
    """A purchasable API plan with a monthly request allowance."""

    name: str
    price: Decimal
    request_limit: int
    id: str = field(default_factory=lambda: str(uuid4()))
    currency: str = "INR"
    features: list[str] = field(default_factory=list)
    is_active: bool = True
    sort_order: int = 0
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class ApiKey:
    """An API key owned by a visitor token. Only the SHA-256 hash is stored."""

    user_token: str
    key_hash: str
    plan_id: str | None = None
    id: str = field(default_factory=lambda: str(uuid4()))
    is_active: bool = True
    request_count: int = 0
    last_used: datetime | None = None
    expiry_date: datetime | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.expiry_date is None:
            return False
        now = now or datetime.now(timezone.utc)
        expiry = self.expiry_date
        # SQLite drops tzinfo on round-trip
        if expiry.tzinfo is None:
            expiry = expiry.replace(tzinfo=timezone.utc)
        return now > expiry

    def record_usage(self) -> None:
        """Count one metered request against this key."""
        self.request_count += 1
        self.last_used = datetime.now(timezone.utc)
        self.updated_at = self.last_used

    def masked(self) -> str:
        """Display form: the ``ak_`` prefix, a mask, and the last 8 hash chars."""
        return f"ak_{'*' * 40}{self.key_hash[-8:]}"


@dataclass
class ApiKeyStatus:
    """Result of validating a presented key: the key plus its plan's allowance."""

    key: ApiKey
    plan_name: str | None
    request_limit: int

    @property
    def remaining_requests(self) -> int:
        return max(self.request_limit - self.key.request_count, 0)
