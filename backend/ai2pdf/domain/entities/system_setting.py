"""Domain entities for runtime system settings and the admin activity log."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

API_SERVICE_ENABLED_KEY = "api_service_enabled"


@dataclass
class SystemSetting:
    key: str
    value: str | None = None
    description: str | None = None
    id: str = field(default_factory=lambda: str(uuid4()))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class ActivityLog:
    """An admin-visible audit entry (tool created, API toggled, ...)."""

    action: str
    details: dict[str, Any] = field(default_factory=dict)
    user_id: str | None = None
    ip_address: str | None = None
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
