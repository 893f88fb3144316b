"""Domain entity for anonymous visitors tracked by cookie token."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4


@dataclass
class Visitor:
    """A browser identified by its ``user-token`` cookie or header."""

    auth_token: str
    id: str = field(default_factory=lambda: str(uuid4()))
    user_type: str = "visitor"  # visitor | free | pro | developer | admin
    is_active: bool = True
    email: str | None = None
    name: str | None = None
    ip_address: str | None = None
    user_agent: str | None = None
    metadata: dict[str, Any] = field(default_factory=lambda: {"source": "website"})
    first_visit: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    last_active_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def touch(self) -> None:
        """Record activity for a returning visitor."""
        self.is_active = True
        self.last_active_at = datetime.now(timezone.utc)
