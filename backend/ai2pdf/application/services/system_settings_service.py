"""Application service for runtime system settings and the admin activity log.

Settings live in the ``system_settings`` table so they can be changed from
the admin surface without a restart.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from ai2pdf.application.interfaces import ActivityLogRepository, SystemSettingsRepository
from ai2pdf.domain.entities import API_SERVICE_ENABLED_KEY, ActivityLog, SystemSetting

logger = logging.getLogger(__name__)


class SystemSettingsService:

    def __init__(
        self,
        settings_repository: SystemSettingsRepository,
        activity_repository: ActivityLogRepository,
    ):
        self._settings = settings_repository
        self._activity = activity_repository

    async def get_all(self) -> dict[str, str]:
        return {s.key: s.value or "" for s in await self._settings.get_all()}

    async def get(self, key: str) -> str | None:
        setting = await self._settings.get(key)
        return setting.value if setting else None

    async def set(self, key: str, value: str | None, description: str | None = None) -> SystemSetting:
        setting = await self._settings.upsert(
            SystemSetting(key=key, value=value, description=description)
        )
        logger.info("Setting %s updated", key)
        return setting

    async def is_api_service_enabled(self) -> bool:
        return (await self.get(API_SERVICE_ENABLED_KEY)) == "true"

    async def set_api_service_enabled(self, enabled: bool, *, ip_address: str | None = None) -> None:
        await self.set(
            API_SERVICE_ENABLED_KEY,
            "true" if enabled else "false",
            "Controls whether API service is available to users",
        )
        await self.log_activity(
            "api_service_toggled",
            {"enabled": enabled, "timestamp": datetime.now(timezone.utc).isoformat()},
            ip_address=ip_address,
            user_id="admin",
        )
        logger.info("API service %s by admin", "enabled" if enabled else "disabled")

    # ── Activity log ─────────────────────────────────────────────────

    async def log_activity(
        self,
        action: str,
        details: dict[str, Any] | None = None,
        *,
        ip_address: str | None = None,
        user_id: str | None = None,
    ) -> ActivityLog:
        return await self._activity.create(
            ActivityLog(action=action, details=details or {}, ip_address=ip_address, user_id=user_id)
        )

    async def recent_activity(self, limit: int = 50) -> list[ActivityLog]:
        return await self._activity.get_recent(limit)
