"""Abstract repository interfaces (ports) for system settings and activity logs."""

from abc import ABC, abstractmethod

from ai2pdf.domain.entities import ActivityLog, SystemSetting


class SystemSettingsRepository(ABC):
    """Port for key/value system settings."""

    @abstractmethod
    async def get(self, key: str) -> SystemSetting | None:
        ...

    @abstractmethod
    async def get_all(self) -> list[SystemSetting]:
        ...

    @abstractmethod
    async def upsert(self, setting: SystemSetting) -> SystemSetting:
        """Insert the setting, or overwrite value/description of an existing key."""
        ...


class ActivityLogRepository(ABC):
    """Port for the admin activity log."""

    @abstractmethod
    async def create(self, entry: ActivityLog) -> ActivityLog:
        ...

    @abstractmethod
    async def get_recent(self, limit: int = 50) -> list[ActivityLog]:
        ...
