"""Concrete repository implementations for system settings and the activity log."""

from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ai2pdf.application.interfaces import ActivityLogRepository, SystemSettingsRepository
from ai2pdf.domain.entities import ActivityLog, SystemSetting
from ai2pdf.infrastructure.database.models import ActivityLogModel, SystemSettingModel


class SQLAlchemySystemSettingsRepository(SystemSettingsRepository):

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: SystemSettingModel) -> SystemSetting:
        return SystemSetting(
            id=model.id,
            key=model.key,
            value=model.value,
            description=model.description,
            updated_at=model.updated_at,
        )

    async def get(self, key: str) -> SystemSetting | None:
        result = await self._session.execute(
            select(SystemSettingModel).where(SystemSettingModel.key == key)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_all(self) -> list[SystemSetting]:
        result = await self._session.execute(
            select(SystemSettingModel).order_by(SystemSettingModel.key.asc())
        )
        return [self._to_entity(row) for row in result.scalars().all()]

    async def upsert(self, setting: SystemSetting) -> SystemSetting:
        result = await self._session.execute(
            select(SystemSettingModel).where(SystemSettingModel.key == setting.key)
        )
        model = result.scalar_one_or_none()
        if model is None:
            model = SystemSettingModel(
                id=setting.id,
                key=setting.key,
                value=setting.value,
                description=setting.description,
                updated_at=setting.updated_at,
            )
            self._session.add(model)
        else:
            model.value = setting.value
            if setting.description is not None:
                model.description = setting.description
            model.updated_at = datetime.now(timezone.utc)
        await self._session.flush()
        return self._to_entity(model)


class SQLAlchemyActivityLogRepository(ActivityLogRepository):

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: ActivityLogModel) -> ActivityLog:
        return ActivityLog(
            id=model.id,
            action=model.action,
            details=model.details or {},
            user_id=model.user_id,
            ip_address=model.ip_address,
            created_at=model.created_at,
        )

    async def create(self, entry: ActivityLog) -> ActivityLog:
        model = ActivityLogModel(
            id=entry.id,
            action=entry.action,
            details=entry.details,
            user_id=entry.user_id,
            ip_address=entry.ip_address,
            created_at=entry.created_at,
        )
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def get_recent(self, limit: int = 50) -> list[ActivityLog]:
        result = await self._session.execute(
            select(ActivityLogModel)
            .order_by(ActivityLogModel.created_at.desc())
            .limit(limit)
        )
        return [self._to_entity(row) for row in result.scalars().all()]
