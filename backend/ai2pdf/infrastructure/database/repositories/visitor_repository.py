"""Concrete repository implementation for Visitor backed by SQLAlchemy."""

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ai2pdf.application.interfaces import VisitorRepository
from ai2pdf.domain.entities import Visitor
from ai2pdf.infrastructure.database.models import VisitorModel


class SQLAlchemyVisitorRepository(VisitorRepository):
    """Implements the VisitorRepository port using SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: VisitorModel) -> Visitor:
        return Visitor(
            id=model.id,
            auth_token=model.auth_token,
            user_type=model.user_type,
            is_active=model.is_active,
            email=model.email,
            name=model.name,
            ip_address=model.ip_address,
            user_agent=model.user_agent,
            metadata=model.metadata_ or {},
            first_visit=model.first_visit,
            last_active_at=model.last_active_at or model.first_visit,
        )

    def _to_model(self, entity: Visitor) -> VisitorModel:
        return VisitorModel(
            id=entity.id,
            auth_token=entity.auth_token,
            user_type=entity.user_type,
            is_active=entity.is_active,
            email=entity.email,
            name=entity.name,
            ip_address=entity.ip_address,
            user_agent=entity.user_agent,
            metadata_=entity.metadata,
            first_visit=entity.first_visit,
            last_active_at=entity.last_active_at,
        )

    async def get_by_token(self, auth_token: str) -> Visitor | None:
        result = await self._session.execute(
            select(VisitorModel).where(VisitorModel.auth_token == auth_token)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_id(self, visitor_id: str) -> Visitor | None:
        result = await self._session.get(VisitorModel, visitor_id)
        return self._to_entity(result) if result else None

    async def get_all(self, skip: int = 0, limit: int = 100) -> list[Visitor]:
        stmt = (
            select(VisitorModel)
            .order_by(VisitorModel.first_visit.desc())
            .offset(skip)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(row) for row in result.scalars().all()]

    async def create(self, visitor: Visitor) -> Visitor:
        model = self._to_model(visitor)
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def update(self, visitor: Visitor) -> Visitor:
        model = await self._session.get(VisitorModel, visitor.id)
        if model is None:
            raise ValueError(f"Visitor {visitor.id} not found in database")
        model.user_type = visitor.user_type
        model.is_active = visitor.is_active
        model.email = visitor.email
        model.name = visitor.name
        model.ip_address = visitor.ip_address
        model.user_agent = visitor.user_agent
        model.metadata_ = visitor.metadata
        model.last_active_at = visitor.last_active_at
        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, visitor_id: str) -> bool:
        model = await self._session.get(VisitorModel, visitor_id)
        if model is None:
            return False
        await self._session.delete(model)
        await self._session.flush()
        return True

    async def delete_all(self) -> int:
        result = await self._session.execute(delete(VisitorModel))
        await self._session.flush()
        return result.rowcount or 0

    async def count_by_type(self) -> dict[str, int]:
        result = await self._session.execute(
            select(VisitorModel.user_type, func.count()).group_by(VisitorModel.user_type)
        )
        return {user_type: count for user_type, count in result.all()}
