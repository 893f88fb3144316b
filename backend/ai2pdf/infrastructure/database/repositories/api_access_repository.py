"""Concrete repository implementations for API plans and keys backed by SQLAlchemy."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from ai2pdf.application.interfaces import ApiKeyRepository, ApiPlanRepository
from ai2pdf.domain.entities import ApiKey, ApiPlan
from ai2pdf.infrastructure.database.models import ApiKeyModel, ApiPlanModel


class SQLAlchemyApiPlanRepository(ApiPlanRepository):
    """Implements the ApiPlanRepository port using SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: ApiPlanModel) -> ApiPlan:
        return ApiPlan(
            id=model.id,
            name=model.name,
            price=model.price,
            currency=model.currency,
            request_limit=model.request_limit,
            features=list(model.features or []),
            is_active=model.is_active,
            sort_order=model.sort_order,
            created_at=model.created_at,
        )

    async def get_by_id(self, plan_id: str) -> ApiPlan | None:
        result = await self._session.get(ApiPlanModel, plan_id)
        return self._to_entity(result) if result else None

    async def get_all(self, *, active_only: bool = False) -> list[ApiPlan]:
        stmt = select(ApiPlanModel)
        if active_only:
            stmt = stmt.where(ApiPlanModel.is_active.is_(True))
        stmt = stmt.order_by(ApiPlanModel.price.asc(), ApiPlanModel.sort_order.asc())
        result = await self._session.execute(stmt)
        return [self._to_entity(row) for row in result.scalars().all()]

    async def create(self, plan: ApiPlan) -> ApiPlan:
        model = ApiPlanModel(
            id=plan.id,
            name=plan.name,
            price=plan.price,
            currency=plan.currency,
            request_limit=plan.request_limit,
            features=plan.features,
            is_active=plan.is_active,
            sort_order=plan.sort_order,
            created_at=plan.created_at,
        )
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)


class SQLAlchemyApiKeyRepository(ApiKeyRepository):
    """Implements the ApiKeyRepository port using SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: ApiKeyModel) -> ApiKey:
        return ApiKey(
            id=model.id,
            user_token=model.user_token,
            key_hash=model.key_hash,
            plan_id=model.plan_id,
            is_active=model.is_active,
            request_count=model.request_count,
            last_used=model.last_used,
            expiry_date=model.expiry_date,
            metadata=model.metadata_ or {},
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    async def get_by_id(self, key_id: str) -> ApiKey | None:
        result = await self._session.get(ApiKeyModel, key_id)
        return self._to_entity(result) if result else None

    async def get_by_hash(self, key_hash: str) -> ApiKey | None:
        result = await self._session.execute(
            select(ApiKeyModel).where(ApiKeyModel.key_hash == key_hash)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_user(self, user_token: str) -> list[ApiKey]:
        result = await self._session.execute(
            select(ApiKeyModel)
            .where(ApiKeyModel.user_token == user_token)
            .order_by(ApiKeyModel.created_at.asc())
        )
        return [self._to_entity(row) for row in result.scalars().all()]

    async def create(self, key: ApiKey) -> ApiKey:
        model = ApiKeyModel(
            id=key.id,
            user_token=key.user_token,
            key_hash=key.key_hash,
            plan_id=key.plan_id,
            is_active=key.is_active,
            request_count=key.request_count,
            last_used=key.last_used,
            expiry_date=key.expiry_date,
            metadata_=key.metadata,
            created_at=key.created_at,
            updated_at=key.updated_at,
        )
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def update(self, key: ApiKey) -> ApiKey:
        model = await self._session.get(ApiKeyModel, key.id)
        if model is None:
            raise ValueError(f"ApiKey {key.id} not found in database")
        model.plan_id = key.plan_id
        model.is_active = key.is_active
        model.request_count = key.request_count
        model.last_used = key.last_used
        model.expiry_date = key.expiry_date
        model.metadata_ = key.metadata
        await self._session.flush()
        return self._to_entity(model)

    async def count(self, *, active_only: bool = False) -> int:
        stmt = select(func.count()).select_from(ApiKeyModel)
        if active_only:
            stmt = stmt.where(ApiKeyModel.is_active.is_(True))
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def total_requests(self) -> int:
        result = await self._session.execute(
            select(func.coalesce(func.sum(ApiKeyModel.request_count), 0))
        )
        return int(result.scalar_one())
