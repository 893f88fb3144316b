"""Concrete repository implementation for Tool backed by SQLAlchemy."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ai2pdf.application.interfaces import ToolRepository
from ai2pdf.domain.entities import Tool
from ai2pdf.infrastructure.database.models import ToolModel


class SQLAlchemyToolRepository(ToolRepository):
    """Implements the ToolRepository port using SQLAlchemy async sessions."""

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: ToolModel) -> Tool:
        return Tool(
            id=model.id,
            name=model.name,
            folder_name=model.folder_name,
            file_path=model.file_path,
            version=model.version,
            category_id=model.category_id,
            description=model.description,
            keywords=model.keywords,
            meta_title=model.meta_title,
            meta_description=model.meta_description,
            is_active=model.is_active,
            usage_count=model.usage_count,
            metadata=model.metadata_ or {},
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Tool) -> ToolModel:
        return ToolModel(
            id=entity.id,
            name=entity.name,
            folder_name=entity.folder_name,
            file_path=entity.file_path,
            version=entity.version,
            category_id=entity.category_id,
            description=entity.description,
            keywords=entity.keywords,
            meta_title=entity.meta_title,
            meta_description=entity.meta_description,
            is_active=entity.is_active,
            usage_count=entity.usage_count,
            metadata_=entity.metadata,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    async def get_by_id(self, tool_id: str) -> Tool | None:
        result = await self._session.get(ToolModel, tool_id)
        return self._to_entity(result) if result else None

    async def get_by_folder(self, folder_name: str) -> Tool | None:
        result = await self._session.execute(
            select(ToolModel).where(ToolModel.folder_name == folder_name)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_all(self, *, active_only: bool = False) -> list[Tool]:
        stmt = select(ToolModel)
        if active_only:
            stmt = stmt.where(ToolModel.is_active.is_(True))
        stmt = stmt.order_by(ToolModel.created_at.desc())
        result = await self._session.execute(stmt)
        return [self._to_entity(row) for row in result.scalars().all()]

    async def create(self, tool: Tool) -> Tool:
        model = self._to_model(tool)
        self._session.add(model)
        await self._session.flush()
        return self._to_entity(model)

    async def update(self, tool: Tool) -> Tool:
        model = await self._session.get(ToolModel, tool.id)
        if model is None:
            raise ValueError(f"Tool {tool.id} not found in database")
        model.name = tool.name
        model.version = tool.version
        model.file_path = tool.file_path
        model.category_id = tool.category_id
        model.description = tool.description
        model.keywords = tool.keywords
        model.meta_title = tool.meta_title
        model.meta_description = tool.meta_description
        model.is_active = tool.is_active
        model.usage_count = tool.usage_count
        model.metadata_ = tool.metadata
        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, tool_id: str) -> bool:
        model = await self._session.get(ToolModel, tool_id)
        if model is None:
            return False
        await self._session.delete(model)
        await self._session.flush()
        return True
