"""Application service for anonymous visitor tracking."""

import logging

from ai2pdf.application.interfaces import VisitorRepository
from ai2pdf.domain.entities import Visitor
from ai2pdf.domain.exceptions import EntityNotFoundError

logger = logging.getLogger(__name__)


class VisitorService:
    """Creates or refreshes visitors identified by their cookie token."""

    def __init__(self, repository: VisitorRepository):
        self._repository = repository

    async def track(
        self,
        auth_token: str,
        *,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> Visitor:
        visitor = await self._repository.get_by_token(auth_token)
        if visitor is None:
            visitor = await self._repository.create(
                Visitor(auth_token=auth_token, ip_address=ip_address, user_agent=user_agent)
            )
            logger.info("New visitor tracked: %s", auth_token)
            return visitor

        visitor.touch()
        return await self._repository.update(visitor)

    async def list_visitors(self, skip: int = 0, limit: int = 100) -> list[Visitor]:
        return await self._repository.get_all(skip=skip, limit=limit)

    async def count_by_type(self) -> dict[str, int]:
        return await self._repository.count_by_type()

    async def total(self) -> int:
        return sum((await self._repository.count_by_type()).values())

    async def delete_visitor(self, visitor_id: str) -> None:
        if not await self._repository.delete(visitor_id):
            raise EntityNotFoundError("Visitor", visitor_id)

    async def delete_all(self) -> int:
        deleted = await self._repository.delete_all()
        logger.info("Deleted all visitors (%d)", deleted)
        return deleted
