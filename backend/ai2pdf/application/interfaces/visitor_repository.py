"""Abstract repository interface (port) for tracked visitors."""

from abc import ABC, abstractmethod

from ai2pdf.domain.entities import Visitor


class VisitorRepository(ABC):
    """Port for visitor persistence, implemented in the infrastructure layer."""

    @abstractmethod
    async def get_by_token(self, auth_token: str) -> Visitor | None:
        ...

    @abstractmethod
    async def get_by_id(self, visitor_id: str) -> Visitor | None:
        ...

    @abstractmethod
    async def get_all(self, skip: int = 0, limit: int = 100) -> list[Visitor]:
        """Retrieve visitors, most recent first."""
        ...

    @abstractmethod
    async def create(self, visitor: Visitor) -> Visitor:
        ...

    @abstractmethod
    async def update(self, visitor: Visitor) -> Visitor:
        ...

    @abstractmethod
    async def delete(self, visitor_id: str) -> bool:
        """Delete a visitor. Returns True if deleted, False if not found."""
        ...

    @abstractmethod
    async def delete_all(self) -> int:
        """Delete every visitor. Returns the number of deleted rows."""
        ...

    @abstractmethod
    async def count_by_type(self) -> dict[str, int]:
        """Return the number of visitors per ``user_type``."""
        ...
