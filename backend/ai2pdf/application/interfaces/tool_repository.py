"""Abstract repository interface (port) for the tool catalog."""

from abc import ABC, abstractmethod

from ai2pdf.domain.entities import Tool


class ToolRepository(ABC):
    """Port for tool persistence, implemented in the infrastructure layer."""

    @abstractmethod
    async def get_by_id(self, tool_id: str) -> Tool | None:
        ...

    @abstractmethod
    async def get_by_folder(self, folder_name: str) -> Tool | None:
        ...

    @abstractmethod
    async def get_all(self, *, active_only: bool = False) -> list[Tool]:
        """Retrieve tools, most recent first."""
        ...

    @abstractmethod
    async def create(self, tool: Tool) -> Tool:
        ...

    @abstractmethod
    async def update(self, tool: Tool) -> Tool:
        ...

    @abstractmethod
    async def delete(self, tool_id: str) -> bool:
        """Delete a tool. Returns True if deleted, False if not found."""
        ...
