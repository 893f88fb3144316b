"""Application service for the HTML tool catalog."""

import logging
from datetime import datetime, timezone
from pathlib import Path

from ai2pdf.application.interfaces import ToolRepository
from ai2pdf.application.services.conversion_service import Upload
from ai2pdf.application.services.system_settings_service import SystemSettingsService
from ai2pdf.domain.entities import DEFAULT_CATEGORIES, Tool, ToolCategory, slugify_tool_name
from ai2pdf.domain.exceptions import (
    DuplicateEntityError,
    EntityNotFoundError,
    FileTooLargeError,
    ValidationError,
)
from ai2pdf.infrastructure.storage.tool_file_storage import ToolFileStorage

logger = logging.getLogger(__name__)


class ToolCatalogService:
    """Uploads, lists, serves and removes self-contained HTML tools."""

    def __init__(
        self,
        repository: ToolRepository,
        storage: ToolFileStorage,
        settings_service: SystemSettingsService,
        *,
        max_upload_size_bytes: int = 5 * 1024 * 1024,
    ):
        self._repository = repository
        self._storage = storage
        self._settings = settings_service
        self._max_upload_size_bytes = max_upload_size_bytes

    async def list_tools(self, *, active_only: bool = True) -> list[Tool]:
        return await self._repository.get_all(active_only=active_only)

    def list_categories(self) -> list[ToolCategory]:
        return list(DEFAULT_CATEGORIES)

    async def create_tool(
        self,
        upload: Upload | None,
        name: str | None,
        *,
        folder_name: str | None = None,
        version: str | None = None,
        category_id: str | None = None,
        description: str | None = None,
        keywords: str | None = None,
        meta_title: str | None = None,
        meta_description: str | None = None,
        ip_address: str | None = None,
    ) -> Tool:
        if upload is None:
            raise ValidationError("No HTML file uploaded", field="file")
        if not upload.filename.lower().endswith(".html"):
            raise ValidationError("Only HTML files are allowed", field="file")
        if len(upload.content) > self._max_upload_size_bytes:
            raise FileTooLargeError(upload.filename, self._max_upload_size_bytes)

        name = (name or "").strip()
        if not name:
            raise ValidationError("Tool name is required", field="name")

        folder = slugify_tool_name(folder_name or name)
        if not folder:
            raise ValidationError("Tool name must contain letters or digits", field="name")
        if await self._repository.get_by_folder(folder) is not None:
            raise DuplicateEntityError("Tool", "folder_name", folder)

        path = await self._storage.save_tool(folder, upload.content)
        tool = await self._repository.create(
            Tool(
                name=name,
                folder_name=folder,
                file_path=str(path),
                version=version or "v1.0.0",
                category_id=category_id or None,
                description=description or None,
                keywords=keywords or None,
                meta_title=meta_title or None,
                meta_description=meta_description or None,
                metadata={
                    "originalFilename": upload.filename,
                    "fileSize": len(upload.content),
                    "uploadedAt": datetime.now(timezone.utc).isoformat(),
                },
            )
        )
        await self._settings.log_activity(
            "tool_created",
            {"toolName": name, "folderName": folder},
            ip_address=ip_address,
        )
        logger.info("Tool %r created at /tools/%s", name, folder)
        return tool

    async def delete_tool(self, tool_id: str, *, ip_address: str | None = None) -> None:
        tool = await self._repository.get_by_id(tool_id)
        if tool is None:
            raise EntityNotFoundError("Tool", tool_id)

        try:
            await self._storage.remove_tool(tool.folder_name)
        except OSError:
            logger.warning("Failed to remove tool directory for %s", tool.folder_name, exc_info=True)

        await self._repository.delete(tool_id)
        await self._settings.log_activity(
            "tool_deleted",
            {"toolName": tool.name, "folderName": tool.folder_name},
            ip_address=ip_address,
        )
        logger.info("Tool %r deleted", tool.name)

    async def open_tool(self, folder_name: str) -> Path | None:
        """Entrypoint of a tool to serve, counting the visit when the tool is registered."""
        entrypoint = self._storage.entrypoint(folder_name)
        if entrypoint is None:
            return None

        tool = await self._repository.get_by_folder(folder_name)
        if tool is not None:
            tool.usage_count += 1
            await self._repository.update(tool)
        return entrypoint
