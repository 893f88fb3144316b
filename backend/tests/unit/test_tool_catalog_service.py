"""Unit tests for the HTML tool catalog."""

from pathlib import Path

import pytest

from ai2pdf.application.services import ToolCatalogService, Upload
from ai2pdf.domain.entities import slugify_tool_name
from ai2pdf.domain.exceptions import (
    DuplicateEntityError,
    EntityNotFoundError,
    FileTooLargeError,
    ValidationError,
)
from ai2pdf.infrastructure.storage import ToolFileStorage

from fakes import FakeToolRepository


@pytest.fixture
def repository() -> FakeToolRepository:
    return FakeToolRepository()


@pytest.fixture
def storage(tmp_path: Path) -> ToolFileStorage:
    return ToolFileStorage(tools_dir=str(tmp_path / "tools"))


@pytest.fixture
def service(repository, storage, settings_service) -> ToolCatalogService:
    return ToolCatalogService(repository, storage, settings_service, max_upload_size_bytes=1024)


def _html(name: str = "tool.html", content: bytes = b"<html>hi</html>") -> Upload:
    return Upload(filename=name, content=content, content_type="text/html")


@pytest.mark.parametrize(
    "name,slug",
    [("Word Counter", "word-counter"), ("  PDF -- Merge!! ", "pdf-merge"), ("Ünïcode", "n-code")],
)
def test_slugify_tool_name(name, slug):
    assert slugify_tool_name(name) == slug


@pytest.mark.asyncio
async def test_create_tool_stores_file_and_logs(service, storage, activity_repository):
    tool = await service.create_tool(_html(), "Word Counter", description="Counts words")

    assert tool.folder_name == "word-counter"
    assert tool.version == "v1.0.0"
    assert tool.description == "Counts words"
    assert tool.metadata["originalFilename"] == "tool.html"
    assert storage.entrypoint("word-counter").read_bytes() == b"<html>hi</html>"
    assert [e.action for e in activity_repository.entries] == ["tool_created"]


@pytest.mark.asyncio
async def test_explicit_folder_name_is_slugified(service):
    tool = await service.create_tool(_html(), "Counter", folder_name="My Folder")
    assert tool.folder_name == "my-folder"


@pytest.mark.asyncio
async def test_create_tool_validation(service):
    with pytest.raises(ValidationError):
        await service.create_tool(None, "Tool")
    with pytest.raises(ValidationError):
        await service.create_tool(_html("tool.js"), "Tool")
    with pytest.raises(ValidationError):
        await service.create_tool(_html(), "   ")
    with pytest.raises(FileTooLargeError):
        await service.create_tool(_html(content=b"x" * 2048), "Tool")


@pytest.mark.asyncio
async def test_duplicate_folder_is_rejected(service):
    await service.create_tool(_html(), "Word Counter")
    with pytest.raises(DuplicateEntityError):
        await service.create_tool(_html(), "word counter")


@pytest.mark.asyncio
async def test_delete_tool_removes_folder_and_row(service, storage, repository, activity_repository):
    tool = await service.create_tool(_html(), "Word Counter")
    await service.delete_tool(tool.id, ip_address="10.0.0.1")

    assert storage.entrypoint("word-counter") is None
    assert await repository.get_by_id(tool.id) is None
    assert activity_repository.entries[-1].action == "tool_deleted"
    assert activity_repository.entries[-1].ip_address == "10.0.0.1"


@pytest.mark.asyncio
async def test_delete_unknown_tool(service):
    with pytest.raises(EntityNotFoundError):
        await service.delete_tool("missing")


@pytest.mark.asyncio
async def test_open_tool_counts_usage(service, repository):
    tool = await service.create_tool(_html(), "Word Counter")

    assert await service.open_tool("word-counter") is not None
    await service.open_tool("word-counter")
    assert (await repository.get_by_id(tool.id)).usage_count == 2


@pytest.mark.asyncio
async def test_open_unknown_tool(service):
    assert await service.open_tool("nothing-here") is None


def test_categories_are_static(service):
    slugs = [c.slug for c in service.list_categories()]
    assert "pdf-tools" in slugs
    assert len(slugs) == len(set(slugs))
