"""Unit tests for upload, archive and tool file storage."""

import io
import re
import zipfile
from pathlib import Path

import pytest

from ai2pdf.infrastructure.storage import ArchiveEntry, LocalFileStorage, ToolFileStorage


@pytest.fixture
def storage(tmp_path: Path) -> LocalFileStorage:
    return LocalFileStorage(upload_dir=str(tmp_path / "uploads"))


@pytest.mark.asyncio
async def test_store_file_names_are_unique_and_stamped(storage):
    first = await storage.store_file(b"abc", "My Report.docx")
    second = await storage.store_file(b"abc", "My Report.docx")

    assert first.filename != second.filename
    assert re.fullmatch(r"My_Report_\d{8}_\d{6}_[0-9a-f]{8}\.docx", first.filename)
    assert first.original_name == "My Report.docx"
    assert first.file_size == 3
    assert Path(first.stored_path).parent == storage.upload_dir / "files"


@pytest.mark.asyncio
async def test_list_and_delete_uploads(storage):
    stored = await storage.store_file(b"abc", "a.txt")

    listed = storage.list_files()
    assert [f["name"] for f in listed] == [stored.filename]
    assert listed[0]["size"] == 3

    assert await storage.delete_upload(stored.filename) is True
    assert await storage.delete_upload(stored.filename) is False
    assert storage.list_files() == []


@pytest.mark.asyncio
async def test_delete_upload_rejects_paths_outside_files(storage, tmp_path):
    outside = tmp_path / "uploads" / "secret.txt"
    outside.write_text("keep")

    assert await storage.delete_upload("../secret.txt") is False
    assert outside.exists()


@pytest.mark.asyncio
async def test_build_archive_skips_missing_and_dedupes(storage, tmp_path):
    a = tmp_path / "a.bin"
    a.write_bytes(b"A")
    b = tmp_path / "b.bin"
    b.write_bytes(b"B")

    path = await storage.build_archive(
        "batch-1",
        [
            ArchiveEntry(str(a), "out.pdf"),
            ArchiveEntry(str(tmp_path / "missing.bin"), "lost.pdf"),
            ArchiveEntry(str(b), "out.pdf"),
        ],
    )

    assert path.parent.name == "archives"
    assert path.name.startswith("batch_batch-1_")
    assert path.suffix == ".zip"
    with zipfile.ZipFile(path) as zf:
        assert zf.namelist() == ["out.pdf", "out_1.pdf"]
        assert zf.read("out_1.pdf") == b"B"


@pytest.mark.asyncio
async def test_build_archive_without_sources_fails(storage, tmp_path):
    with pytest.raises(FileNotFoundError):
        await storage.build_archive("empty", [ArchiveEntry(str(tmp_path / "nope"), "x.pdf")])


@pytest.mark.asyncio
async def test_rebuilding_batch_archive_leaves_earlier_one_intact(storage, tmp_path):
    a = tmp_path / "a.bin"
    a.write_bytes(b"A")
    b = tmp_path / "b.bin"
    b.write_bytes(b"B")

    first = await storage.build_archive("batch1", [ArchiveEntry(str(a), "a.pdf")])
    with first.open("rb") as reader:
        head = reader.read(100)
        second = await storage.build_archive(
            "batch1", [ArchiveEntry(str(a), "a.pdf"), ArchiveEntry(str(b), "b.pdf")]
        )
        served = head + reader.read()

    assert first != second
    with zipfile.ZipFile(io.BytesIO(served)) as zf:
        assert zf.namelist() == ["a.pdf"]
    with zipfile.ZipFile(second) as zf:
        assert zf.namelist() == ["a.pdf", "b.pdf"]


@pytest.mark.asyncio
async def test_tool_storage_round_trip(tmp_path):
    tools = ToolFileStorage(tools_dir=str(tmp_path / "tools"))

    path = await tools.save_tool("word-counter", b"<html></html>")
    assert tools.entrypoint("word-counter") == path
    assert path.read_bytes() == b"<html></html>"

    assert await tools.remove_tool("word-counter") is True
    assert tools.entrypoint("word-counter") is None
    assert await tools.remove_tool("word-counter") is False


@pytest.mark.asyncio
async def test_tool_storage_rejects_escaping_folders(tmp_path):
    tools = ToolFileStorage(tools_dir=str(tmp_path / "tools"))

    assert tools.entrypoint("../etc") is None
    with pytest.raises(ValueError):
        await tools.save_tool("../outside", b"x")
