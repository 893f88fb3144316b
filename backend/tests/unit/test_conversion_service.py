"""Unit tests for ConversionService submission, lookup and downloads."""

import logging
import zipfile
from pathlib import Path

import pytest
import pytest_asyncio

from ai2pdf.application.services import ConversionScheduler, ConversionService, Upload
from ai2pdf.application.services.conversion_service import parse_settings
from ai2pdf.domain.entities import BATCH_ID_KEY, JobStatus
from ai2pdf.domain.exceptions import (
    EntityNotFoundError,
    FileTooLargeError,
    JobNotReadyError,
    NoCompletedJobsError,
    StorageError,
    ValidationError,
)
from ai2pdf.infrastructure.converters import SimulatedConverter
from ai2pdf.infrastructure.memory import InMemoryConversionJobRepository
from ai2pdf.infrastructure.storage import LocalFileStorage


@pytest.fixture
def repository() -> InMemoryConversionJobRepository:
    return InMemoryConversionJobRepository()


@pytest.fixture
def storage(tmp_path: Path) -> LocalFileStorage:
    return LocalFileStorage(upload_dir=str(tmp_path / "uploads"))


@pytest_asyncio.fixture
async def scheduler(repository):
    converter = SimulatedConverter({"high": 30, "medium": 20, "low": 10}, default_delay_ms=10)
    scheduler = ConversionScheduler(repository, converter, start_delay_ms=1, stride_ms=5)
    await scheduler.start()
    yield scheduler
    await scheduler.stop()


def _make_service(repository, storage, scheduler, **options) -> ConversionService:
    options.setdefault("max_upload_size_bytes", 1024)
    return ConversionService(repository, storage, scheduler, **options)


@pytest.fixture
def service(repository, storage, scheduler) -> ConversionService:
    return _make_service(repository, storage, scheduler)


def _upload(name: str = "report.docx", content: bytes = b"hello") -> Upload:
    return Upload(filename=name, content=content, content_type=None)


# ── Submission ──────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_submit_single_returns_pending_job(service):
    job = await service.submit_single(_upload(), "docx", "pdf", "low", '{"pageSize": "A4"}')

    assert job.id
    assert job.status is JobStatus.PENDING
    assert job.download_url is None
    assert job.file_size == 5
    assert job.metadata["quality"] == "low"
    assert job.metadata["settings"] == {"pageSize": "A4"}
    assert job.metadata["originalName"] == "report.docx"
    assert Path(job.file_path).read_bytes() == b"hello"


@pytest.mark.asyncio
async def test_submit_single_defaults_quality(service):
    job = await service.submit_single(_upload(), "docx", "pdf")
    assert job.metadata["quality"] == "high"
    assert job.metadata["settings"] == {}


@pytest.mark.asyncio
async def test_submitted_job_completes_in_background(service, scheduler):
    job = await service.submit_single(_upload(), "docx", "pdf", "low")
    await scheduler.drain()

    done = await service.get(job.id)
    assert done.status is JobStatus.COMPLETED
    assert done.download_url == f"/api/v1/download/{job.id}"


@pytest.mark.asyncio
async def test_submit_without_file_is_rejected(service):
    with pytest.raises(ValidationError):
        await service.submit_single(None, "docx", "pdf")


@pytest.mark.asyncio
@pytest.mark.parametrize("from_format,to_format", [(None, "pdf"), ("docx", ""), ("  ", "pdf")])
async def test_submit_without_formats_is_rejected(service, from_format, to_format):
    with pytest.raises(ValidationError):
        await service.submit_single(_upload(), from_format, to_format)


@pytest.mark.asyncio
async def test_oversized_upload_is_rejected_without_job(service, repository):
    with pytest.raises(FileTooLargeError):
        await service.submit_single(_upload(content=b"x" * 2048), "docx", "pdf")
    assert await repository.get_all() == []


@pytest.mark.asyncio
async def test_submit_batch_groups_jobs(service, scheduler):
    uploads = [_upload(f"doc{i}.docx") for i in range(3)]
    submission = await service.submit_batch(uploads, "docx", "pdf", "low")

    assert submission.total_files == 3
    assert all(j.batch_id == submission.batch_id for j in submission.jobs)
    assert all(j.metadata["isBatch"] is True for j in submission.jobs)
    assert all(j.status is JobStatus.PENDING for j in submission.jobs)

    await scheduler.drain()
    members = await service.get_batch(submission.batch_id)
    assert [m.original_filename for m in members] == ["doc0.docx", "doc1.docx", "doc2.docx"]
    assert all(m.status is JobStatus.COMPLETED for m in members)


@pytest.mark.asyncio
async def test_submit_batch_limits(service):
    with pytest.raises(ValidationError):
        await service.submit_batch([], "docx", "pdf")
    with pytest.raises(ValidationError):
        await service.submit_batch([_upload() for _ in range(11)], "docx", "pdf")


@pytest.mark.asyncio
async def test_batch_with_one_oversized_file_creates_nothing(service, repository):
    uploads = [_upload(), _upload(content=b"x" * 2048)]
    with pytest.raises(FileTooLargeError):
        await service.submit_batch(uploads, "docx", "pdf")
    assert await repository.get_all() == []


# ── Queries ─────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_get_unknown_job_raises(service):
    with pytest.raises(EntityNotFoundError):
        await service.get("missing")


@pytest.mark.asyncio
async def test_unknown_batch_is_empty(service):
    assert await service.get_batch("missing") == []


@pytest.mark.asyncio
async def test_delete(service):
    job = await service.submit_single(_upload(), "docx", "pdf")
    assert await service.delete(job.id) is True
    assert await service.delete(job.id) is False


# ── Downloads ───────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_download_before_completion_is_not_ready(service):
    job = await service.submit_single(_upload(), "docx", "pdf")
    with pytest.raises(JobNotReadyError):
        await service.resolve_download(job.id)


@pytest.mark.asyncio
async def test_download_completed_job(service, scheduler):
    job = await service.submit_single(_upload(), "docx", "pdf", "low")
    await scheduler.drain()

    artifact = await service.resolve_download(job.id)
    assert artifact.filename == "report_converted.pdf"
    assert artifact.path.read_bytes() == b"hello"


@pytest.mark.asyncio
async def test_download_with_missing_artifact(service, scheduler):
    job = await service.submit_single(_upload(), "docx", "pdf", "low")
    await scheduler.drain()
    Path(job.file_path).unlink()

    with pytest.raises(EntityNotFoundError):
        await service.resolve_download(job.id)


@pytest.mark.asyncio
async def test_download_unknown_job(service):
    with pytest.raises(EntityNotFoundError):
        await service.resolve_download("missing")


@pytest.mark.asyncio
async def test_batch_download_archive(service, scheduler):
    uploads = [_upload("same.docx", b"one"), _upload("same.docx", b"two")]
    submission = await service.submit_batch(uploads, "docx", "pdf", "low")
    await scheduler.drain()

    artifact = await service.resolve_batch_download(submission.batch_id)
    assert artifact.filename == f"batch_{submission.batch_id}.zip"
    assert artifact.media_type == "application/zip"
    assert artifact.temporary is True
    with zipfile.ZipFile(artifact.path) as zf:
        assert sorted(zf.namelist()) == ["same_converted.pdf", "same_converted_1.pdf"]


@pytest.mark.asyncio
async def test_batch_download_first_mode(repository, storage, scheduler):
    service = _make_service(repository, storage, scheduler, batch_download_mode="first")
    submission = await service.submit_batch(
        [_upload("a.docx", b"first"), _upload("b.docx", b"second")], "docx", "pdf", "low"
    )
    await scheduler.drain()

    artifact = await service.resolve_batch_download(submission.batch_id)
    assert artifact.filename == "a_converted.pdf"
    assert artifact.temporary is False
    assert artifact.path.read_bytes() == b"first"


@pytest.mark.asyncio
async def test_batch_download_needs_a_completed_member(service, repository):
    submission = await service.submit_batch([_upload()], "docx", "pdf", "high")
    with pytest.raises(NoCompletedJobsError):
        await service.resolve_batch_download(submission.batch_id)


@pytest.mark.asyncio
async def test_batch_download_unknown_batch(service):
    with pytest.raises(EntityNotFoundError):
        await service.resolve_batch_download("missing")


@pytest.mark.asyncio
async def test_batch_download_skips_removed_members(service, repository, scheduler):
    submission = await service.submit_batch(
        [_upload("ok.docx"), _upload("gone.docx")], "docx", "pdf", "low"
    )
    await scheduler.drain()
    await repository.delete(submission.jobs[1].id)

    artifact = await service.resolve_batch_download(submission.batch_id)
    with zipfile.ZipFile(artifact.path) as zf:
        assert zf.namelist() == ["ok_converted.pdf"]


# ── Settings field ──────────────────────────────────────────────────


@pytest.mark.parametrize(
    "raw,expected",
    [
        (None, {}),
        ("", {}),
        ('{"dpi": 300}', {"dpi": 300}),
        ("not json", {}),
        ("[1, 2]", {}),
    ],
)
def test_parse_settings(raw, expected):
    assert parse_settings(raw) == expected


@pytest.mark.asyncio
async def test_scenario_low_quality_docx_batch(service, scheduler):
    """Three low-quality documents convert and all become downloadable."""
    submission = await service.submit_batch(
        [_upload(f"part{i}.docx") for i in range(3)], "docx", "pdf", "low"
    )
    assert all(j.metadata[BATCH_ID_KEY] == submission.batch_id for j in submission.jobs)

    await scheduler.drain()
    for job in submission.jobs:
        artifact = await service.resolve_download(job.id)
        assert artifact.filename.endswith("_converted.pdf")


class _FailsOnSecondCreate(InMemoryConversionJobRepository):
    def __init__(self) -> None:
        super().__init__()
        self.creates = 0

    async def create(self, job):
        self.creates += 1
        if self.creates == 2:
            raise StorageError("create")
        return await super().create(job)


@pytest.mark.asyncio
async def test_submit_batch_propagates_storage_failure(storage):
    repository = _FailsOnSecondCreate()
    converter = SimulatedConverter({"low": 10}, default_delay_ms=10)
    scheduler = ConversionScheduler(repository, converter, start_delay_ms=1, stride_ms=5)
    service = _make_service(repository, storage, scheduler)

    with pytest.raises(StorageError):
        await service.submit_batch([_upload("a.docx"), _upload("b.docx")], "docx", "pdf", "low")

    persisted = await repository.get_all()
    assert [j.original_filename for j in persisted] == ["a.docx"]
    assert persisted[0].status is JobStatus.PENDING


@pytest.mark.asyncio
async def test_upload_is_logged_under_service_name(service, caplog):
    caplog.set_level(logging.INFO, logger="ConversionService")
    await service.submit_single(_upload("report.docx"), "docx", "pdf", "low")

    stored = [r for r in caplog.records if "Stored report.docx" in r.getMessage()]
    assert [r.name for r in stored] == ["ConversionService"]
