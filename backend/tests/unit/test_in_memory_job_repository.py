"""Unit tests for the process-local conversion job store."""

import pytest

from ai2pdf.domain.entities import BATCH_ID_KEY, ConversionJob, JobStatus
from ai2pdf.infrastructure.memory import InMemoryConversionJobRepository


def _job(name: str = "a.docx", batch_id: str | None = None) -> ConversionJob:
    metadata = {"quality": "low"}
    if batch_id:
        metadata[BATCH_ID_KEY] = batch_id
    return ConversionJob(
        from_format="docx",
        to_format="pdf",
        original_filename=name,
        file_path=f"/tmp/{name}",
        file_size=1,
        metadata=metadata,
    )


@pytest.fixture
def repository() -> InMemoryConversionJobRepository:
    return InMemoryConversionJobRepository()


@pytest.mark.asyncio
async def test_create_assigns_unique_ids(repository):
    first = await repository.create(_job())
    second = await repository.create(_job())
    assert first.id and second.id
    assert first.id != second.id


@pytest.mark.asyncio
async def test_returned_jobs_are_copies(repository):
    created = await repository.create(_job())
    created.status = JobStatus.FAILED
    created.metadata["quality"] = "high"

    stored = await repository.get_by_id(created.id)
    assert stored.status is JobStatus.PENDING
    assert stored.metadata["quality"] == "low"


@pytest.mark.asyncio
async def test_update_merges_only_given_fields(repository):
    created = await repository.create(_job())
    updated = await repository.update(created.id, {"status": "processing"})

    assert updated.status is JobStatus.PROCESSING
    assert updated.original_filename == created.original_filename
    assert updated.created_at == created.created_at


@pytest.mark.asyncio
async def test_update_missing_job_returns_none(repository):
    assert await repository.update("missing", {"status": JobStatus.FAILED}) is None


@pytest.mark.asyncio
async def test_update_rejects_identity_and_unknown_fields(repository):
    created = await repository.create(_job())
    with pytest.raises(ValueError):
        await repository.update(created.id, {"id": "other"})
    with pytest.raises(ValueError):
        await repository.update(created.id, {"colour": "blue"})


@pytest.mark.asyncio
async def test_update_with_unknown_field_changes_nothing(repository):
    created = await repository.create(_job())
    with pytest.raises(ValueError):
        await repository.update(created.id, {"status": JobStatus.PROCESSING, "bogus": 1})

    stored = await repository.get_by_id(created.id)
    assert stored.status is JobStatus.PENDING


@pytest.mark.asyncio
async def test_delete_is_idempotent(repository):
    created = await repository.create(_job())
    assert await repository.delete(created.id) is True
    assert await repository.delete(created.id) is False
    assert await repository.get_by_id(created.id) is None


@pytest.mark.asyncio
async def test_get_by_batch_keeps_submission_order(repository):
    first = await repository.create(_job("1.docx", batch_id="b"))
    await repository.create(_job("other.docx", batch_id="c"))
    second = await repository.create(_job("2.docx", batch_id="b"))

    members = await repository.get_by_batch("b")
    assert [j.id for j in members] == [first.id, second.id]
    assert await repository.get_by_batch("unknown") == []


@pytest.mark.asyncio
async def test_deleted_member_leaves_batch(repository):
    first = await repository.create(_job("1.docx", batch_id="b"))
    second = await repository.create(_job("2.docx", batch_id="b"))

    await repository.delete(first.id)
    assert [j.id for j in await repository.get_by_batch("b")] == [second.id]

    await repository.delete(second.id)
    assert await repository.get_by_batch("b") == []


@pytest.mark.asyncio
async def test_metadata_update_moves_job_between_batches(repository):
    job = await repository.create(_job(batch_id="old"))
    await repository.update(job.id, {"metadata": {BATCH_ID_KEY: "new"}})

    assert await repository.get_by_batch("old") == []
    assert [j.id for j in await repository.get_by_batch("new")] == [job.id]


@pytest.mark.asyncio
async def test_count_by_status(repository):
    a = await repository.create(_job())
    await repository.create(_job())
    await repository.update(a.id, {"status": JobStatus.COMPLETED})

    assert await repository.count_by_status() == {"pending": 1, "completed": 1}
