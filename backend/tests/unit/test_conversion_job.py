"""Unit tests for the ConversionJob entity and its status rules."""

import pytest

from ai2pdf.domain.entities import BATCH_ID_KEY, ConversionJob, JobStatus


def _job(**overrides) -> ConversionJob:
    fields = dict(
        from_format="docx",
        to_format="pdf",
        original_filename="report.docx",
        file_path="/tmp/report.docx",
        file_size=10,
    )
    fields.update(overrides)
    return ConversionJob(**fields)


def test_new_job_is_pending_without_completion():
    job = _job()
    assert job.status is JobStatus.PENDING
    assert job.download_url is None
    assert job.completed_at is None
    assert job.created_at.tzinfo is not None


@pytest.mark.parametrize(
    "current,target,allowed",
    [
        (JobStatus.PENDING, JobStatus.PROCESSING, True),
        (JobStatus.PENDING, JobStatus.FAILED, True),
        (JobStatus.PENDING, JobStatus.PENDING, False),
        (JobStatus.PROCESSING, JobStatus.COMPLETED, True),
        (JobStatus.PROCESSING, JobStatus.FAILED, True),
        (JobStatus.PROCESSING, JobStatus.PENDING, False),
        (JobStatus.COMPLETED, JobStatus.FAILED, False),
        (JobStatus.FAILED, JobStatus.COMPLETED, False),
        (JobStatus.COMPLETED, JobStatus.PROCESSING, False),
    ],
)
def test_status_only_moves_forward(current, target, allowed):
    assert current.can_transition_to(target) is allowed


def test_terminal_statuses():
    assert JobStatus.COMPLETED.is_terminal
    assert JobStatus.FAILED.is_terminal
    assert not JobStatus.PENDING.is_terminal
    assert not JobStatus.PROCESSING.is_terminal


def test_batch_id_is_read_from_metadata():
    assert _job().batch_id is None
    assert _job(metadata={BATCH_ID_KEY: "b-1"}).batch_id == "b-1"


def test_converted_filename_uses_stem_and_target_format():
    assert _job().converted_filename() == "report_converted.pdf"
    assert _job(original_filename="archive.tar.gz", to_format="zip").converted_filename() == "archive.tar_converted.zip"
