"""Pydantic DTOs for conversion jobs and batches."""

from datetime import datetime
from typing import Any

from ai2pdf.application.schemas.base import CamelModel
from ai2pdf.domain.entities.conversion_job import JobStatus


class ConversionResponse(CamelModel):
    """A conversion job as returned to clients. The stored file path stays server-side."""

    id: str
    from_format: str
    to_format: str
    original_filename: str
    file_size: int
    status: JobStatus
    download_url: str | None = None
    metadata: dict[str, Any] = {}
    created_at: datetime
    completed_at: datetime | None = None


class BatchSubmissionResponse(CamelModel):
    batch_id: str
    conversions: list[ConversionResponse]
    total_files: int


class DeleteConversionResponse(CamelModel):
    deleted: bool
