"""Application service (use case) for conversion submission, lookup and download."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ai2pdf.application.interfaces.conversion_job_repository import ConversionJobRepository
from ai2pdf.application.services.batch_correlator import BatchCorrelator
from ai2pdf.application.services.conversion_scheduler import ConversionScheduler
from ai2pdf.domain.entities.conversion_job import ConversionJob, JobStatus
from ai2pdf.domain.exceptions import (
    EntityNotFoundError,
    FileTooLargeError,
    JobNotReadyError,
    NoCompletedJobsError,
    ValidationError,
)
from ai2pdf.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage
from ai2pdf.infrastructure.storage.local_file_storage import ArchiveEntry, LocalFileStorage

logger = logging.getLogger(__name__)
plog = PipelineLogger("ConversionService")


@dataclass
class Upload:
    """An uploaded file as received by the transport layer."""

    filename: str
    content: bytes
    content_type: str | None = None


@dataclass
class DownloadArtifact:
    """A file ready to be streamed back to the client."""

    path: Path
    filename: str
    media_type: str = "application/octet-stream"
    temporary: bool = False


@dataclass
class BatchSubmission:
    batch_id: str
    jobs: list[ConversionJob]

    @property
    def total_files(self) -> int:
        return len(self.jobs)


class ConversionService:
    """Orchestrates conversion jobs. Depends on the repository port (DI).

    Submission stores the upload, records the job in ``pending`` and hands
    it to the scheduler; the caller gets the job back immediately and polls
    for completion.
    """

    def __init__(
        self,
        repository: ConversionJobRepository,
        storage: LocalFileStorage,
        scheduler: ConversionScheduler,
        *,
        correlator: BatchCorrelator | None = None,
        max_upload_size_bytes: int = 25 * 1024 * 1024,
        max_batch_files: int = 10,
        default_quality: str = "high",
        batch_download_mode: str = "archive",
    ):
        self._repository = repository
        self._storage = storage
        self._scheduler = scheduler
        self._correlator = correlator or BatchCorrelator(repository)
        self._max_upload_size_bytes = max_upload_size_bytes
        self._max_batch_files = max_batch_files
        self._default_quality = default_quality
        self._batch_download_mode = batch_download_mode

    # ── Submission ───────────────────────────────────────────────────

    async def submit_single(
        self,
        upload: Upload | None,
        from_format: str | None,
        to_format: str | None,
        quality: str | None = None,
        settings: str | None = None,
        extra_metadata: dict[str, Any] | None = None,
    ) -> ConversionJob:
        if upload is None:
            raise ValidationError("No file uploaded", field="file")
        from_format, to_format = self._require_formats(from_format, to_format)
        self._check_size(upload)

        job = await self._build_job(upload, from_format, to_format, quality, settings)
        if extra_metadata:
            job.metadata.update(extra_metadata)
        job = await self._repository.create(job)
        self._scheduler.schedule(job)
        return job

    async def submit_batch(
        self,
        uploads: list[Upload],
        from_format: str | None,
        to_format: str | None,
        quality: str | None = None,
        settings: str | None = None,
    ) -> BatchSubmission:
        if not uploads:
            raise ValidationError("No files uploaded", field="files")
        if len(uploads) > self._max_batch_files:
            raise ValidationError(
                f"Too many files: at most {self._max_batch_files} per batch", field="files"
            )
        from_format, to_format = self._require_formats(from_format, to_format)
        for upload in uploads:
            self._check_size(upload)

        jobs = []
        for upload in uploads:
            job = await self._build_job(upload, from_format, to_format, quality, settings)
            job.metadata["isBatch"] = True
            jobs.append(job)

        created = await self._correlator.create_batch(jobs)
        for index, job in enumerate(created):
            self._scheduler.schedule(job, index)

        return BatchSubmission(batch_id=created[0].batch_id, jobs=created)

    # ── Queries ──────────────────────────────────────────────────────

    async def get(self, job_id: str) -> ConversionJob:
        job = await self._repository.get_by_id(job_id)
        if job is None:
            raise EntityNotFoundError("Conversion", job_id)
        return job

    async def get_batch(self, batch_id: str) -> list[ConversionJob]:
        return await self._correlator.get_batch(batch_id)

    async def list_recent(self, skip: int = 0, limit: int = 50) -> list[ConversionJob]:
        return await self._repository.get_all(skip=skip, limit=limit)

    async def count_by_status(self) -> dict[str, int]:
        return await self._repository.count_by_status()

    async def delete(self, job_id: str) -> bool:
        deleted = await self._repository.delete(job_id)
        if deleted:
            logger.info("Deleted conversion %s", job_id)
        return deleted

    # ── Downloads ────────────────────────────────────────────────────

    async def resolve_download(self, job_id: str) -> DownloadArtifact:
        job = await self.get(job_id)
        if job.status is not JobStatus.COMPLETED:
            raise JobNotReadyError(job_id, job.status.value)
        if not self._storage.file_exists(job.file_path):
            logger.warning("Artifact for conversion %s is missing: %s", job_id, job.file_path)
            raise EntityNotFoundError("File", job_id)
        return DownloadArtifact(path=Path(job.file_path), filename=job.converted_filename())

    async def resolve_batch_download(self, batch_id: str) -> DownloadArtifact:
        members = await self._correlator.get_batch(batch_id)
        if not members:
            raise EntityNotFoundError("Batch", batch_id)

        completed = [j for j in members if j.status is JobStatus.COMPLETED]
        if not completed:
            raise NoCompletedJobsError(batch_id)

        archive_name = f"batch_{batch_id}.zip"

        if self._batch_download_mode == "first":
            first = completed[0]
            if not self._storage.file_exists(first.file_path):
                raise EntityNotFoundError("File", first.id)
            return DownloadArtifact(path=Path(first.file_path), filename=first.converted_filename())

        entries = [
            ArchiveEntry(source_path=j.file_path, arcname=j.converted_filename())
            for j in completed
        ]
        try:
            archive = await self._storage.build_archive(batch_id, entries)
        except FileNotFoundError as exc:
            raise EntityNotFoundError("File", batch_id) from exc
        return DownloadArtifact(
            path=archive,
            filename=archive_name,
            media_type="application/zip",
            temporary=True,
        )

    # ── Helpers ──────────────────────────────────────────────────────

    @staticmethod
    def _require_formats(from_format: str | None, to_format: str | None) -> tuple[str, str]:
        from_format = (from_format or "").strip()
        to_format = (to_format or "").strip()
        if not from_format or not to_format:
            raise ValidationError("fromFormat and toFormat are required", field="format")
        return from_format, to_format

    def _check_size(self, upload: Upload) -> None:
        if len(upload.content) > self._max_upload_size_bytes:
            raise FileTooLargeError(upload.filename, self._max_upload_size_bytes)

    async def _build_job(
        self,
        upload: Upload,
        from_format: str,
        to_format: str,
        quality: str | None,
        settings: str | None,
    ) -> ConversionJob:
        stored = await self._storage.store_file(upload.content, upload.filename)
        plog.step_start(
            PipelineStage.UPLOAD,
            f"Stored {upload.filename}",
            size=stored.file_size,
            conversion=f"{from_format}->{to_format}",
        )
        return ConversionJob(
            from_format=from_format,
            to_format=to_format,
            original_filename=upload.filename,
            file_path=stored.stored_path,
            file_size=stored.file_size,
            status=JobStatus.PENDING,
            metadata={
                "quality": quality or self._default_quality,
                "settings": parse_settings(settings),
                "uploadedFileName": stored.filename,
                "originalName": upload.filename,
                "mimetype": upload.content_type or stored.mime_type,
            },
        )


def parse_settings(raw: str | None) -> dict[str, Any]:
    """Parse the optional JSON settings field; malformed input becomes ``{}``."""
    if not raw:
        return {}
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning("Invalid settings JSON, ignoring: %r", raw[:200])
        return {}
    if not isinstance(parsed, dict):
        logger.warning("Settings JSON is not an object, ignoring: %r", raw[:200])
        return {}
    return parsed
