"""Conversions API controller: submit, poll, download and delete conversion jobs."""

import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from fastapi.responses import FileResponse
from starlette.background import BackgroundTask

from ai2pdf.application.schemas import (
    BatchSubmissionResponse,
    ConversionResponse,
    DeleteConversionResponse,
)
from ai2pdf.application.services import ConversionService, DownloadArtifact, Upload
from ai2pdf.domain.exceptions import (
    EntityNotFoundError,
    FileTooLargeError,
    JobNotReadyError,
    NoCompletedJobsError,
    StorageError,
    ValidationError,
)
from ai2pdf.infrastructure.dependencies import get_conversion_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Conversions"])


# ── Helpers ──────────────────────────────────────────────────────────

async def _to_upload(file: UploadFile) -> Upload:
    content = await file.read()
    return Upload(
        filename=file.filename or "upload",
        content=content,
        content_type=file.content_type,
    )


def _to_response(job) -> ConversionResponse:
    return ConversionResponse.model_validate(job, from_attributes=True)


def _cleanup_task(artifact: DownloadArtifact) -> BackgroundTask | None:
    """Remove per-request archives once the response body has been sent."""
    if not artifact.temporary:
        return None
    return BackgroundTask(artifact.path.unlink, missing_ok=True)


def _to_file_response(artifact: DownloadArtifact) -> FileResponse:
    return FileResponse(
        path=artifact.path,
        filename=artifact.filename,
        media_type=artifact.media_type,
        background=_cleanup_task(artifact),
    )


def _submission_error(exc: Exception) -> HTTPException:
    if isinstance(exc, FileTooLargeError):
        return HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=exc.message)
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=exc.message)
    logger.error("Conversion submission failed: %s", exc)
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))


# ── Submission ───────────────────────────────────────────────────────

@router.post(
    "/conversions",
    response_model=ConversionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_conversion(
    file: UploadFile | None = File(None),
    from_format: str | None = Form(None, alias="fromFormat"),
    to_format: str | None = Form(None, alias="toFormat"),
    quality: str | None = Form(None),
    settings: str | None = Form(None),
    service: ConversionService = Depends(get_conversion_service),
) -> ConversionResponse:
    """Upload one file; the job is returned in ``pending`` and completes in the background."""
    upload = await _to_upload(file) if file is not None else None
    try:
        job = await service.submit_single(upload, from_format, to_format, quality, settings)
    except (ValidationError, StorageError) as e:
        raise _submission_error(e)
    return _to_response(job)


@router.post(
    "/conversions/batch",
    response_model=BatchSubmissionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_batch(
    files: list[UploadFile] | None = File(None),
    from_format: str | None = Form(None, alias="fromFormat"),
    to_format: str | None = Form(None, alias="toFormat"),
    quality: str | None = Form(None),
    settings: str | None = Form(None),
    service: ConversionService = Depends(get_conversion_service),
) -> BatchSubmissionResponse:
    """Upload several files that share one batch id."""
    uploads = [await _to_upload(f) for f in files or []]
    try:
        submission = await service.submit_batch(uploads, from_format, to_format, quality, settings)
    except (ValidationError, StorageError) as e:
        raise _submission_error(e)
    return BatchSubmissionResponse(
        batch_id=submission.batch_id,
        conversions=[_to_response(j) for j in submission.jobs],
        total_files=submission.total_files,
    )


# ── Queries ──────────────────────────────────────────────────────────

@router.get("/conversions/batch/{batch_id}", response_model=list[ConversionResponse])
async def get_batch(
    batch_id: str,
    service: ConversionService = Depends(get_conversion_service),
) -> list[ConversionResponse]:
    """All jobs of a batch in submission order; empty when the batch is unknown."""
    try:
        jobs = await service.get_batch(batch_id)
    except StorageError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    return [_to_response(j) for j in jobs]


@router.get("/conversions/{job_id}", response_model=ConversionResponse)
async def get_conversion(
    job_id: str,
    service: ConversionService = Depends(get_conversion_service),
) -> ConversionResponse:
    try:
        job = await service.get(job_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except StorageError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    return _to_response(job)


@router.delete("/conversions/{job_id}", response_model=DeleteConversionResponse)
async def delete_conversion(
    job_id: str,
    service: ConversionService = Depends(get_conversion_service),
) -> DeleteConversionResponse:
    try:
        deleted = await service.delete(job_id)
    except StorageError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    return DeleteConversionResponse(deleted=deleted)


# ── Downloads ────────────────────────────────────────────────────────

@router.get("/download/batch/{batch_id}")
async def download_batch(
    batch_id: str,
    service: ConversionService = Depends(get_conversion_service),
) -> FileResponse:
    """Download the completed members of a batch."""
    try:
        artifact = await service.resolve_batch_download(batch_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except NoCompletedJobsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except StorageError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    return _to_file_response(artifact)


@router.get("/download/{job_id}")
async def download_conversion(
    job_id: str,
    service: ConversionService = Depends(get_conversion_service),
) -> FileResponse:
    """Download the artifact of a completed conversion."""
    try:
        artifact = await service.resolve_download(job_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except JobNotReadyError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except StorageError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    return _to_file_response(artifact)
