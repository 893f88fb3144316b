"""Metered public API: conversions authenticated by ``Authorization: Bearer ak_...``."""

import logging
from pathlib import Path

from fastapi import APIRouter, Depends, File, Form, Header, HTTPException, UploadFile, status

from ai2pdf.application.schemas import ApiConvertResponse, KeyInfo, KeyInfoResponse, PlanInfo
from ai2pdf.application.services import ApiAccessService, ConversionService, Upload
from ai2pdf.config import get_settings
from ai2pdf.domain.entities import ApiKeyStatus
from ai2pdf.domain.exceptions import ApiAccessError, FileTooLargeError, StorageError, ValidationError
from ai2pdf.infrastructure.dependencies import get_api_access_service, get_conversion_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Public API"])


async def authenticated_key(
    authorization: str | None = Header(None),
    service: ApiAccessService = Depends(get_api_access_service),
) -> ApiKeyStatus:
    """Resolve the bearer key or reject the request with 401/429."""
    try:
        return await service.authenticate(authorization)
    except ApiAccessError as e:
        logger.info("API request rejected (%d): %s", e.status_code, e.message)
        raise HTTPException(status_code=e.status_code, detail={"error": e.message, **e.details})


@router.post("/convert", response_model=ApiConvertResponse)
async def api_convert(
    file: UploadFile | None = File(None),
    from_format: str | None = Form(None, alias="fromFormat"),
    to_format: str | None = Form(None, alias="toFormat"),
    quality: str | None = Form(None),
    settings: str | None = Form(None),
    key_status: ApiKeyStatus = Depends(authenticated_key),
    access: ApiAccessService = Depends(get_api_access_service),
    conversions: ConversionService = Depends(get_conversion_service),
) -> ApiConvertResponse:
    """Submit a conversion on behalf of an API key; each accepted call counts against the plan."""
    if file is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")

    extension = Path(file.filename or "").suffix.lower()
    if extension not in get_settings().allowed_api_upload_extensions:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File type '{extension or 'unknown'}' is not supported",
        )

    upload = Upload(filename=file.filename, content=await file.read(), content_type=file.content_type)
    try:
        job = await conversions.submit_single(
            upload,
            from_format,
            to_format,
            quality,
            settings,
            extra_metadata={"source": "api", "apiKeyId": key_status.key.id},
        )
    except FileTooLargeError as e:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=e.message)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except StorageError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))

    key_status = await access.record_usage(key_status)

    return ApiConvertResponse(
        conversion_id=job.id,
        status=job.status.value,
        plan_info=PlanInfo(
            name=key_status.plan_name,
            remaining_requests=key_status.remaining_requests,
        ),
    )


@router.get("/key-info", response_model=KeyInfoResponse)
async def key_info(key_status: ApiKeyStatus = Depends(authenticated_key)) -> KeyInfoResponse:
    """Plan and usage of the presented key. Not metered."""
    return KeyInfoResponse(
        key_info=KeyInfo(
            plan_name=key_status.plan_name,
            request_count=key_status.key.request_count,
            request_limit=key_status.request_limit,
            remaining_requests=key_status.remaining_requests,
        )
    )
