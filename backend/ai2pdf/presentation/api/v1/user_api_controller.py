"""Self-service API key management for the current visitor."""

from fastapi import APIRouter, Depends, HTTPException, status

from ai2pdf.application.schemas import (
    ApiKeyResponse,
    ApiKeysListResponse,
    ApiPlanResponse,
    ApiServiceStatusResponse,
    MessageResponse,
)
from ai2pdf.application.services import ApiAccessService, SystemSettingsService
from ai2pdf.domain.exceptions import ApiServiceDisabledError, EntityNotFoundError, ValidationError
from ai2pdf.infrastructure.dependencies import (
    get_api_access_service,
    get_system_settings_service,
    get_user_token,
)

router = APIRouter(prefix="/user", tags=["User API"])

_DISABLED_MESSAGE = "API service is currently disabled by admin"


@router.get("/api-status", response_model=ApiServiceStatusResponse)
async def api_status(
    settings: SystemSettingsService = Depends(get_system_settings_service),
) -> ApiServiceStatusResponse:
    enabled = await settings.is_api_service_enabled()
    return ApiServiceStatusResponse(
        enabled=enabled,
        message="API service is active" if enabled else _DISABLED_MESSAGE,
    )


@router.get("/api-keys", response_model=ApiKeysListResponse)
async def list_api_keys(
    user_token: str = Depends(get_user_token),
    service: ApiAccessService = Depends(get_api_access_service),
) -> ApiKeysListResponse:
    """The caller's keys, masked. Reported as locked while the API service is off."""
    try:
        keys = await service.list_keys(user_token)
    except ApiServiceDisabledError:
        return ApiKeysListResponse(locked=True, message=_DISABLED_MESSAGE)
    return ApiKeysListResponse(locked=False, keys=[ApiKeyResponse.from_entity(k) for k in keys])


@router.get("/api-plans", response_model=list[ApiPlanResponse])
async def list_api_plans(
    service: ApiAccessService = Depends(get_api_access_service),
) -> list[ApiPlanResponse]:
    plans = await service.list_plans(active_only=True)
    return [ApiPlanResponse.model_validate(p, from_attributes=True) for p in plans]


@router.post("/generate-api-key", response_model=ApiKeyResponse)
async def generate_api_key(
    user_token: str = Depends(get_user_token),
    service: ApiAccessService = Depends(get_api_access_service),
) -> ApiKeyResponse:
    """Create another key on the caller's active plan. The raw key is only returned here."""
    try:
        key, raw_key = await service.generate_key(user_token)
    except ApiServiceDisabledError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    return ApiKeyResponse.from_entity(key, raw_key=raw_key)


@router.delete("/api-keys/{key_id}", response_model=MessageResponse)
async def revoke_api_key(
    key_id: str,
    user_token: str = Depends(get_user_token),
    service: ApiAccessService = Depends(get_api_access_service),
) -> MessageResponse:
    try:
        await service.revoke_key(user_token, key_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return MessageResponse(message="API key revoked successfully")
