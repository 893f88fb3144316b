"""Admin API: dashboard, visitors, tools, settings, API plans/keys and stored files.

Every route requires the admin access key (``?accesskey=`` or ``X-Admin-Key``).
"""

import logging
from decimal import Decimal

from fastapi import (
    APIRouter,
    Body,
    Depends,
    File,
    Form,
    HTTPException,
    Query,
    Request,
    UploadFile,
    status,
)

from ai2pdf.application.schemas import (
    ActivityLogResponse,
    AdminApiStatusResponse,
    ApiKeyResponse,
    ApiPlanCreate,
    ApiPlanResponse,
    CategoryResponse,
    ConversionResponse,
    DashboardResponse,
    IssueApiKeyRequest,
    MessageResponse,
    SettingUpdateRequest,
    StoredFileResponse,
    ToggleApiServiceResponse,
    ToolResponse,
    VisitorResponse,
)
from ai2pdf.application.services import (
    AdminService,
    ApiAccessService,
    ConversionService,
    SystemSettingsService,
    ToolCatalogService,
    Upload,
    VisitorService,
)
from ai2pdf.domain.entities import ApiPlan
from ai2pdf.domain.exceptions import (
    DuplicateEntityError,
    EntityNotFoundError,
    FileTooLargeError,
    StorageError,
    ValidationError,
)
from ai2pdf.infrastructure.dependencies import (
    get_admin_service,
    get_api_access_service,
    get_conversion_service,
    get_file_storage,
    get_system_settings_service,
    get_tool_catalog_service,
    get_visitor_service,
    require_admin,
)
from ai2pdf.infrastructure.storage import LocalFileStorage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(require_admin)])


# ── Helpers ──────────────────────────────────────────────────────────

def _client_ip(request: Request) -> str | None:
    return request.client.host if request.client else None


# ── Dashboard ────────────────────────────────────────────────────────

@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(service: AdminService = Depends(get_admin_service)) -> DashboardResponse:
    try:
        data = await service.dashboard()
    except StorageError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    return DashboardResponse.model_validate(data)


# ── Visitors ─────────────────────────────────────────────────────────

@router.get("/users", response_model=list[VisitorResponse])
async def list_users(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    service: VisitorService = Depends(get_visitor_service),
) -> list[VisitorResponse]:
    visitors = await service.list_visitors(skip=skip, limit=limit)
    return [VisitorResponse.model_validate(v, from_attributes=True) for v in visitors]


@router.delete("/users/{visitor_id}", response_model=MessageResponse)
async def delete_user(
    visitor_id: str,
    service: VisitorService = Depends(get_visitor_service),
) -> MessageResponse:
    try:
        await service.delete_visitor(visitor_id)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return MessageResponse(message="User deleted successfully")


@router.delete("/users", response_model=MessageResponse)
async def delete_all_users(service: VisitorService = Depends(get_visitor_service)) -> MessageResponse:
    deleted = await service.delete_all()
    return MessageResponse(message=f"Deleted {deleted} users")


# ── Tools ────────────────────────────────────────────────────────────

@router.get("/tools", response_model=list[ToolResponse])
async def list_all_tools(
    service: ToolCatalogService = Depends(get_tool_catalog_service),
) -> list[ToolResponse]:
    tools = await service.list_tools(active_only=False)
    return [ToolResponse.model_validate(t, from_attributes=True) for t in tools]


@router.post("/tools", response_model=ToolResponse, status_code=status.HTTP_201_CREATED)
async def upload_tool(
    request: Request,
    file: UploadFile | None = File(None, alias="htmlFile"),
    name: str | None = Form(None),
    folder_name: str | None = Form(None, alias="folderName"),
    version: str | None = Form(None),
    category_id: str | None = Form(None, alias="categoryId"),
    description: str | None = Form(None),
    keywords: str | None = Form(None),
    meta_title: str | None = Form(None, alias="metaTitle"),
    meta_description: str | None = Form(None, alias="metaDescription"),
    service: ToolCatalogService = Depends(get_tool_catalog_service),
) -> ToolResponse:
    """Register a self-contained HTML tool, served afterwards at ``/tools/<folder>``."""
    upload = None
    if file is not None:
        upload = Upload(filename=file.filename or "", content=await file.read(), content_type=file.content_type)
    try:
        tool = await service.create_tool(
            upload,
            name,
            folder_name=folder_name,
            version=version,
            category_id=category_id,
            description=description,
            keywords=keywords,
            meta_title=meta_title,
            meta_description=meta_description,
            ip_address=_client_ip(request),
        )
    except FileTooLargeError as e:
        raise HTTPException(status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, detail=e.message)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)
    except DuplicateEntityError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return ToolResponse.model_validate(tool, from_attributes=True)


@router.delete("/tools/{tool_id}", response_model=MessageResponse)
async def delete_tool(
    tool_id: str,
    request: Request,
    service: ToolCatalogService = Depends(get_tool_catalog_service),
) -> MessageResponse:
    try:
        await service.delete_tool(tool_id, ip_address=_client_ip(request))
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return MessageResponse(message="Tool deleted successfully")


@router.get("/categories", response_model=list[CategoryResponse])
async def list_categories(
    service: ToolCatalogService = Depends(get_tool_catalog_service),
) -> list[CategoryResponse]:
    return [CategoryResponse.model_validate(c, from_attributes=True) for c in service.list_categories()]


# ── Settings ─────────────────────────────────────────────────────────

@router.get("/settings", response_model=dict[str, str | None])
async def get_settings_map(
    service: SystemSettingsService = Depends(get_system_settings_service),
) -> dict[str, str | None]:
    return await service.get_all()


@router.post("/settings", response_model=MessageResponse)
async def update_setting(
    payload: SettingUpdateRequest,
    service: SystemSettingsService = Depends(get_system_settings_service),
) -> MessageResponse:
    await service.set(payload.key, payload.value, payload.description)
    return MessageResponse(message="Setting updated successfully")


@router.get("/activity", response_model=list[ActivityLogResponse])
async def recent_activity(
    limit: int = Query(50, ge=1, le=500),
    service: SystemSettingsService = Depends(get_system_settings_service),
) -> list[ActivityLogResponse]:
    entries = await service.recent_activity(limit)
    return [ActivityLogResponse.model_validate(e, from_attributes=True) for e in entries]


# ── API service ──────────────────────────────────────────────────────

@router.get("/api-status", response_model=AdminApiStatusResponse)
async def admin_api_status(
    settings: SystemSettingsService = Depends(get_system_settings_service),
    access: ApiAccessService = Depends(get_api_access_service),
) -> AdminApiStatusResponse:
    stats = await access.stats()
    return AdminApiStatusResponse(
        enabled=await settings.is_api_service_enabled(),
        total_keys=stats["totalKeys"],
        active_keys=stats["activeKeys"],
        total_requests=stats["totalRequests"],
    )


@router.post("/toggle-api-service", response_model=ToggleApiServiceResponse)
async def toggle_api_service(
    request: Request,
    payload: dict = Body(...),
    settings: SystemSettingsService = Depends(get_system_settings_service),
) -> ToggleApiServiceResponse:
    """Switch metered API features on or off. ``enabled`` must be a JSON boolean."""
    enabled = payload.get("enabled")
    if not isinstance(enabled, bool):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="enabled must be a boolean")
    await settings.set_api_service_enabled(enabled, ip_address=_client_ip(request))
    return ToggleApiServiceResponse(enabled=enabled)


@router.get("/api-plans", response_model=list[ApiPlanResponse])
async def list_all_plans(
    access: ApiAccessService = Depends(get_api_access_service),
) -> list[ApiPlanResponse]:
    plans = await access.list_plans(active_only=False)
    return [ApiPlanResponse.model_validate(p, from_attributes=True) for p in plans]


@router.post("/api-plans", response_model=ApiPlanResponse, status_code=status.HTTP_201_CREATED)
async def create_plan(
    payload: ApiPlanCreate,
    access: ApiAccessService = Depends(get_api_access_service),
) -> ApiPlanResponse:
    plan = await access.create_plan(
        ApiPlan(
            name=payload.name,
            price=Decimal(str(payload.price)),
            currency=payload.currency.upper(),
            request_limit=payload.request_limit,
            features=payload.features,
            sort_order=payload.sort_order,
        )
    )
    return ApiPlanResponse.model_validate(plan, from_attributes=True)


@router.post("/api-keys", response_model=ApiKeyResponse, status_code=status.HTTP_201_CREATED)
async def issue_api_key(
    payload: IssueApiKeyRequest,
    access: ApiAccessService = Depends(get_api_access_service),
) -> ApiKeyResponse:
    """Issue a key on a chosen plan for a visitor token, as after a completed purchase."""
    try:
        key, raw_key = await access.issue_key(payload.user_token, payload.plan_id, payload.valid_days)
    except EntityNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return ApiKeyResponse.from_entity(key, raw_key=raw_key)


# ── Conversions and stored files ─────────────────────────────────────

@router.get("/conversions", response_model=list[ConversionResponse])
async def list_conversions(
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=500),
    service: ConversionService = Depends(get_conversion_service),
) -> list[ConversionResponse]:
    try:
        jobs = await service.list_recent(skip=skip, limit=limit)
    except StorageError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    return [ConversionResponse.model_validate(j, from_attributes=True) for j in jobs]


@router.get("/files", response_model=list[StoredFileResponse])
async def list_files(storage: LocalFileStorage = Depends(get_file_storage)) -> list[StoredFileResponse]:
    return [StoredFileResponse.model_validate(f) for f in storage.list_files()]


@router.delete("/files/{filename}", response_model=MessageResponse)
async def delete_file(
    filename: str,
    storage: LocalFileStorage = Depends(get_file_storage),
) -> MessageResponse:
    if not await storage.delete_upload(filename):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"File '{filename}' not found")
    logger.info("Admin deleted stored upload %s", filename)
    return MessageResponse(message="File deleted successfully")
