"""FastAPI dependency injection: wires infrastructure to the application layer."""

import secrets
from collections.abc import AsyncGenerator
from functools import lru_cache

from fastapi import Depends, Header, HTTPException, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from ai2pdf.application.interfaces import ConversionJobRepository
from ai2pdf.application.services import (
    AdminService,
    ApiAccessService,
    ConversionScheduler,
    ConversionService,
    SystemSettingsService,
    ToolCatalogService,
    VisitorService,
)
from ai2pdf.config import get_settings
from ai2pdf.infrastructure.converters import SimulatedConverter
from ai2pdf.infrastructure.database.repositories import (
    SQLAlchemyActivityLogRepository,
    SQLAlchemyApiKeyRepository,
    SQLAlchemyApiPlanRepository,
    SQLAlchemyConversionJobRepository,
    SQLAlchemySystemSettingsRepository,
    SQLAlchemyToolRepository,
    SQLAlchemyVisitorRepository,
)
from ai2pdf.infrastructure.database.session import async_session_factory, get_db_session
from ai2pdf.infrastructure.memory import InMemoryConversionJobRepository
from ai2pdf.infrastructure.storage import LocalFileStorage, ToolFileStorage


# ── Process-wide singletons ─────────────────────────────────────────

@lru_cache
def get_conversion_job_repository() -> ConversionJobRepository:
    """The job store chosen by ``JOB_STORE``, shared by requests and the scheduler."""
    settings = get_settings()
    if settings.job_store == "memory":
        return InMemoryConversionJobRepository()
    return SQLAlchemyConversionJobRepository(async_session_factory)


@lru_cache
def get_conversion_scheduler() -> ConversionScheduler:
    settings = get_settings()
    converter = SimulatedConverter(
        quality_delays_ms=settings.quality_delays_ms,
        default_delay_ms=settings.default_quality_delay_ms,
    )
    return ConversionScheduler(
        get_conversion_job_repository(),
        converter,
        start_delay_ms=settings.conversion_start_delay_ms,
        stride_ms=settings.conversion_batch_stride_ms,
    )


@lru_cache
def get_file_storage() -> LocalFileStorage:
    return LocalFileStorage(upload_dir=get_settings().upload_dir)


@lru_cache
def get_tool_storage() -> ToolFileStorage:
    return ToolFileStorage(tools_dir=get_settings().tools_dir)


# ── Per-request services ────────────────────────────────────────────

async def get_conversion_service(
    repository: ConversionJobRepository = Depends(get_conversion_job_repository),
    scheduler: ConversionScheduler = Depends(get_conversion_scheduler),
    storage: LocalFileStorage = Depends(get_file_storage),
) -> AsyncGenerator[ConversionService, None]:
    """Provides a ConversionService bound to the shared job store and scheduler."""
    settings = get_settings()
    yield ConversionService(
        repository,
        storage,
        scheduler,
        max_upload_size_bytes=settings.max_upload_size_bytes,
        max_batch_files=settings.max_batch_files,
        default_quality=settings.default_quality,
        batch_download_mode=settings.batch_download_mode,
    )


async def get_system_settings_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[SystemSettingsService, None]:
    yield SystemSettingsService(
        SQLAlchemySystemSettingsRepository(session),
        SQLAlchemyActivityLogRepository(session),
    )


async def get_visitor_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[VisitorService, None]:
    yield VisitorService(SQLAlchemyVisitorRepository(session))


async def get_api_access_service(
    session: AsyncSession = Depends(get_db_session),
    settings_service: SystemSettingsService = Depends(get_system_settings_service),
) -> AsyncGenerator[ApiAccessService, None]:
    """Provides an ApiAccessService; plans, keys and settings share the request session."""
    yield ApiAccessService(
        SQLAlchemyApiPlanRepository(session),
        SQLAlchemyApiKeyRepository(session),
        settings_service,
        max_keys_per_user=get_settings().max_api_keys_per_user,
    )


async def get_tool_catalog_service(
    session: AsyncSession = Depends(get_db_session),
    settings_service: SystemSettingsService = Depends(get_system_settings_service),
    storage: ToolFileStorage = Depends(get_tool_storage),
) -> AsyncGenerator[ToolCatalogService, None]:
    yield ToolCatalogService(
        SQLAlchemyToolRepository(session),
        storage,
        settings_service,
        max_upload_size_bytes=get_settings().max_tool_upload_size_bytes,
    )


async def get_admin_service(
    visitors: VisitorService = Depends(get_visitor_service),
    tools: ToolCatalogService = Depends(get_tool_catalog_service),
    conversions: ConversionService = Depends(get_conversion_service),
    api_access: ApiAccessService = Depends(get_api_access_service),
) -> AsyncGenerator[AdminService, None]:
    yield AdminService(visitors, tools, conversions, api_access)


# ── Request identity ────────────────────────────────────────────────

def get_user_token(request: Request) -> str:
    """Visitor token set by the tracking middleware, else taken from the request itself."""
    settings = get_settings()
    token = (
        getattr(request.state, "user_token", None)
        or request.headers.get(settings.visitor_header_name)
        or request.cookies.get(settings.visitor_cookie_name)
    )
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Visitor token required")
    return token


async def require_admin(
    accesskey: str | None = Query(None),
    x_admin_key: str | None = Header(None),
) -> None:
    """Gate for admin routes: ``?accesskey=`` or ``X-Admin-Key`` must match the configured key."""
    expected = get_settings().admin_access_key
    presented = accesskey or x_admin_key or ""
    if not expected or not secrets.compare_digest(presented.encode(), expected.encode()):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized - Admin access key required",
        )
