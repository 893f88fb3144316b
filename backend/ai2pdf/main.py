"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ai2pdf.config import get_settings
from ai2pdf.infrastructure.database import Base, engine
from ai2pdf.infrastructure.database.session import async_session_factory
from ai2pdf.infrastructure.database.repositories import (
    SQLAlchemyActivityLogRepository,
    SQLAlchemyApiKeyRepository,
    SQLAlchemyApiPlanRepository,
    SQLAlchemySystemSettingsRepository,
)
from ai2pdf.application.services import ApiAccessService, SystemSettingsService
from ai2pdf.infrastructure.dependencies import get_conversion_scheduler
from ai2pdf.infrastructure.logging.log_config import setup_logging
from ai2pdf.presentation.api.router import router as api_router
from ai2pdf.presentation.middleware import RequestLoggingMiddleware, VisitorTrackingMiddleware
from ai2pdf.presentation.pages import router as pages_router

logger = logging.getLogger(__name__)


async def _ensure_database_exists() -> None:
    """Create the PostgreSQL database if it does not yet exist.

    Only applies to ``postgresql://`` URLs; SQLite creates its file on connect.
    """
    from urllib.parse import urlparse

    import asyncpg

    settings = get_settings()
    if not settings.database_url.startswith("postgresql"):
        return

    parsed = urlparse(settings.database_url)
    db_name = parsed.path.lstrip("/")
    if not db_name:
        return

    maintenance_url = settings.database_url.rsplit("/", 1)[0] + "/postgres"

    try:
        conn = await asyncpg.connect(maintenance_url)
        try:
            exists = await conn.fetchval(
                "SELECT 1 FROM pg_database WHERE datname = $1", db_name
            )
            if not exists:
                # CREATE DATABASE cannot run inside a transaction block
                await conn.execute(f'CREATE DATABASE "{db_name}"')
                logger.info("Created database '%s'", db_name)
        finally:
            await conn.close()
    except (OSError, asyncpg.PostgresError) as exc:
        logger.warning("Could not auto-create database '%s': %s", db_name, exc)


async def _seed_default_plans() -> None:
    """Insert the default API plans when the plan table is empty."""
    try:
        async with async_session_factory() as session:
            settings_service = SystemSettingsService(
                SQLAlchemySystemSettingsRepository(session),
                SQLAlchemyActivityLogRepository(session),
            )
            access = ApiAccessService(
                SQLAlchemyApiPlanRepository(session),
                SQLAlchemyApiKeyRepository(session),
                settings_service,
            )
            await access.ensure_default_plans()
            await session.commit()
    except Exception:
        logger.exception("Could not seed default API plans")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan: create tables, seed plans, run the conversion scheduler."""
    settings = get_settings()
    setup_logging()

    await _ensure_database_exists()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    await _seed_default_plans()

    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
    Path(settings.tools_dir).mkdir(parents=True, exist_ok=True)

    scheduler = get_conversion_scheduler()
    await scheduler.start()
    logger.info("Job store: %s", settings.job_store)

    yield

    # Shutdown
    await scheduler.stop()
    await engine.dispose()


def create_app() -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.session_factory = async_session_factory

    app.add_middleware(VisitorTrackingMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)
    app.include_router(pages_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "ai2pdf.main:app",
        host="0.0.0.0",
        port=8020,
        reload=True,
    )
