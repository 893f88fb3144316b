"""Fixtures for HTTP-level tests: an isolated app over in-memory SQLite and temp dirs."""

from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from ai2pdf.application.services import ConversionScheduler
from ai2pdf.config import get_settings
from ai2pdf.infrastructure.converters import SimulatedConverter
from ai2pdf.infrastructure.database import Base
from ai2pdf.infrastructure.database.session import build_engine, build_session_factory, get_db_session
from ai2pdf.infrastructure.dependencies import (
    get_conversion_job_repository,
    get_conversion_scheduler,
    get_file_storage,
    get_tool_storage,
)
from ai2pdf.infrastructure.memory import InMemoryConversionJobRepository
from ai2pdf.infrastructure.storage import LocalFileStorage, ToolFileStorage
from ai2pdf.main import create_app


@pytest_asyncio.fixture
async def session_factory():
    engine = build_engine("sqlite://")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield build_session_factory(engine)
    await engine.dispose()


@pytest.fixture
def job_repository() -> InMemoryConversionJobRepository:
    return InMemoryConversionJobRepository()


@pytest_asyncio.fixture
async def scheduler(job_repository):
    converter = SimulatedConverter({"high": 30, "medium": 20, "low": 10}, default_delay_ms=10)
    scheduler = ConversionScheduler(
        job_repository, converter, start_delay_ms=1, stride_ms=5
    )
    await scheduler.start()
    yield scheduler
    await scheduler.stop()


@pytest_asyncio.fixture
async def app(session_factory, job_repository, scheduler, tmp_path: Path):
    application = create_app()
    application.state.session_factory = session_factory

    async def _session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    file_storage = LocalFileStorage(upload_dir=str(tmp_path / "uploads"))
    tool_storage = ToolFileStorage(tools_dir=str(tmp_path / "tools"))

    application.dependency_overrides[get_db_session] = _session
    application.dependency_overrides[get_conversion_job_repository] = lambda: job_repository
    application.dependency_overrides[get_conversion_scheduler] = lambda: scheduler
    application.dependency_overrides[get_file_storage] = lambda: file_storage
    application.dependency_overrides[get_tool_storage] = lambda: tool_storage
    yield application


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def admin_params() -> dict[str, str]:
    return {"accesskey": get_settings().admin_access_key}
