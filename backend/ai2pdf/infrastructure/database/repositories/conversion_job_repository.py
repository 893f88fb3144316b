"""SQLAlchemy implementation of the ConversionJobRepository."""

import uuid
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ai2pdf.application.interfaces.conversion_job_repository import ConversionJobRepository
from ai2pdf.domain.entities.conversion_job import BATCH_ID_KEY, ConversionJob, JobStatus
from ai2pdf.domain.exceptions import StorageError
from ai2pdf.infrastructure.database.models import ConversionJobModel

_MUTABLE_FIELDS = frozenset({
    "from_format",
    "to_format",
    "original_filename",
    "file_path",
    "file_size",
    "status",
    "download_url",
    "metadata",
    "completed_at",
})


class SQLAlchemyConversionJobRepository(ConversionJobRepository):
    """Conversion job store backed by the relational database.

    Each call opens its own short-lived session and commits before
    returning, so the repository can outlive any single request and be
    used from scheduled tasks.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def create(self, job: ConversionJob) -> ConversionJob:
        if not job.id:
            job.id = str(uuid.uuid4())

        model = ConversionJobModel(
            id=job.id,
            from_format=job.from_format,
            to_format=job.to_format,
            original_filename=job.original_filename,
            file_path=job.file_path,
            file_size=job.file_size,
            status=job.status.value,
            download_url=job.download_url,
            metadata_=dict(job.metadata or {}),
            batch_id=job.batch_id,
            created_at=job.created_at,
            completed_at=job.completed_at,
        )
        try:
            async with self._session_factory() as session:
                session.add(model)
                await session.commit()
        except SQLAlchemyError as exc:
            raise StorageError("create", exc) from exc
        return self._to_domain(model)

    async def get_by_id(self, job_id: str) -> ConversionJob | None:
        try:
            async with self._session_factory() as session:
                model = await session.get(ConversionJobModel, job_id)
        except SQLAlchemyError as exc:
            raise StorageError("get", exc) from exc
        return self._to_domain(model) if model else None

    async def update(self, job_id: str, changes: dict[str, Any]) -> ConversionJob | None:
        unknown = set(changes) - _MUTABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update conversion fields: {', '.join(sorted(unknown))}")

        try:
            async with self._session_factory() as session:
                model = await session.get(ConversionJobModel, job_id)
                if model is None:
                    return None
                for name, value in changes.items():
                    self._apply(model, name, value)
                await session.commit()
        except SQLAlchemyError as exc:
            raise StorageError("update", exc) from exc
        return self._to_domain(model)

    async def delete(self, job_id: str) -> bool:
        try:
            async with self._session_factory() as session:
                model = await session.get(ConversionJobModel, job_id)
                if model is None:
                    return False
                await session.delete(model)
                await session.commit()
        except SQLAlchemyError as exc:
            raise StorageError("delete", exc) from exc
        return True

    async def get_by_batch(self, batch_id: str) -> list[ConversionJob]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(ConversionJobModel)
                    .where(ConversionJobModel.batch_id == batch_id)
                    .order_by(ConversionJobModel.created_at.asc())
                )
                models = result.scalars().all()
        except SQLAlchemyError as exc:
            raise StorageError("get_batch", exc) from exc
        return [self._to_domain(m) for m in models]

    async def get_all(self, skip: int = 0, limit: int = 100) -> list[ConversionJob]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(ConversionJobModel)
                    .order_by(ConversionJobModel.created_at.desc())
                    .offset(skip)
                    .limit(limit)
                )
                models = result.scalars().all()
        except SQLAlchemyError as exc:
            raise StorageError("list", exc) from exc
        return [self._to_domain(m) for m in models]

    async def count_by_status(self) -> dict[str, int]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(ConversionJobModel.status, func.count())
                    .group_by(ConversionJobModel.status)
                )
                rows = result.all()
        except SQLAlchemyError as exc:
            raise StorageError("count", exc) from exc
        return {status: count for status, count in rows}

    # ── Mapping ──────────────────────────────────────────────────────

    @staticmethod
    def _apply(model: ConversionJobModel, name: str, value: Any) -> None:
        if name == "status":
            model.status = JobStatus(value).value
        elif name == "metadata":
            metadata = dict(value or {})
            model.metadata_ = metadata
            batch_id = metadata.get(BATCH_ID_KEY)
            model.batch_id = str(batch_id) if batch_id is not None else None
        else:
            setattr(model, name, value)

    @staticmethod
    def _to_domain(model: ConversionJobModel) -> ConversionJob:
        return ConversionJob(
            id=model.id,
            from_format=model.from_format,
            to_format=model.to_format,
            original_filename=model.original_filename,
            file_path=model.file_path,
            file_size=model.file_size,
            status=JobStatus(model.status),
            download_url=model.download_url,
            metadata=dict(model.metadata_ or {}),
            created_at=model.created_at,
            completed_at=model.completed_at,
        )
