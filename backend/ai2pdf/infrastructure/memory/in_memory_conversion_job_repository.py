"""Process-local conversion job store.

Used for single-instance deployments and tests. Records live only as long
as the process; nothing is persisted.
"""

import copy
import uuid
from typing import Any

from ai2pdf.application.interfaces.conversion_job_repository import ConversionJobRepository
from ai2pdf.domain.entities.conversion_job import BATCH_ID_KEY, ConversionJob, JobStatus

_IMMUTABLE_FIELDS = frozenset({"id", "created_at"})


class InMemoryConversionJobRepository(ConversionJobRepository):
    """Dict-backed store with a secondary index from batch id to member ids.

    Callers always receive copies, so mutating a returned job never changes
    the stored record.
    """

    def __init__(self) -> None:
        self._jobs: dict[str, ConversionJob] = {}
        self._batches: dict[str, list[str]] = {}

    async def create(self, job: ConversionJob) -> ConversionJob:
        stored = copy.deepcopy(job)
        if not stored.id:
            stored.id = str(uuid.uuid4())
        self._jobs[stored.id] = stored
        self._index(stored)
        job.id = stored.id
        return copy.deepcopy(stored)

    async def get_by_id(self, job_id: str) -> ConversionJob | None:
        job = self._jobs.get(job_id)
        return copy.deepcopy(job) if job else None

    async def update(self, job_id: str, changes: dict[str, Any]) -> ConversionJob | None:
        unknown = {
            name for name in changes
            if name in _IMMUTABLE_FIELDS or name not in ConversionJob.__dataclass_fields__
        }
        if unknown:
            raise ValueError(f"Cannot update conversion fields: {', '.join(sorted(unknown))}")
        if "status" in changes:
            changes = {**changes, "status": JobStatus(changes["status"])}

        job = self._jobs.get(job_id)
        if job is None:
            return None

        for name, value in changes.items():
            if name == "metadata":
                self._unindex(job)
                value = copy.deepcopy(dict(value or {}))
            setattr(job, name, value)
            if name == "metadata":
                self._index(job)
        return copy.deepcopy(job)

    async def delete(self, job_id: str) -> bool:
        job = self._jobs.pop(job_id, None)
        if job is None:
            return False
        self._unindex(job)
        return True

    async def get_by_batch(self, batch_id: str) -> list[ConversionJob]:
        return [
            copy.deepcopy(self._jobs[job_id])
            for job_id in self._batches.get(batch_id, [])
            if job_id in self._jobs
        ]

    async def get_all(self, skip: int = 0, limit: int = 100) -> list[ConversionJob]:
        jobs = sorted(self._jobs.values(), key=lambda j: j.created_at, reverse=True)
        return [copy.deepcopy(j) for j in jobs[skip : skip + limit]]

    async def count_by_status(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for job in self._jobs.values():
            counts[job.status.value] = counts.get(job.status.value, 0) + 1
        return counts

    # ── Batch index ──────────────────────────────────────────────────

    def _index(self, job: ConversionJob) -> None:
        batch_id = job.metadata.get(BATCH_ID_KEY) if job.metadata else None
        if batch_id is not None:
            self._batches.setdefault(str(batch_id), []).append(job.id)

    def _unindex(self, job: ConversionJob) -> None:
        batch_id = job.metadata.get(BATCH_ID_KEY) if job.metadata else None
        if batch_id is None:
            return
        members = self._batches.get(str(batch_id))
        if not members:
            return
        if job.id in members:
            members.remove(job.id)
        if not members:
            del self._batches[str(batch_id)]
