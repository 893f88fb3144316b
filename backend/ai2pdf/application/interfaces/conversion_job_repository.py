"""Abstract repository interface (port) for the conversion job record store."""

from abc import ABC, abstractmethod
from typing import Any

from ai2pdf.domain.entities.conversion_job import ConversionJob


class ConversionJobRepository(ABC):
    """Port for conversion job persistence.

    Implementations own their transaction boundaries: every call is a
    complete, committed unit of work, so the same instance can be shared by
    request handlers and the background scheduler. Concurrent updates to
    one job are last-write-wins.
    """

    @abstractmethod
    async def create(self, job: ConversionJob) -> ConversionJob:
        """Persist a new job, assigning an id when missing, and return the stored record."""
        ...

    @abstractmethod
    async def get_by_id(self, job_id: str) -> ConversionJob | None:
        """Retrieve a single job by ID; ``None`` when absent."""
        ...

    @abstractmethod
    async def update(self, job_id: str, changes: dict[str, Any]) -> ConversionJob | None:
        """Merge ``changes`` into the stored job.

        Fields not named in ``changes`` keep their stored values. Returns
        ``None`` (without raising) when no job has that id.
        """
        ...

    @abstractmethod
    async def delete(self, job_id: str) -> bool:
        """Delete a job. Returns True if a record existed."""
        ...

    @abstractmethod
    async def get_by_batch(self, batch_id: str) -> list[ConversionJob]:
        """Retrieve all jobs stamped with ``batch_id``, in creation order."""
        ...

    @abstractmethod
    async def get_all(self, skip: int = 0, limit: int = 100) -> list[ConversionJob]:
        """Retrieve jobs, most recent first."""
        ...

    @abstractmethod
    async def count_by_status(self) -> dict[str, int]:
        """Return the number of jobs per status value."""
        ...
