"""Groups conversion jobs under a shared batch id."""

import logging
import uuid

from ai2pdf.application.interfaces.conversion_job_repository import ConversionJobRepository
from ai2pdf.domain.entities.conversion_job import BATCH_ID_KEY, BATCH_SIZE_KEY, ConversionJob
from ai2pdf.domain.exceptions import ValidationError

logger = logging.getLogger(__name__)


class BatchCorrelator:
    """Stamps batch membership into job metadata and reads batches back.

    A batch is not stored on its own: it exists as long as at least one job
    carries its id. Creation is not transactional, so a storage failure
    partway through leaves the earlier members persisted.
    """

    def __init__(self, repository: ConversionJobRepository):
        self._repository = repository

    async def create_batch(self, jobs: list[ConversionJob]) -> list[ConversionJob]:
        if not jobs:
            raise ValidationError("A batch needs at least one file", field="files")

        batch_id = str(uuid.uuid4())
        created: list[ConversionJob] = []
        for job in jobs:
            job.metadata = {
                **(job.metadata or {}),
                BATCH_ID_KEY: batch_id,
                BATCH_SIZE_KEY: len(jobs),
            }
            created.append(await self._repository.create(job))

        logger.info("Created batch %s with %d job(s)", batch_id, len(created))
        return created

    async def get_batch(self, batch_id: str) -> list[ConversionJob]:
        return await self._repository.get_by_batch(batch_id)
