"""Conversion scheduler: advances each job through its lifecycle in the background."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any

from ai2pdf.application.interfaces.conversion_job_repository import ConversionJobRepository
from ai2pdf.application.interfaces.converter import Converter
from ai2pdf.domain.entities.conversion_job import ConversionJob, JobStatus
from ai2pdf.domain.exceptions import ConversionError, StorageError
from ai2pdf.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage

logger = logging.getLogger(__name__)
plog = PipelineLogger("ConversionScheduler")

DOWNLOAD_URL_TEMPLATE = "/api/v1/download/{job_id}"


class ConversionScheduler:
    """Runs one asyncio task per job, keyed by job id.

    Each task waits ``start_delay + index * stride``, moves the job to
    ``processing``, runs the converter and then records ``completed`` with
    a download URL. Any failure along the way marks the job ``failed``;
    nothing is retried and nothing propagates to the submitter.

    Jobs deleted while their task is pending are skipped quietly. Status
    only moves forward: a task never touches a job that is already
    terminal.
    """

    def __init__(
        self,
        repository: ConversionJobRepository,
        converter: Converter,
        *,
        start_delay_ms: int = 100,
        stride_ms: int = 100,
        download_url_template: str = DOWNLOAD_URL_TEMPLATE,
    ) -> None:
        self._repository = repository
        self._converter = converter
        self._start_delay_ms = start_delay_ms
        self._stride_ms = stride_ms
        self._download_url_template = download_url_template
        self._tasks: dict[str, asyncio.Task] = {}
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    @property
    def outstanding(self) -> int:
        """Number of jobs whose task has not finished yet."""
        return len(self._tasks)

    async def start(self) -> None:
        self._running = True
        logger.info("ConversionScheduler started")

    async def stop(self) -> None:
        """Cancel every outstanding task. Their jobs stay in their current status."""
        self._running = False
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()
        logger.info("ConversionScheduler stopped (%d task(s) cancelled)", len(tasks))

    async def drain(self) -> None:
        """Wait until every task scheduled so far has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks.values()), return_exceptions=True)

    def start_delay(self, index: int = 0) -> float:
        """Seconds to wait before a job at ``index`` within its batch starts."""
        return (self._start_delay_ms + max(index, 0) * self._stride_ms) / 1000

    def schedule(self, job: ConversionJob, index: int = 0) -> asyncio.Task:
        """Queue ``job`` for processing and return immediately."""
        if not job.id:
            raise ValueError("Cannot schedule a job without an id")
        if not self._running:
            logger.warning("Scheduling job %s while the scheduler is stopped", job.id)

        delay = self.start_delay(index)
        task = asyncio.create_task(self._run(job.id, delay), name=f"conversion-{job.id}")
        self._tasks[job.id] = task
        task.add_done_callback(lambda t, job_id=job.id: self._forget(job_id, t))

        plog.step_start(
            PipelineStage.SCHEDULE,
            f"Queued {job.original_filename}",
            job_id=job.id,
            index=index,
            delay=f"{delay:.2f}s",
        )
        return task

    def _forget(self, job_id: str, task: asyncio.Task) -> None:
        if self._tasks.get(job_id) is task:
            del self._tasks[job_id]

    # ── Lifecycle ────────────────────────────────────────────────────

    async def _run(self, job_id: str, delay: float) -> None:
        await asyncio.sleep(delay)

        try:
            job = await self._transition(job_id, JobStatus.PROCESSING)
            if job is None:
                return

            with plog.timed_step(PipelineStage.CONVERT, f"Converting {job.original_filename}", job_id=job_id):
                await self._converter.convert(job)

            try:
                done = await self._transition(
                    job_id,
                    JobStatus.COMPLETED,
                    download_url=self._download_url_template.format(job_id=job_id),
                    completed_at=datetime.now(timezone.utc),
                )
            except StorageError as exc:
                raise ConversionError(job_id, f"could not record completion ({exc})") from exc

            if done is not None:
                plog.step_complete(PipelineStage.COMPLETE, "Conversion completed", job_id=job_id)
        except Exception as exc:
            logger.exception("Conversion job %s failed", job_id)
            plog.step_error(PipelineStage.ERROR, f"Job {job_id} failed", error=exc)
            await self._mark_failed(job_id)

    async def _transition(
        self, job_id: str, target: JobStatus, **fields: Any
    ) -> ConversionJob | None:
        """Move a job to ``target``; ``None`` when it is gone or already terminal."""
        current = await self._repository.get_by_id(job_id)
        if current is None:
            logger.debug("Job %s no longer exists; skipping %s", job_id, target.value)
            return None
        if not current.status.can_transition_to(target):
            logger.debug(
                "Job %s is %s; refusing transition to %s",
                job_id, current.status.value, target.value,
            )
            return None

        updated = await self._repository.update(job_id, {"status": target, **fields})
        if updated is None:
            logger.debug("Job %s was deleted before reaching %s", job_id, target.value)
        return updated

    async def _mark_failed(self, job_id: str) -> None:
        try:
            await self._transition(
                job_id, JobStatus.FAILED, completed_at=datetime.now(timezone.utc)
            )
        except Exception:
            logger.exception("Could not mark job %s as failed", job_id)
