"""Placeholder converter that only waits out a quality-dependent delay."""

import asyncio
import logging

from ai2pdf.application.interfaces.converter import Converter
from ai2pdf.domain.entities.conversion_job import ConversionJob

logger = logging.getLogger(__name__)


class SimulatedConverter(Converter):
    """Stands in for a real conversion engine.

    No artifact is produced; the stored upload is what gets downloaded.
    ``quality_delays_ms`` maps a quality label to its processing time,
    unknown or missing labels use ``default_delay_ms``.
    """

    def __init__(self, quality_delays_ms: dict[str, int], default_delay_ms: int = 1000):
        self._quality_delays_ms = dict(quality_delays_ms)
        self._default_delay_ms = default_delay_ms

    def delay_for(self, quality: str | None) -> float:
        """Processing time in seconds for a quality label."""
        ms = self._quality_delays_ms.get(quality or "", self._default_delay_ms)
        return max(ms, 0) / 1000

    async def convert(self, job: ConversionJob) -> None:
        delay = self.delay_for(job.quality)
        logger.debug(
            "Simulating %s -> %s for job %s (quality=%s, %.2fs)",
            job.from_format, job.to_format, job.id, job.quality, delay,
        )
        await asyncio.sleep(delay)
