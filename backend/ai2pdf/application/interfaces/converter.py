"""Port for the component that performs the actual file conversion."""

from abc import ABC, abstractmethod

from ai2pdf.domain.entities.conversion_job import ConversionJob


class Converter(ABC):
    """Body of a scheduled conversion task.

    The scheduler owns status transitions; a converter only does the work
    and raises on failure. Swapping the implementation does not change the
    submission contract.
    """

    @abstractmethod
    async def convert(self, job: ConversionJob) -> None:
        """Convert the artifact of ``job``. Raise to mark the job failed."""
        ...
