"""Domain entity for conversion jobs."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

BATCH_ID_KEY = "batchId"
BATCH_SIZE_KEY = "batchSize"


class JobStatus(str, Enum):
    """Lifecycle states of a conversion job."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)

    def can_transition_to(self, target: "JobStatus") -> bool:
        """Status only moves forward; terminal states are final."""
        if self.is_terminal:
            return False
        if self is JobStatus.PENDING:
            return target is not JobStatus.PENDING
        return target.is_terminal


@dataclass
class ConversionJob:
    """A single file conversion request.

    Batch members carry ``batchId`` and ``batchSize`` inside ``metadata``;
    there is no separate batch record.
    """

    from_format: str
    to_format: str
    original_filename: str
    file_path: str
    file_size: int
    id: str | None = None
    status: JobStatus = JobStatus.PENDING
    download_url: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: datetime | None = None

    @property
    def batch_id(self) -> str | None:
        value = (self.metadata or {}).get(BATCH_ID_KEY)
        return str(value) if value is not None else None

    @property
    def quality(self) -> str | None:
        return (self.metadata or {}).get("quality")

    def converted_filename(self) -> str:
        """Name offered to the client when downloading the converted artifact."""
        stem = Path(self.original_filename).stem or "file"
        return f"{stem}_converted.{self.to_format}"
