"""SQLAlchemy ORM model for conversion jobs."""

from datetime import datetime, timezone

from sqlalchemy import JSON, BigInteger, DateTime, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from ai2pdf.infrastructure.database.base import Base


class ConversionJobModel(Base):
    """ORM model: maps to the 'conversions' table.

    ``batch_id`` mirrors ``metadata["batchId"]`` so batch membership is an
    indexed lookup instead of a scan over every row.
    """

    __tablename__ = "conversions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    from_format: Mapped[str] = mapped_column(String(50), nullable=False)
    to_format: Mapped[str] = mapped_column(String(50), nullable=False)
    original_filename: Mapped[str] = mapped_column(String(255), nullable=False)
    file_path: Mapped[str] = mapped_column(Text, nullable=False)
    file_size: Mapped[int] = mapped_column(BigInteger, nullable=False)
    status: Mapped[str] = mapped_column(String(30), nullable=False, default="pending", index=True)
    download_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    metadata_: Mapped[dict | None] = mapped_column("metadata", JSON, nullable=True)
    batch_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("ix_conversions_batch", "batch_id"),
        Index("ix_conversions_created", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<ConversionJobModel(id={self.id}, "
            f"{self.from_format}->{self.to_format}, status={self.status})>"
        )
