"""Local filesystem storage for conversion uploads and batch archives.

Storage layout:
    <upload_dir>/files/<stem>_<YYYYMMDD_HHmmss>_<token>.<ext>   uploaded files
    <upload_dir>/archives/batch_<batch_id>_<token>.zip          batch downloads (one per request)
"""

import logging
import mimetypes
import re
import uuid
import zipfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class StoredFile:
    """Result of storing a single file on disk."""

    stored_path: str
    filename: str
    original_name: str
    file_size: int
    mime_type: str


@dataclass
class ArchiveEntry:
    """A file to place into a batch archive under ``arcname``."""

    source_path: str
    arcname: str


def _datetime_stamp() -> str:
    """Return a UTC datetime stamp suitable for filenames: YYYYMMDD_HHmmss."""
    return datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")


def _sanitise(name: str, max_len: int = 80) -> str:
    """Replace non-word characters with underscores and truncate."""
    return re.sub(r"[^\w\-]", "_", name)[:max_len].strip("_") or "unnamed"


class LocalFileStorage:
    """Infrastructure adapter for local file storage."""

    def __init__(self, upload_dir: str):
        self._upload_dir = Path(upload_dir)
        self._upload_dir.mkdir(parents=True, exist_ok=True)

    @property
    def upload_dir(self) -> Path:
        return self._upload_dir

    # ── Uploads ─────────────────────────────────────────────────────

    async def store_file(self, content: bytes, filename: str) -> StoredFile:
        """Store an uploaded file in ``<upload_dir>/files/``.

        Batch uploads often repeat a filename within the same second, so the
        stamp is followed by a short random token.
        """
        files_dir = self._upload_dir / "files"
        files_dir.mkdir(parents=True, exist_ok=True)

        stem = Path(filename).stem
        suffix = Path(filename).suffix
        stored_name = f"{_sanitise(stem)}_{_datetime_stamp()}_{uuid.uuid4().hex[:8]}{suffix}"

        dest_path = files_dir / stored_name
        dest_path.write_bytes(content)

        mime_type = mimetypes.guess_type(filename)[0] or "application/octet-stream"

        logger.info("Stored file: %s (%d bytes)", dest_path, len(content))

        return StoredFile(
            stored_path=str(dest_path),
            filename=stored_name,
            original_name=filename,
            file_size=len(content),
            mime_type=mime_type,
        )

    # ── Batch archives ──────────────────────────────────────────────

    async def build_archive(self, batch_id: str, entries: list[ArchiveEntry]) -> Path:
        """Write a ZIP of ``entries`` to a fresh ``<upload_dir>/archives/`` file.

        Each call gets its own path; the caller removes it once streamed.

        Entries whose source file is gone are skipped. Repeated arcnames get
        a numeric suffix so no member shadows another. Raises
        ``FileNotFoundError`` when no entry could be written.
        """
        archive_dir = self._upload_dir / "archives"
        archive_dir.mkdir(parents=True, exist_ok=True)
        archive_path = archive_dir / f"batch_{_sanitise(batch_id)}_{uuid.uuid4().hex[:12]}.zip"

        used: set[str] = set()
        written = 0
        with zipfile.ZipFile(archive_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for entry in entries:
                source = Path(entry.source_path)
                if not source.is_file():
                    logger.warning("Skipping missing archive member: %s", source)
                    continue
                arcname = _unique_arcname(entry.arcname, used)
                zf.write(source, arcname)
                written += 1

        if written == 0:
            archive_path.unlink(missing_ok=True)
            raise FileNotFoundError(f"No artifacts available for batch {batch_id}")

        logger.info("Built batch archive: %s (%d files)", archive_path, written)
        return archive_path

    # ── Utilities ───────────────────────────────────────────────────

    def file_exists(self, stored_path: str) -> bool:
        """Check if a stored file exists."""
        return Path(stored_path).is_file()

    def list_files(self) -> list[dict]:
        """Describe every stored upload: name, size and modification time."""
        files_dir = self._upload_dir / "files"
        if not files_dir.is_dir():
            return []
        details = []
        for path in sorted(files_dir.iterdir()):
            if not path.is_file() or path.name.startswith("."):
                continue
            stat = path.stat()
            details.append({
                "name": path.name,
                "size": stat.st_size,
                "modified": datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
            })
        return details

    async def delete_file(self, stored_path: str) -> bool:
        """Delete a stored file from disk.

        Returns True if successfully deleted, False if not found.
        """
        file_path = Path(stored_path)
        if not file_path.exists():
            return False

        file_path.unlink(missing_ok=True)
        logger.info("Deleted file from disk: %s", stored_path)
        return True

    async def delete_upload(self, filename: str) -> bool:
        """Delete an upload by its stored name; names outside ``files/`` are rejected."""
        files_dir = (self._upload_dir / "files").resolve()
        target = (files_dir / filename).resolve()
        if target.parent != files_dir:
            return False
        return await self.delete_file(str(target))


def _unique_arcname(name: str, used: set[str]) -> str:
    candidate = name
    counter = 1
    while candidate in used:
        stem, suffix = Path(name).stem, Path(name).suffix
        candidate = f"{stem}_{counter}{suffix}"
        counter += 1
    used.add(candidate)
    return candidate
