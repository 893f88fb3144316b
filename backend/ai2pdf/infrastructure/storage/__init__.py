from .local_file_storage import ArchiveEntry, LocalFileStorage, StoredFile
from .tool_file_storage import ToolFileStorage

__all__ = ["ArchiveEntry", "LocalFileStorage", "StoredFile", "ToolFileStorage"]
