"""Filesystem layout for uploaded HTML tools.

Each tool lives in its own folder: ``<tools_dir>/<folder_name>/index.html``.
"""

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)

TOOL_ENTRYPOINT = "index.html"


class ToolFileStorage:
    """Reads and writes tool folders under a single root directory."""

    def __init__(self, tools_dir: str):
        self._root = Path(tools_dir)
        self._root.mkdir(parents=True, exist_ok=True)

    def _folder(self, folder_name: str) -> Path | None:
        """Resolve a tool folder, refusing names that escape the root."""
        root = self._root.resolve()
        folder = (root / folder_name).resolve()
        if folder.parent != root:
            return None
        return folder

    async def save_tool(self, folder_name: str, content: bytes) -> Path:
        """Write ``content`` as the tool's entrypoint, replacing any previous version."""
        folder = self._folder(folder_name)
        if folder is None:
            raise ValueError(f"Invalid tool folder name: {folder_name!r}")
        folder.mkdir(parents=True, exist_ok=True)
        entrypoint = folder / TOOL_ENTRYPOINT
        entrypoint.write_bytes(content)
        logger.info("Stored tool %s (%d bytes)", entrypoint, len(content))
        return entrypoint

    def entrypoint(self, folder_name: str) -> Path | None:
        """Path of the tool's ``index.html`` if it exists on disk."""
        folder = self._folder(folder_name)
        if folder is None:
            return None
        path = folder / TOOL_ENTRYPOINT
        return path if path.is_file() else None

    async def remove_tool(self, folder_name: str) -> bool:
        """Delete the tool folder. Returns False if it did not exist."""
        folder = self._folder(folder_name)
        if folder is None or not folder.is_dir():
            return False
        shutil.rmtree(folder)
        logger.info("Removed tool folder %s", folder)
        return True
