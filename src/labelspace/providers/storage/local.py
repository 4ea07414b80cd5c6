"""Storage provider backed by a local directory."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, List, Mapping, Optional

from labelspace.errors import StorageIOError, StorageNotFoundError

from .base import StorageProvider

LOGGER = logging.getLogger(__name__)


class LocalFileSystemProvider(StorageProvider):
    """Store blobs as files inside a configured folder.

    Options:
        folderPath: Directory that holds the project files.
    """

    def __init__(self, options: Mapping[str, Any] | None) -> None:
        folder = (options or {}).get("folderPath")
        if not folder:
            raise ValueError("Local file system provider requires a 'folderPath' option")
        self._folder = Path(folder).expanduser()

    @property
    def folder(self) -> Path:
        """Return the directory backing this provider."""
        return self._folder

    async def write_text(self, file_name: str, content: str) -> None:
        await asyncio.to_thread(self._write, file_name, content)

    async def read_text(self, file_name: str) -> str:
        return await asyncio.to_thread(self._read, file_name)

    async def delete_file(self, file_name: str) -> None:
        await asyncio.to_thread(self._delete, file_name)

    async def list_files(self, extension: Optional[str] = None) -> List[str]:
        return await asyncio.to_thread(self._list, extension)

    # Internal helpers -------------------------------------------------

    def _path(self, file_name: str) -> Path:
        return self._folder / file_name

    def _write(self, file_name: str, content: str) -> None:
        path = self._path(file_name)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise StorageIOError(f"Unable to write {path}: {exc}") from exc
        LOGGER.debug("Wrote %s", path)

    def _read(self, file_name: str) -> str:
        path = self._path(file_name)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise StorageNotFoundError(f"No file found at {path}") from exc
        except OSError as exc:
            raise StorageIOError(f"Unable to read {path}: {exc}") from exc

    def _delete(self, file_name: str) -> None:
        path = self._path(file_name)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageIOError(f"Unable to delete {path}: {exc}") from exc
        LOGGER.debug("Deleted %s", path)

    def _list(self, extension: Optional[str]) -> List[str]:
        if not self._folder.is_dir():
            return []
        pattern = f"*{extension}" if extension else "*"
        return sorted(path.name for path in self._folder.glob(pattern) if path.is_file())


__all__ = ["LocalFileSystemProvider"]
