"""Storage provider abstractions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional


class StorageProvider(ABC):
    """Abstract interface for reading and writing named text blobs."""

    @abstractmethod
    async def write_text(self, file_name: str, content: str) -> None:
        """Write ``content`` to the blob named ``file_name``."""

    @abstractmethod
    async def read_text(self, file_name: str) -> str:
        """Return the text stored under ``file_name``."""

    @abstractmethod
    async def delete_file(self, file_name: str) -> None:
        """Delete the blob named ``file_name``; a missing blob is not an error."""

    @abstractmethod
    async def list_files(self, extension: Optional[str] = None) -> List[str]:
        """Return blob names, optionally filtered by ``extension``."""


__all__ = ["StorageProvider"]
