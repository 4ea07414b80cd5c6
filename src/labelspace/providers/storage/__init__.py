"""Storage providers and their registry."""

from .base import StorageProvider
from .factory import LOCAL_FILE_SYSTEM, StorageProviderFactory
from .local import LocalFileSystemProvider

__all__ = [
    "StorageProvider",
    "StorageProviderFactory",
    "LocalFileSystemProvider",
    "LOCAL_FILE_SYSTEM",
]
