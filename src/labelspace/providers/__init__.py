"""Pluggable storage and export back-ends."""

from .export import ExportProvider, ExportProviderFactory
from .storage import (
    LOCAL_FILE_SYSTEM,
    LocalFileSystemProvider,
    StorageProvider,
    StorageProviderFactory,
)

__all__ = [
    "ExportProvider",
    "ExportProviderFactory",
    "StorageProvider",
    "StorageProviderFactory",
    "LocalFileSystemProvider",
    "LOCAL_FILE_SYSTEM",
]
