"""Exceptions raised by the project engine and its providers."""


class LabelspaceError(Exception):
    """Base exception for project engine operations."""


class ProviderResolutionError(LabelspaceError):
    """Raised when a storage or export provider cannot be constructed."""


class StorageIOError(LabelspaceError):
    """Raised when a storage provider fails to read, write, or delete data."""


class StorageNotFoundError(StorageIOError):
    """Raised when a requested blob does not exist in storage."""


class ExportIOError(LabelspaceError):
    """Raised when an export provider fails to produce or persist artifacts."""


class DecryptionError(LabelspaceError):
    """Raised when ciphertext cannot be decrypted with the supplied key."""


class AssetMetadataError(LabelspaceError):
    """Raised when stored asset metadata cannot be parsed."""


class MissingSecurityTokenError(LabelspaceError):
    """Raised when a named security token is not configured."""


class ProjectFileError(LabelspaceError):
    """Raised when a project file cannot be read or parsed."""


__all__ = [
    "LabelspaceError",
    "ProviderResolutionError",
    "StorageIOError",
    "StorageNotFoundError",
    "ExportIOError",
    "DecryptionError",
    "AssetMetadataError",
    "MissingSecurityTokenError",
    "ProjectFileError",
]
