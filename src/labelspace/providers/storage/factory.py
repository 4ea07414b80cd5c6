"""Registry resolving storage provider types to implementations."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping

from labelspace.errors import ProviderResolutionError
from labelspace.models import Connection

from .base import StorageProvider
from .local import LocalFileSystemProvider

LOGGER = logging.getLogger(__name__)

StorageProviderHandler = Callable[[Any], StorageProvider]

LOCAL_FILE_SYSTEM = "localFileSystemProxy"


class StorageProviderFactory:
    """Create storage providers from a provider type and its options."""

    handlers: Dict[str, StorageProviderHandler] = {
        LOCAL_FILE_SYSTEM: LocalFileSystemProvider,
    }

    @classmethod
    def register(cls, name: str, handler: StorageProviderHandler) -> None:
        """Register ``handler`` under ``name``, replacing any previous entry."""
        if not name:
            raise ValueError("Storage provider name must not be empty")
        cls.handlers[name] = handler

    @classmethod
    def unregister(cls, name: str) -> None:
        cls.handlers.pop(name, None)

    @classmethod
    def create(
        cls, provider_type: str, options: Mapping[str, Any] | None = None
    ) -> StorageProvider:
        """Construct the provider registered for ``provider_type``.

        Args:
            provider_type: Registered provider name.
            options: Decrypted provider options.

        Returns:
            StorageProvider: Newly constructed provider.

        Raises:
            ProviderResolutionError: If the type is unknown or construction fails.
        """
        handler = cls.handlers.get(provider_type)
        if handler is None:
            raise ProviderResolutionError(f"No storage provider registered for {provider_type!r}")
        try:
            provider = handler(options)
        except Exception as exc:
            raise ProviderResolutionError(
                f"Unable to create storage provider {provider_type!r}: {exc}"
            ) from exc
        LOGGER.debug("Resolved storage provider %s", provider_type)
        return provider

    @classmethod
    def create_from_connection(cls, connection: Connection) -> StorageProvider:
        return cls.create(connection.provider_type, connection.provider_options)


__all__ = ["StorageProviderFactory", "StorageProviderHandler", "LOCAL_FILE_SYSTEM"]
