"""Registry resolving export provider types to implementations."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping

from labelspace.errors import ProviderResolutionError
from labelspace.models import Project

from .base import ExportProvider

LOGGER = logging.getLogger(__name__)

ExportProviderHandler = Callable[[Project, Any], ExportProvider]


class ExportProviderFactory:
    """Create export providers from a provider type, a project, and options."""

    handlers: Dict[str, ExportProviderHandler] = {}

    @classmethod
    def register(cls, name: str, handler: ExportProviderHandler) -> None:
        """Register ``handler`` under ``name``, replacing any previous entry."""
        if not name:
            raise ValueError("Export provider name must not be empty")
        cls.handlers[name] = handler

    @classmethod
    def unregister(cls, name: str) -> None:
        cls.handlers.pop(name, None)

    @classmethod
    def create(
        cls,
        provider_type: str,
        project: Project,
        options: Mapping[str, Any] | None = None,
    ) -> ExportProvider:
        """Construct the provider registered for ``provider_type``.

        Raises:
            ProviderResolutionError: If the type is unknown or construction fails.
        """
        handler = cls.handlers.get(provider_type)
        if handler is None:
            raise ProviderResolutionError(f"No export provider registered for {provider_type!r}")
        try:
            provider = handler(project, options)
        except Exception as exc:
            raise ProviderResolutionError(
                f"Unable to create export provider {provider_type!r}: {exc}"
            ) from exc
        LOGGER.debug("Resolved export provider %s for project %s", provider_type, project.name)
        return provider


__all__ = ["ExportProviderFactory", "ExportProviderHandler"]
