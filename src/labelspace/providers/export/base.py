"""Export provider abstractions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping

from labelspace.models import ExportFormat, Project, ProviderOptions


class ExportProvider(ABC):
    """Produce export artifacts for a project in a specific format.

    Providers are constructed with the decrypted project and their own
    decrypted options.
    """

    def __init__(self, project: Project, options: Mapping[str, Any] | None = None) -> None:
        self.project = project
        self.options = dict(options) if options is not None else None

    @abstractmethod
    async def export(self) -> Any:
        """Write export artifacts and return a provider-specific result."""

    async def save(self, export_format: ExportFormat) -> ProviderOptions:
        """Persist provider settings and return the options to record on the project.

        Args:
            export_format: Export format declared on the project.

        Returns:
            ProviderOptions: Options to store on the saved project.
        """
        return export_format.provider_options


__all__ = ["ExportProvider"]
