"""Export providers and their registry."""

from .base import ExportProvider
from .factory import ExportProviderFactory

__all__ = ["ExportProvider", "ExportProviderFactory"]
