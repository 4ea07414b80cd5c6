"""Asset metadata persistence."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Mapping, Optional

from pydantic import ValidationError

from labelspace.constants import ASSET_METADATA_FILE_EXTENSION
from labelspace.errors import AssetMetadataError, StorageNotFoundError
from labelspace.models import Asset, AssetMetadata, AssetState, Project
from labelspace.providers import StorageProvider, StorageProviderFactory

LOGGER = logging.getLogger(__name__)

StorageFactory = Callable[[str, Optional[Mapping[str, Any]]], StorageProvider]


def metadata_file_name(asset_id: str) -> str:
    """Return the storage name of the metadata record for ``asset_id``."""
    return f"{asset_id}{ASSET_METADATA_FILE_EXTENSION}"


class AssetService:
    """Read and write per-asset annotation records for one project.

    Records live next to the project file, in the storage addressed by the
    project's target connection.
    """

    def __init__(self, project: Project, *, storage_factory: StorageFactory | None = None) -> None:
        """Initialize the service for ``project``.

        Args:
            project: Project whose target connection holds the metadata records.
            storage_factory: Callable resolving a storage provider from a provider
                type and options. Defaults to ``StorageProviderFactory.create``.
        """
        self._project = project
        self._storage_factory = storage_factory or StorageProviderFactory.create
        self._storage: StorageProvider | None = None

    @property
    def storage_provider(self) -> StorageProvider:
        """Return the storage provider for the project's target connection."""
        if self._storage is None:
            connection = self._project.target_connection
            self._storage = self._storage_factory(
                connection.provider_type, connection.provider_options
            )
        return self._storage

    async def get_asset_metadata(self, asset: Asset) -> AssetMetadata:
        """Load the metadata record for ``asset``.

        Args:
            asset: Asset whose record should be loaded.

        Returns:
            AssetMetadata: Stored record, or an empty record when none exists yet.

        Raises:
            AssetMetadataError: If the stored record cannot be parsed.
        """
        file_name = metadata_file_name(asset.id)
        try:
            text = await self.storage_provider.read_text(file_name)
        except StorageNotFoundError:
            return AssetMetadata(asset=asset.model_copy(deep=True), regions=[])

        try:
            return AssetMetadata.model_validate(json.loads(text))
        except (json.JSONDecodeError, ValidationError) as exc:
            raise AssetMetadataError(f"Invalid asset metadata in {file_name}: {exc}") from exc

    async def save(self, metadata: AssetMetadata) -> AssetMetadata:
        """Persist ``metadata``.

        Only tagged assets keep a record; for any other state the record is
        removed since the project file already holds the asset itself.

        Args:
            metadata: Record to persist.

        Returns:
            AssetMetadata: The persisted record.
        """
        file_name = metadata_file_name(metadata.asset.id)
        if metadata.asset.state == AssetState.TAGGED:
            await self.storage_provider.write_text(
                file_name, json.dumps(metadata.to_wire(), indent=4)
            )
            LOGGER.debug("Saved asset metadata %s", file_name)
        else:
            await self.storage_provider.delete_file(file_name)
            LOGGER.debug("Removed asset metadata %s", file_name)
        return metadata


__all__ = ["AssetService", "metadata_file_name"]
