"""Project persistence and tag propagation."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Callable, Iterable, List, Mapping, Optional

from labelspace.constants import PROJECT_FILE_EXTENSION
from labelspace.models import Asset, AssetMetadata, ExportFormat, Project, SecurityToken, Tag
from labelspace.providers import (
    ExportProvider,
    ExportProviderFactory,
    StorageProvider,
    StorageProviderFactory,
)
from labelspace.security import decrypt_project, encrypt_options, encrypt_project

from .assets import AssetService, StorageFactory, metadata_file_name

LOGGER = logging.getLogger(__name__)

ExportFactory = Callable[[str, Project, Optional[Mapping[str, Any]]], ExportProvider]
AssetServiceFactory = Callable[[Project], AssetService]
TagTransform = Callable[[List[str]], List[str]]


def project_file_name(project: Project) -> str:
    """Return the storage name of the file holding ``project``."""
    return f"{project.name}{PROJECT_FILE_EXTENSION}"


def _serialize(project: Project) -> str:
    return json.dumps(project.to_wire(), indent=4)


class ProjectService:
    """Save, load, and delete projects and propagate tag changes across assets.

    The service holds no state between calls; providers are resolved afresh for
    every operation. Callers must serialize concurrent operations on the same
    project themselves.
    """

    def __init__(
        self,
        *,
        storage_factory: StorageFactory | None = None,
        export_factory: ExportFactory | None = None,
        asset_service_factory: AssetServiceFactory | None = None,
    ) -> None:
        """Initialize the service with optional collaborator factories.

        Args:
            storage_factory: Resolves a storage provider from a type and options.
            export_factory: Resolves an export provider from a type, project, and options.
            asset_service_factory: Builds the asset metadata store for a project.
        """
        self._storage_factory = storage_factory or StorageProviderFactory.create
        self._export_factory = export_factory or ExportProviderFactory.create
        self._asset_service_factory = asset_service_factory or (
            lambda project: AssetService(project, storage_factory=self._storage_factory)
        )

    async def save(self, project: Project, security_token: SecurityToken) -> Project:
        """Encrypt ``project`` and write it to its target connection.

        Both providers are resolved before anything is written. The storage
        write completes before the export provider saves its settings. The
        options returned by the export provider are then recorded on the
        project and the file is written again, so the stored record matches
        the returned one.

        Args:
            project: Project holding decrypted provider options. Not modified.
            security_token: Token whose key encrypts the provider options.

        Returns:
            Project: The encrypted project record.
        """
        storage = self._target_storage(project)
        export_format = project.export_format
        exporter: ExportProvider | None = None
        if export_format is not None:
            exporter = self._export_factory(
                export_format.provider_type, project, export_format.provider_options
            )

        encrypted = encrypt_project(project, security_token)
        if not encrypted.security_token:
            encrypted.security_token = security_token.name

        file_name = project_file_name(project)
        await storage.write_text(file_name, _serialize(encrypted))
        LOGGER.info("Saved project %s to %s", project.name, file_name)

        if exporter is not None and export_format is not None:
            options = await exporter.save(export_format)
            encrypted.export_format = ExportFormat(
                provider_type=export_format.provider_type,
                provider_options=encrypt_options(options, security_token.key),
            )
            await storage.write_text(file_name, _serialize(encrypted))
            LOGGER.debug("Recorded export settings for %s", export_format.provider_type)

        return encrypted

    async def load(self, project: Project, security_token: SecurityToken) -> Project:
        """Return a copy of ``project`` with its provider options decrypted.

        Raises:
            DecryptionError: If the token does not match the stored ciphertext.
        """
        loaded = decrypt_project(project, security_token)
        LOGGER.debug("Loaded project %s", project.name)
        return loaded

    async def delete(self, project: Project) -> None:
        """Delete the project file and the metadata record of every asset.

        Args:
            project: Project to delete from its target connection.
        """
        storage = self._target_storage(project)
        file_names = [project_file_name(project)]
        file_names.extend(metadata_file_name(asset_id) for asset_id in project.assets)
        await asyncio.gather(*(storage.delete_file(name) for name in file_names))
        LOGGER.info("Deleted project %s and %d asset records", project.name, len(project.assets))

    def is_duplicate(self, project: Project, project_list: Iterable[Project]) -> bool:
        """Return True if another project in ``project_list`` has the same name."""
        return any(
            other.name == project.name and (project.id is None or other.id != project.id)
            for other in project_list
        )

    async def delete_tag(self, project: Project, tag_name: str) -> List[AssetMetadata]:
        """Remove ``tag_name`` from every region of every asset in ``project``.

        Regions left without tags are removed. Only assets that referenced the
        tag are saved.

        Returns:
            list[AssetMetadata]: The records that were saved.
        """

        def transform(tags: List[str]) -> List[str]:
            return [tag for tag in tags if tag != tag_name]

        updated = await self._cascade(project, tag_name, transform)
        LOGGER.info("Deleted tag %r from %d assets", tag_name, len(updated))
        return updated

    async def update_tag(
        self, project: Project, old_tag_name: str, new_tag_name: str
    ) -> List[AssetMetadata]:
        """Rename ``old_tag_name`` to ``new_tag_name`` in every region of ``project``.

        Returns:
            list[AssetMetadata]: The records that were saved.
        """
        if old_tag_name == new_tag_name:
            return []

        def transform(tags: List[str]) -> List[str]:
            renamed = (new_tag_name if tag == old_tag_name else tag for tag in tags)
            return list(dict.fromkeys(renamed))

        updated = await self._cascade(project, old_tag_name, transform)
        LOGGER.info(
            "Renamed tag %r to %r in %d assets", old_tag_name, new_tag_name, len(updated)
        )
        return updated

    # Internal helpers -------------------------------------------------

    def _target_storage(self, project: Project) -> StorageProvider:
        connection = project.target_connection
        return self._storage_factory(connection.provider_type, connection.provider_options)

    async def _cascade(
        self, project: Project, tag_name: str, transform: TagTransform
    ) -> List[AssetMetadata]:
        asset_service = self._asset_service_factory(project)
        # Asset ids are mapping keys, so no two tasks share a record.
        results = await asyncio.gather(
            *(
                self._update_asset(asset_service, asset, tag_name, transform)
                for asset in project.assets.values()
            )
        )
        return [metadata for metadata in results if metadata is not None]

    async def _update_asset(
        self,
        asset_service: AssetService,
        asset: Asset,
        tag_name: str,
        transform: TagTransform,
    ) -> AssetMetadata | None:
        metadata = await asset_service.get_asset_metadata(asset)
        changed = False
        regions = []
        for region in metadata.regions:
            if tag_name in region.tags:
                changed = True
                region.tags = transform(region.tags)
                if not region.tags:
                    continue
            regions.append(region)

        if not changed:
            return None

        metadata.regions = regions
        await asset_service.save(metadata)
        return metadata


def rename_project_tag(project: Project, old_tag_name: str, new_tag_name: str) -> Project:
    """Return a copy of ``project`` whose tag list has ``old_tag_name`` renamed.

    The renamed tag keeps its position and color. If ``new_tag_name`` is
    already present the old entry is dropped instead.
    """
    updated = project.model_copy(deep=True)
    existing = {tag.name for tag in updated.tags}
    tags: List[Tag] = []
    for tag in updated.tags:
        if tag.name == old_tag_name:
            if new_tag_name in existing and new_tag_name != old_tag_name:
                continue
            tag = tag.model_copy(update={"name": new_tag_name})
        tags.append(tag)
    updated.tags = tags
    return updated


def remove_project_tag(project: Project, tag_name: str) -> Project:
    """Return a copy of ``project`` without ``tag_name`` in its tag list."""
    updated = project.model_copy(deep=True)
    updated.tags = [tag for tag in updated.tags if tag.name != tag_name]
    return updated


__all__ = [
    "ProjectService",
    "project_file_name",
    "rename_project_tag",
    "remove_project_tag",
]
