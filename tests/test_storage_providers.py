"""Storage and export provider registry tests."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from labelspace.errors import ProviderResolutionError, StorageNotFoundError
from labelspace.providers import (
    LOCAL_FILE_SYSTEM,
    ExportProvider,
    ExportProviderFactory,
    LocalFileSystemProvider,
    StorageProviderFactory,
)


class _NullExporter(ExportProvider):
    async def export(self):
        return None


def test_factory_creates_local_provider(tmp_path: Path) -> None:
    provider = StorageProviderFactory.create(LOCAL_FILE_SYSTEM, {"folderPath": str(tmp_path)})

    assert isinstance(provider, LocalFileSystemProvider)
    assert provider.folder == tmp_path


def test_factory_rejects_unknown_type() -> None:
    with pytest.raises(ProviderResolutionError):
        StorageProviderFactory.create("azureBlobStorage", {})


def test_factory_wraps_construction_errors() -> None:
    with pytest.raises(ProviderResolutionError) as excinfo:
        StorageProviderFactory.create(LOCAL_FILE_SYSTEM, {})

    assert isinstance(excinfo.value.__cause__, ValueError)


def test_factory_register_and_unregister(tmp_path: Path) -> None:
    StorageProviderFactory.register("scratch", LocalFileSystemProvider)
    try:
        provider = StorageProviderFactory.create("scratch", {"folderPath": str(tmp_path)})
        assert isinstance(provider, LocalFileSystemProvider)
    finally:
        StorageProviderFactory.unregister("scratch")

    with pytest.raises(ProviderResolutionError):
        StorageProviderFactory.create("scratch", {"folderPath": str(tmp_path)})


def test_local_provider_read_write_list_delete(tmp_path: Path) -> None:
    provider = LocalFileSystemProvider({"folderPath": str(tmp_path / "nested")})

    asyncio.run(provider.write_text("demo.lsproj", "{}"))
    asyncio.run(provider.write_text("a-asset.json", "[]"))

    assert asyncio.run(provider.read_text("demo.lsproj")) == "{}"
    assert asyncio.run(provider.list_files()) == ["a-asset.json", "demo.lsproj"]
    assert asyncio.run(provider.list_files(".lsproj")) == ["demo.lsproj"]

    asyncio.run(provider.delete_file("demo.lsproj"))
    asyncio.run(provider.delete_file("demo.lsproj"))

    with pytest.raises(StorageNotFoundError):
        asyncio.run(provider.read_text("demo.lsproj"))


def test_local_provider_lists_nothing_for_missing_folder(tmp_path: Path) -> None:
    provider = LocalFileSystemProvider({"folderPath": str(tmp_path / "missing")})

    assert asyncio.run(provider.list_files()) == []


def test_export_factory_resolution(project_factory) -> None:
    project = project_factory()
    ExportProviderFactory.register("null", _NullExporter)
    try:
        provider = ExportProviderFactory.create("null", project, {"a": 1})
        assert isinstance(provider, _NullExporter)
        assert provider.project is project
        assert provider.options == {"a": 1}
        assert asyncio.run(provider.save(project.export_format)) == {"assetState": "tagged"}
    finally:
        ExportProviderFactory.unregister("null")

    with pytest.raises(ProviderResolutionError):
        ExportProviderFactory.create("null", project, None)
