"""Shared fakes and fixtures for project engine tests."""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

import pytest

from labelspace.errors import StorageNotFoundError
from labelspace.models import (
    Asset,
    AssetMetadata,
    AssetState,
    AssetType,
    BoundingBox,
    Connection,
    ExportFormat,
    Project,
    Region,
    SecurityToken,
    Tag,
)
from labelspace.providers import ExportProvider, StorageProvider
from labelspace.security import generate_key


class FakeStorageProvider(StorageProvider):
    """In-memory storage recording every call."""

    def __init__(self, files: Optional[Dict[str, str]] = None) -> None:
        self.files: Dict[str, str] = dict(files or {})
        self.writes: List[tuple[str, str]] = []
        self.deletes: List[str] = []
        self.write_error: Optional[BaseException] = None
        self.delete_error: Optional[BaseException] = None

    async def write_text(self, file_name: str, content: str) -> None:
        self.writes.append((file_name, content))
        if self.write_error is not None:
            raise self.write_error
        self.files[file_name] = content

    async def read_text(self, file_name: str) -> str:
        try:
            return self.files[file_name]
        except KeyError as exc:
            raise StorageNotFoundError(file_name) from exc

    async def delete_file(self, file_name: str) -> None:
        self.deletes.append(file_name)
        if self.delete_error is not None:
            raise self.delete_error
        self.files.pop(file_name, None)

    async def list_files(self, extension: Optional[str] = None) -> List[str]:
        return sorted(name for name in self.files if not extension or name.endswith(extension))


class FakeExportProvider(ExportProvider):
    """Export provider recording the formats it was asked to save."""

    def __init__(self, project: Project, options: Any = None) -> None:
        super().__init__(project, options)
        self.saved_formats: List[ExportFormat] = []
        self.save_result: Any = None
        self.save_error: Optional[BaseException] = None

    async def export(self) -> Any:
        return {"assets": len(self.project.assets)}

    async def save(self, export_format: ExportFormat) -> Any:
        self.saved_formats.append(export_format)
        if self.save_error is not None:
            raise self.save_error
        if self.save_result is not None:
            return self.save_result
        return export_format.provider_options


class RecordingFactory:
    """Callable factory returning a fixed provider and recording its arguments."""

    def __init__(self, provider: Any) -> None:
        self.provider = provider
        self.calls: List[tuple[Any, ...]] = []
        self.error: Optional[BaseException] = None

    def __call__(self, *args: Any) -> Any:
        self.calls.append(args)
        if self.error is not None:
            raise self.error
        return self.provider


class FakeAssetService:
    """Asset metadata store backed by a dictionary of records."""

    def __init__(self, records: Optional[Dict[str, AssetMetadata]] = None) -> None:
        self.records: Dict[str, AssetMetadata] = dict(records or {})
        self.fetched: List[str] = []
        self.saved: List[AssetMetadata] = []
        self.get_error: Optional[BaseException] = None
        self.save_error: Optional[BaseException] = None

    async def get_asset_metadata(self, asset: Asset) -> AssetMetadata:
        self.fetched.append(asset.id)
        if self.get_error is not None:
            raise self.get_error
        record = self.records.get(asset.id)
        if record is None:
            return AssetMetadata(asset=asset, regions=[])
        return record.model_copy(deep=True)

    async def save(self, metadata: AssetMetadata) -> AssetMetadata:
        if self.save_error is not None:
            raise self.save_error
        self.saved.append(metadata)
        self.records[metadata.asset.id] = metadata
        return metadata


def build_asset(index: int, state: AssetState = AssetState.TAGGED) -> Asset:
    return Asset(
        id=f"asset-{index}",
        type=AssetType.IMAGE,
        state=state,
        name=f"image-{index}.jpg",
        path=f"file:///images/image-{index}.jpg",
    )


def build_region(region_id: str, tags: List[str]) -> Region:
    return Region(
        id=region_id,
        tags=tags,
        bounding_box=BoundingBox(left=0, top=0, width=10, height=10),
    )


def build_project(
    name: str = "TestProject",
    *,
    project_id: Optional[str] = "project-1",
    asset_count: int = 0,
    with_export: bool = True,
) -> Project:
    """Return a project with local connections and ``asset_count`` tagged assets."""
    assets = [build_asset(index) for index in range(1, asset_count + 1)]
    return Project(
        id=project_id,
        name=name,
        security_token="TestToken",
        source_connection=Connection(
            name="Source",
            provider_type="localFileSystemProxy",
            provider_options={"folderPath": "/images"},
        ),
        target_connection=Connection(
            name="Target",
            provider_type="localFileSystemProxy",
            provider_options={"folderPath": "/labels", "retries": 3},
        ),
        export_format=(
            ExportFormat(provider_type="jsonExport", provider_options={"assetState": "tagged"})
            if with_export
            else None
        ),
        tags=[Tag(name="tag1"), Tag(name="tag2")],
        assets={asset.id: asset for asset in assets},
    )


@pytest.fixture
def security_token() -> SecurityToken:
    return SecurityToken(name="TestToken", key=generate_key())


@pytest.fixture
def project_factory() -> Callable[..., Project]:
    return build_project


@pytest.fixture
def asset_factory() -> Callable[..., Asset]:
    return build_asset


@pytest.fixture
def region_factory() -> Callable[..., Region]:
    return build_region


@pytest.fixture
def storage() -> FakeStorageProvider:
    return FakeStorageProvider()


@pytest.fixture
def storage_factory(storage: FakeStorageProvider) -> RecordingFactory:
    return RecordingFactory(storage)


@pytest.fixture
def export_provider() -> FakeExportProvider:
    return FakeExportProvider(build_project())


@pytest.fixture
def export_factory(export_provider: FakeExportProvider) -> RecordingFactory:
    return RecordingFactory(export_provider)


@pytest.fixture
def asset_service() -> FakeAssetService:
    return FakeAssetService()
