"""Asset metadata store tests backed by the local file system provider."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest

from labelspace.errors import AssetMetadataError
from labelspace.models import AssetMetadata, AssetState
from labelspace.services import AssetService, ProjectService, metadata_file_name


def _local_project(project_factory, tmp_path: Path, **kwargs):
    project = project_factory(**kwargs)
    project.target_connection.provider_options = {"folderPath": str(tmp_path)}
    return project


def test_metadata_file_name_uses_asset_id() -> None:
    assert metadata_file_name("abc") == "abc-asset.json"


def test_get_asset_metadata_returns_empty_record_when_missing(
    project_factory, tmp_path: Path
) -> None:
    project = _local_project(project_factory, tmp_path, asset_count=1)
    asset = project.assets["asset-1"]

    metadata = asyncio.run(AssetService(project).get_asset_metadata(asset))

    assert metadata.asset == asset
    assert metadata.regions == []


def test_save_then_get_round_trip(project_factory, region_factory, tmp_path: Path) -> None:
    project = _local_project(project_factory, tmp_path, asset_count=1)
    service = AssetService(project)
    metadata = AssetMetadata(
        asset=project.assets["asset-1"], regions=[region_factory("r1", ["tag1", "tag2"])]
    )

    asyncio.run(service.save(metadata))
    loaded = asyncio.run(service.get_asset_metadata(project.assets["asset-1"]))

    stored = json.loads((tmp_path / "asset-1-asset.json").read_text(encoding="utf-8"))
    assert stored["regions"][0]["boundingBox"]["width"] == 10
    assert loaded == metadata


def test_save_removes_record_for_untagged_asset(
    project_factory, asset_factory, tmp_path: Path
) -> None:
    project = _local_project(project_factory, tmp_path)
    (tmp_path / "asset-7-asset.json").write_text("{}", encoding="utf-8")
    asset = asset_factory(7, state=AssetState.VISITED)
    service = AssetService(project)

    asyncio.run(service.save(AssetMetadata(asset=asset)))
    asyncio.run(service.save(AssetMetadata(asset=asset)))

    assert not (tmp_path / "asset-7-asset.json").exists()


def test_get_asset_metadata_rejects_corrupted_record(project_factory, tmp_path: Path) -> None:
    project = _local_project(project_factory, tmp_path, asset_count=1)
    (tmp_path / "asset-1-asset.json").write_text("not json", encoding="utf-8")

    with pytest.raises(AssetMetadataError):
        asyncio.run(AssetService(project).get_asset_metadata(project.assets["asset-1"]))


def test_project_lifecycle_on_local_storage(
    project_factory, region_factory, security_token, tmp_path: Path
) -> None:
    project = _local_project(project_factory, tmp_path, asset_count=2, with_export=False)
    service = ProjectService()
    assets = AssetService(project)
    for asset_id, tags in (("asset-1", ["tag1", "tag2"]), ("asset-2", ["tag2"])):
        asyncio.run(
            assets.save(
                AssetMetadata(
                    asset=project.assets[asset_id], regions=[region_factory(asset_id, tags)]
                )
            )
        )

    asyncio.run(service.save(project, security_token))
    project_file = tmp_path / "TestProject.lsproj"
    assert "folderPath" not in project_file.read_text(encoding="utf-8")

    updated = asyncio.run(service.delete_tag(project, "tag2"))
    assert [metadata.asset.id for metadata in updated] == ["asset-1", "asset-2"]
    record = asyncio.run(assets.get_asset_metadata(project.assets["asset-1"]))
    assert [region.tags for region in record.regions] == [["tag1"]]
    record = asyncio.run(assets.get_asset_metadata(project.assets["asset-2"]))
    assert record.regions == []

    asyncio.run(service.delete(project))
    assert sorted(path.name for path in tmp_path.iterdir()) == []
