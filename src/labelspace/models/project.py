"""Project document models."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import Field, model_validator

from .assets import Asset
from .base import LabelspaceModel

ProviderOptions = Optional[Dict[str, Any]]


class Connection(LabelspaceModel):
    """Storage back-end configuration referenced by a project.

    ``provider_options`` holds either the decrypted structured settings or,
    at rest, an encrypted container of the form ``{"encrypted": "..."}``.
    """

    id: Optional[str] = None
    name: str = ""
    description: Optional[str] = None
    provider_type: str
    provider_options: ProviderOptions = None


class ExportFormat(LabelspaceModel):
    """Export provider selection and its settings."""

    provider_type: str
    provider_options: ProviderOptions = None


class SecurityToken(LabelspaceModel):
    """Named symmetric key used to protect connection settings."""

    name: str
    key: str


class Tag(LabelspaceModel):
    """A label available to regions, with its display color."""

    name: str
    color: str = "#5db300"


class VideoSettings(LabelspaceModel):
    """Frame extraction settings applied to video assets."""

    frame_extraction_rate: int = 15


class Project(LabelspaceModel):
    """A labeling workspace.

    Attributes:
        id: Optional identifier; unsaved projects may not have one yet.
        name: Project name, also the base name of the project file.
        version: Application version that last wrote the project.
        description: Free-form description.
        security_token: Name of the token protecting connection settings.
        source_connection: Where the assets are read from.
        target_connection: Where the project file and asset metadata live.
        export_format: Optional export configuration.
        tags: Ordered tag list available to regions.
        assets: Mapping of asset id to asset.
        video_settings: Frame extraction settings for video assets.
        auto_save: Whether editors should persist changes automatically.
        last_visited_asset_id: Asset selected when the project was closed.
    """

    id: Optional[str] = None
    name: str
    version: Optional[str] = None
    description: Optional[str] = None
    security_token: str = ""
    source_connection: Connection
    target_connection: Connection
    export_format: Optional[ExportFormat] = None
    tags: List[Tag] = Field(default_factory=list)
    assets: Dict[str, Asset] = Field(default_factory=dict)
    video_settings: VideoSettings = Field(default_factory=VideoSettings)
    auto_save: bool = True
    last_visited_asset_id: Optional[str] = None

    @model_validator(mode="after")
    def _check_asset_keys(self) -> "Project":
        for key, asset in self.assets.items():
            if key != asset.id:
                raise ValueError(f"Asset key {key!r} does not match asset id {asset.id!r}")
        return self


__all__ = [
    "ProviderOptions",
    "Connection",
    "ExportFormat",
    "SecurityToken",
    "Tag",
    "VideoSettings",
    "Project",
]
