"""Data models describing projects, assets, and their annotations."""

from .assets import (
    Asset,
    AssetMetadata,
    AssetState,
    AssetType,
    BoundingBox,
    Point2D,
    Region,
    RegionType,
    Size,
)
from .base import LabelspaceModel
from .project import (
    Connection,
    ExportFormat,
    Project,
    ProviderOptions,
    SecurityToken,
    Tag,
    VideoSettings,
)

__all__ = [
    "LabelspaceModel",
    "Asset",
    "AssetMetadata",
    "AssetState",
    "AssetType",
    "BoundingBox",
    "Point2D",
    "Region",
    "RegionType",
    "Size",
    "Connection",
    "ExportFormat",
    "Project",
    "ProviderOptions",
    "SecurityToken",
    "Tag",
    "VideoSettings",
]
