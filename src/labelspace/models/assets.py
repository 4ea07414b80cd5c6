"""Asset and annotation models persisted alongside a project."""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import List, Optional

from pydantic import Field, field_validator

from .base import LabelspaceModel


class AssetState(IntEnum):
    """Labeling progress of an asset."""

    NOT_VISITED = 0
    VISITED = 1
    TAGGED = 2


class AssetType(IntEnum):
    """Kind of content an asset refers to."""

    UNKNOWN = 0
    IMAGE = 1
    VIDEO = 2
    VIDEO_FRAME = 3
    TFRECORD = 4


class RegionType(str, Enum):
    """Geometry used to describe a labeled region."""

    RECTANGLE = "RECTANGLE"
    POLYGON = "POLYGON"
    POLYLINE = "POLYLINE"
    POINT = "POINT"
    SQUARE = "SQUARE"


class Size(LabelspaceModel):
    """Pixel dimensions of an asset."""

    width: int
    height: int


class Point2D(LabelspaceModel):
    """A polygon or polyline vertex in asset pixel coordinates."""

    x: float
    y: float


class BoundingBox(LabelspaceModel):
    """Axis-aligned box enclosing a region."""

    left: float
    top: float
    width: float
    height: float


class Asset(LabelspaceModel):
    """A unit of content (image, video, frame) to be labeled.

    Attributes:
        id: Stable identifier, also the key in ``Project.assets``.
        type: Kind of content.
        state: Labeling progress.
        name: Display name, usually the file name.
        path: Location of the content in the source connection.
        size: Optional pixel dimensions.
        format: Optional file format such as ``jpg``.
        timestamp: Position in seconds for video frames.
        parent: Parent video asset for video frames.
    """

    id: str
    type: AssetType = AssetType.UNKNOWN
    state: AssetState = AssetState.NOT_VISITED
    name: str = ""
    path: str = ""
    size: Optional[Size] = None
    format: Optional[str] = None
    timestamp: Optional[float] = None
    parent: Optional["Asset"] = None


class Region(LabelspaceModel):
    """A labeled area within an asset.

    ``tags`` behaves as a set: duplicate names are dropped, keeping the first
    occurrence so the display order stays stable.
    """

    id: str
    type: RegionType = RegionType.RECTANGLE
    tags: List[str] = Field(default_factory=list)
    points: List[Point2D] = Field(default_factory=list)
    bounding_box: Optional[BoundingBox] = None

    @field_validator("tags")
    @classmethod
    def _dedupe_tags(cls, value: List[str]) -> List[str]:
        return list(dict.fromkeys(value))


class AssetMetadata(LabelspaceModel):
    """Annotation record for a single asset, persisted in its own file."""

    asset: Asset
    regions: List[Region] = Field(default_factory=list)
    version: Optional[str] = None


__all__ = [
    "AssetState",
    "AssetType",
    "RegionType",
    "Size",
    "Point2D",
    "BoundingBox",
    "Asset",
    "Region",
    "AssetMetadata",
]
