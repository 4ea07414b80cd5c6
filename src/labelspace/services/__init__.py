"""Project and asset services."""

from .assets import AssetService, metadata_file_name
from .project import ProjectService, project_file_name, remove_project_tag, rename_project_tag

__all__ = [
    "AssetService",
    "ProjectService",
    "metadata_file_name",
    "project_file_name",
    "remove_project_tag",
    "rename_project_tag",
]
