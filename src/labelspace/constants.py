"""File naming constants shared by the project engine."""

PROJECT_FILE_EXTENSION = ".lsproj"
ASSET_METADATA_FILE_EXTENSION = "-asset.json"
ENCRYPTED_KEY = "encrypted"

__all__ = ["PROJECT_FILE_EXTENSION", "ASSET_METADATA_FILE_EXTENSION", "ENCRYPTED_KEY"]
