"""Configuration models describing Labelspace settings."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from labelspace.models import SecurityToken
from labelspace.providers import LOCAL_FILE_SYSTEM


class LabelspaceBaseModel(BaseModel):
    """Shared configuration for Labelspace settings models."""

    model_config = ConfigDict(extra="forbid")


class LoggingSettings(LabelspaceBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
        file: Optional log file path; rotation applies when set.
        max_size_mb: Maximum log size before rotation.
        backup_count: Number of historical log files to retain.
    """

    level: str = "WARNING"
    file: Optional[str] = None
    max_size_mb: int = 100
    backup_count: int = 5


class StorageSettings(LabelspaceBaseModel):
    """Defaults applied when creating project connections.

    Attributes:
        default_provider: Storage provider type used by ``project create``.
    """

    default_provider: str = LOCAL_FILE_SYSTEM


class CLIOptions(LabelspaceBaseModel):
    """CLI behavior defaults.

    Attributes:
        quiet_default: Whether commands suppress non-error output by default.
        json_default: Whether commands emit JSON output by default.
    """

    quiet_default: bool = False
    json_default: bool = False


class LabelspaceConfig(LabelspaceBaseModel):
    """Top-level configuration struct for Labelspace.

    Attributes:
        logging: Logging configuration.
        storage: Storage defaults.
        cli: CLI presentation defaults.
        security_tokens: Known security tokens, keyed by name on lookup.
    """

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)
    security_tokens: List[SecurityToken] = Field(default_factory=list)


__all__ = [
    "LabelspaceBaseModel",
    "LoggingSettings",
    "StorageSettings",
    "CLIOptions",
    "LabelspaceConfig",
]
