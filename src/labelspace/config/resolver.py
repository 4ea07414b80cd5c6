"""Configuration resolution helpers."""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from copy import deepcopy
from typing import Any, Mapping

from pydantic import ValidationError

from .exceptions import ConfigError
from .models import LabelspaceConfig


def resolve_with_precedence(
    *,
    defaults: LabelspaceConfig,
    file_overrides: Mapping[str, Any] | None = None,
    env_overrides: Mapping[str, Any] | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> LabelspaceConfig:
    """Layer overrides onto ``defaults``; later sources win.

    Order is file, then environment, then CLI. Keys may be nested mappings or
    dotted paths such as ``logging.level``. Lists are replaced, not merged.

    Raises:
        ConfigError: If a source is malformed or the result fails validation.
    """
    merged: dict[str, Any] = defaults.model_dump(mode="python")
    sources = {"file": file_overrides, "environment": env_overrides, "cli": cli_overrides}
    for source_name, source in sources.items():
        if source is not None:
            merged = merge_mappings(merged, expand_dotted(source, source_name=source_name))

    try:
        return LabelspaceConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration values: {exc}") from exc


def expand_dotted(source: Mapping[str, Any], *, source_name: str = "config") -> dict[str, Any]:
    """Return ``source`` with dotted keys expanded into nested mappings."""
    if not isinstance(source, MappingABC):
        raise ConfigError(f"{source_name.capitalize()} overrides must be a mapping.")

    expanded: dict[str, Any] = {}
    for key, value in source.items():
        if not isinstance(key, str):
            raise ConfigError(f"{source_name.capitalize()} override keys must be strings.")
        if isinstance(value, MappingABC):
            value = expand_dotted(value, source_name=source_name)
        *parents, leaf = key.split(".")
        node = expanded
        for segment in parents:
            child = node.setdefault(segment, {})
            if not isinstance(child, dict):
                label = source_name.capitalize()
                raise ConfigError(f"{label} override for {key} conflicts with an existing value.")
            node = child
        if isinstance(value, dict) and isinstance(node.get(leaf), dict):
            node[leaf] = merge_mappings(node[leaf], value)
        else:
            node[leaf] = value
    return expanded


def merge_mappings(base: Mapping[str, Any], overrides: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge ``overrides`` into a copy of ``base``."""
    merged = deepcopy(dict(base))
    for key, value in overrides.items():
        current = merged.get(key)
        if isinstance(value, MappingABC) and isinstance(current, MappingABC):
            merged[key] = merge_mappings(current, value)
        else:
            merged[key] = deepcopy(value)
    return merged


__all__ = ["resolve_with_precedence", "expand_dotted", "merge_mappings"]
