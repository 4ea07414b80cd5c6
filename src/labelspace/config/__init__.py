"""Configuration management for Labelspace."""

from __future__ import annotations

import os
import textwrap
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

import yaml

from labelspace.models import SecurityToken

from .exceptions import ConfigError
from .models import CLIOptions, LabelspaceConfig, LoggingSettings, StorageSettings
from .resolver import expand_dotted, merge_mappings, resolve_with_precedence

DEFAULT_CONFIG_PATH = Path("~/.labelspace/config.yaml")
ENV_PREFIX = "LABELSPACE__"
_CONFIG_HEADER = textwrap.dedent(
    """\
    # Labelspace configuration file
    # Manage via `labelspace config set` and `labelspace token create`.
    # Security token keys decrypt project connection settings; keep this file private.
    """
)


class ConfigManager:
    """Load and persist configuration data, applying precedence rules."""

    def __init__(
        self,
        config_path: Path | None = None,
        *,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._config_path = (config_path or DEFAULT_CONFIG_PATH).expanduser()
        self._env = env if env is not None else os.environ

    @property
    def config_path(self) -> Path:
        """Return the resolved configuration path."""
        return self._config_path

    def load(
        self,
        *,
        cli_overrides: Mapping[str, Any] | None = None,
        include_env: bool = True,
    ) -> LabelspaceConfig:
        """Return the effective configuration.

        Args:
            cli_overrides: Highest-precedence overrides, usually from CLI flags.
            include_env: Whether ``LABELSPACE__SECTION__KEY`` variables apply.

        Raises:
            ConfigError: If the file or any override is invalid.
        """
        return resolve_with_precedence(
            defaults=LabelspaceConfig(),
            file_overrides=self.load_file_overrides(),
            env_overrides=self._env_overrides() if include_env else None,
            cli_overrides=cli_overrides,
        )

    def load_file_overrides(self) -> dict[str, Any]:
        """Return the raw mapping stored on disk, or an empty mapping."""
        if not self._config_path.exists():
            return {}

        try:
            raw = yaml.safe_load(self._config_path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse configuration file: {exc}") from exc

        if not isinstance(raw, dict):
            raise ConfigError("Configuration file must contain a mapping at the top level.")
        return raw

    def save(self, config: LabelspaceConfig | Mapping[str, Any]) -> None:
        """Persist configuration data to disk."""
        if isinstance(config, LabelspaceConfig):
            data = config.model_dump(mode="python")
        else:
            data = dict(config)

        self._config_path.parent.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        body = yaml.safe_dump(data, sort_keys=False)
        self._config_path.write_text(
            f"{_CONFIG_HEADER}# Last updated: {stamp}\n{body}", encoding="utf-8"
        )

    def ensure_exists(self) -> Path:
        """Create a configuration file with defaults if one does not exist."""
        if not self._config_path.exists():
            self.save(LabelspaceConfig())
        return self._config_path

    def read_text(self) -> str:
        """Return the current configuration file contents."""
        if not self._config_path.exists():
            return ""
        return self._config_path.read_text(encoding="utf-8")

    def add_security_token(self, token: SecurityToken) -> None:
        """Append ``token`` to the tokens stored in the configuration file.

        Raises:
            ConfigError: If a token with the same name is already stored.
        """
        data = self.load_file_overrides()
        tokens = list(data.get("security_tokens") or [])
        if any(isinstance(entry, dict) and entry.get("name") == token.name for entry in tokens):
            raise ConfigError(f"Security token {token.name!r} already exists.")
        tokens.append({"name": token.name, "key": token.key})
        data["security_tokens"] = tokens
        resolve_with_precedence(defaults=LabelspaceConfig(), file_overrides=data)
        self.save(data)

    # Internal helpers -------------------------------------------------

    def _env_overrides(self) -> dict[str, Any]:
        overrides: dict[str, Any] = {}
        for key, raw_value in self._env.items():
            if not key.startswith(ENV_PREFIX) or len(key) == len(ENV_PREFIX):
                continue
            dotted = ".".join(segment.lower() for segment in key[len(ENV_PREFIX) :].split("__"))
            try:
                value = yaml.safe_load(raw_value)
            except yaml.YAMLError:
                value = raw_value
            overrides = merge_mappings(overrides, expand_dotted({dotted: value}))
        return overrides


__all__ = [
    "CLIOptions",
    "ConfigError",
    "ConfigManager",
    "DEFAULT_CONFIG_PATH",
    "ENV_PREFIX",
    "LabelspaceConfig",
    "LoggingSettings",
    "StorageSettings",
    "expand_dotted",
    "merge_mappings",
    "resolve_with_precedence",
]
