"""Unit tests for configuration management."""

from pathlib import Path

import pytest

from labelspace.config import (
    ConfigError,
    ConfigManager,
    LabelspaceConfig,
    expand_dotted,
    resolve_with_precedence,
)
from labelspace.models import SecurityToken


def _fresh_manager(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, **kwargs) -> ConfigManager:
    monkeypatch.setenv("HOME", str(tmp_path))
    return ConfigManager(**kwargs)


def test_ensure_exists_creates_default_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)

    path = manager.ensure_exists()

    assert path == tmp_path / ".labelspace" / "config.yaml"
    text = path.read_text(encoding="utf-8")
    assert "Labelspace configuration file" in text
    assert "Last updated:" in text

    config = manager.load(include_env=False)
    assert isinstance(config, LabelspaceConfig)
    assert config.logging.level == "WARNING"


def test_resolve_with_precedence_respects_order(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    env = {"LABELSPACE__LOGGING__LEVEL": "INFO", "LABELSPACE__LOGGING__BACKUP_COUNT": "2"}
    manager = _fresh_manager(tmp_path, monkeypatch, env=env)
    manager.save({"logging": {"level": "ERROR", "max_size_mb": 64}})

    config = manager.load(cli_overrides={"logging.level": "DEBUG"})

    assert config.logging.max_size_mb == 64
    assert config.logging.backup_count == 2
    # CLI overrides take precedence over environment
    assert config.logging.level == "DEBUG"


def test_env_overrides_can_be_skipped(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch, env={"LABELSPACE__CLI__JSON_DEFAULT": "true"})

    assert manager.load().cli.json_default is True
    assert manager.load(include_env=False).cli.json_default is False


def test_invalid_yaml_raises_config_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)
    manager.ensure_exists()

    manager.config_path.write_text("- not-a-mapping", encoding="utf-8")

    with pytest.raises(ConfigError):
        manager.load()


def test_resolve_with_precedence_invalid_value_raises() -> None:
    with pytest.raises(ConfigError):
        resolve_with_precedence(
            defaults=LabelspaceConfig(),
            file_overrides={"logging": {"max_size_mb": "not-an-int"}},
        )


def test_unknown_keys_are_rejected() -> None:
    with pytest.raises(ConfigError):
        resolve_with_precedence(
            defaults=LabelspaceConfig(), cli_overrides={"storage.bucket": "x"}
        )


def test_expand_dotted_merges_nested_paths() -> None:
    expanded = expand_dotted({"logging.level": "INFO", "logging": {"file": "/tmp/log"}})

    assert expanded == {"logging": {"level": "INFO", "file": "/tmp/log"}}


def test_add_security_token_persists_and_rejects_duplicates(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)
    token = SecurityToken(name="Main", key="a" * 43 + "=")

    manager.add_security_token(token)

    config = manager.load(include_env=False)
    assert config.security_tokens == [token]
    with pytest.raises(ConfigError):
        manager.add_security_token(token)
