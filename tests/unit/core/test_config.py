"""Unit tests for core config parsing."""

from __future__ import annotations

import pytest

from core.config import DBConfig
from core.errors import ConfigError
from tests.fixture_paths import fixture_path


def test_from_env_reads_db_path(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should resolve the database root from environment."""
    monkeypatch.setenv("BLOCKDB_PATH", "./.tmp-blockdb")

    config = DBConfig.from_env()

    assert config.db_path.name == ".tmp-blockdb"


def test_from_env_treats_empty_key_as_unset(monkeypatch: pytest.MonkeyPatch) -> None:
    """An empty encryption key should disable encryption."""
    monkeypatch.setenv("BLOCKDB_ENCRYPTION_KEY", "")

    config = DBConfig.from_env()

    assert config.encryption_key is None


def test_from_env_raises_for_invalid_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fail for unsupported log levels."""
    monkeypatch.setenv("BLOCKDB_LOG_LEVEL", "verbose")

    with pytest.raises(ConfigError):
        DBConfig.from_env()


def test_from_file_overrides_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """File values should take precedence over environment values."""
    monkeypatch.setenv("BLOCKDB_ENCRYPTION_KEY", "env-key")
    monkeypatch.delenv("BLOCKDB_LOG_LEVEL", raising=False)

    config = DBConfig.from_file(fixture_path("config/blockdb.yaml"))

    assert (config.encryption_key, config.log_level) == ("fixture-key", "warning")


def test_from_file_rejects_unknown_keys(tmp_path) -> None:
    """Unknown config keys should be reported instead of ignored."""
    config_file = tmp_path / "blockdb.yaml"
    config_file.write_text("db_path: ./data\nreplicas: 3\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="replicas"):
        DBConfig.from_file(config_file)


def test_from_file_raises_for_missing_file(tmp_path) -> None:
    """A missing config file should raise ConfigError."""
    with pytest.raises(ConfigError):
        DBConfig.from_file(tmp_path / "missing.yaml")


def test_from_file_rejects_non_string_values(tmp_path) -> None:
    """Typed config values should be validated."""
    config_file = tmp_path / "blockdb.yaml"
    config_file.write_text("log_level: 3\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        DBConfig.from_file(config_file)
