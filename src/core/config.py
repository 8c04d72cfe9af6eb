"""Runtime configuration model for blockdb.

This module owns all environment variable and config file parsing.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
import os
from pathlib import Path
from typing import Mapping, cast

import yaml

from core.constants import DEFAULT_DB_PATH, DEFAULT_LOG_LEVEL, SUPPORTED_LOG_LEVELS
from core.errors import ConfigError

_FILE_KEYS = ("db_path", "encryption_key", "log_level")


@dataclass(frozen=True)
class DBConfig:
    """Validated runtime configuration.

    Attributes:
        db_path: Root directory holding one subdirectory per dataset.
        encryption_key: Optional key material for record encryption.
        log_level: Minimum structured log level.
    """

    db_path: Path
    encryption_key: str | None
    log_level: str

    @classmethod
    def from_env(cls) -> "DBConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            ConfigError: If environment values are invalid.
        """
        db_path_value = os.getenv("BLOCKDB_PATH", str(DEFAULT_DB_PATH))
        encryption_key = os.getenv("BLOCKDB_ENCRYPTION_KEY") or None
        log_level = _parse_log_level(
            os.getenv("BLOCKDB_LOG_LEVEL", DEFAULT_LOG_LEVEL), "BLOCKDB_LOG_LEVEL"
        )
        return cls(
            db_path=Path(db_path_value).expanduser().resolve(),
            encryption_key=encryption_key,
            log_level=log_level,
        )

    @classmethod
    def from_file(cls, config_path: str | Path) -> "DBConfig":
        """Build config from environment, overridden by a YAML file.

        Args:
            config_path: Path to a YAML mapping with optional
                ``db_path``, ``encryption_key`` and ``log_level`` keys.

        Returns:
            A validated config object.

        Raises:
            ConfigError: If the file is missing, malformed, or has invalid values.
        """
        payload = _load_yaml_mapping(Path(config_path).expanduser().resolve())
        config = cls.from_env()
        if "db_path" in payload:
            db_path = _expect_string(payload["db_path"], "db_path")
            config = replace(config, db_path=Path(db_path).expanduser().resolve())
        if "encryption_key" in payload:
            raw_key = payload["encryption_key"]
            key = None if raw_key is None else _expect_string(raw_key, "encryption_key")
            config = replace(config, encryption_key=key or None)
        if "log_level" in payload:
            level = _expect_string(payload["log_level"], "log_level")
            config = replace(config, log_level=_parse_log_level(level, "log_level"))
        return config


def _load_yaml_mapping(config_file: Path) -> Mapping[str, object]:
    """Read and validate the YAML config mapping.

    Args:
        config_file: Resolved config file path.

    Returns:
        Parsed top-level mapping.

    Raises:
        ConfigError: If the file cannot be read or is not a valid mapping.
    """
    if not config_file.exists():
        raise ConfigError(
            f"Config file does not exist at {config_file}. Provide a valid YAML file path."
        )
    try:
        payload = cast(object, yaml.safe_load(config_file.read_text(encoding="utf-8")))
    except OSError as error:
        raise ConfigError(
            f"Failed to read config at {config_file}: {error}. Check file permissions and retry."
        ) from error
    except yaml.YAMLError as error:
        raise ConfigError(
            f"Failed to parse YAML config at {config_file}: {error}. Fix YAML syntax and retry."
        ) from error
    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise ConfigError(
            f"Invalid config at {config_file}: expected a mapping at top level."
        )
    unknown_keys = sorted(str(key) for key in payload if key not in _FILE_KEYS)
    if unknown_keys:
        raise ConfigError(
            f"Unsupported config keys in {config_file}: {', '.join(unknown_keys)}. "
            f"Supported keys: {', '.join(_FILE_KEYS)}."
        )
    return cast(Mapping[str, object], payload)


def _expect_string(value: object, field_name: str) -> str:
    if isinstance(value, str):
        return value
    raise ConfigError(
        f"Invalid config value for {field_name}: expected string, got {type(value).__name__}."
    )


def _parse_log_level(raw_value: str, source: str) -> str:
    """Parse and validate a log level name.

    Args:
        raw_value: Raw level string.
        source: Environment variable or config key the value came from.

    Returns:
        Normalized lower-case level name.

    Raises:
        ConfigError: If the level is not supported.
    """
    level = raw_value.strip().lower()
    if level not in SUPPORTED_LOG_LEVELS:
        raise ConfigError(
            f"Invalid {source} value: expected one of {', '.join(SUPPORTED_LOG_LEVELS)}, "
            f"got '{raw_value}'."
        )
    return level
