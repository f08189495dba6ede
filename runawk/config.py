"""Launcher configuration.

Settings that select the wrapped interpreter and where scratch scripts
are written. Loaded from a YAML mapping; every key is optional.

Example /etc/runawk.yaml:

    interpreter: /usr/bin/gawk
    temp_dir: /var/tmp
    log_level: DEBUG

Dual-binary setups such as busybox pass the applet name as the first
argument:

    interpreter: /bin/busybox
    alt_name: awk
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

DEFAULT_CONFIG_PATH = Path("/etc/runawk.yaml")
DEFAULT_TEMP_DIR = Path("/tmp")


class ConfigError(Exception):
    """Launcher configuration is invalid."""

    pass


class LauncherConfig(BaseModel):
    """Settings for one launcher invocation."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    interpreter: str = "gawk"
    alt_name: str | None = None
    temp_dir: Path = DEFAULT_TEMP_DIR
    temp_prefix: str = "runawk."
    log_level: str = "WARNING"

    @field_validator("interpreter")
    @classmethod
    def _interpreter_not_empty(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("interpreter cannot be empty")
        return value

    @field_validator("temp_prefix")
    @classmethod
    def _prefix_is_a_name(cls, value: str) -> str:
        if "/" in value or "\x00" in value:
            raise ValueError("temp_prefix must not contain path separators")
        return value

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level: {value}")
        return level


def _load_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e.strerror}")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping in {path}, got {type(data).__name__}")
    return data


def load_config(path: str | Path | None = None) -> LauncherConfig:
    """Load configuration from `path`.

    With no path, DEFAULT_CONFIG_PATH is used when it exists; otherwise
    the built-in defaults apply.

    Raises:
        ConfigError: If the file is unreadable, not a YAML mapping, or
            holds unknown or invalid settings.
    """
    if path is None:
        if not DEFAULT_CONFIG_PATH.is_file():
            return LauncherConfig()
        path = DEFAULT_CONFIG_PATH

    path = Path(path)
    data = _load_yaml(path)
    try:
        return LauncherConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}")
