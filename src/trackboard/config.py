"""Configuration loading for Trackboard.

Settings come from an optional YAML file, then ``TRACKBOARD_*`` environment
variables override individual values.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

DEFAULT_CONFIG_FILE = "trackboard.yaml"

# Environment variable -> Settings field
ENV_OVERRIDES = {
    "TRACKBOARD_DB_PATH": "db_path",
    "TRACKBOARD_API_URL": "api_url",
    "TRACKBOARD_API_TOKEN": "api_token",
    "TRACKBOARD_HOST": "host",
    "TRACKBOARD_PORT": "port",
    "TRACKBOARD_ACTIVATION_DISTANCE": "activation_distance",
    "TRACKBOARD_REQUEST_TIMEOUT": "request_timeout",
    "TRACKBOARD_LOG_LEVEL": "log_level",
}


class ConfigError(Exception):
    """Raised when configuration is invalid."""


@dataclass
class Settings:
    """Runtime settings shared by the server, the client and the board."""

    db_path: str = "trackboard.db"
    api_url: str = "http://127.0.0.1:8000/api/v1"
    api_token: str | None = None
    host: str = "127.0.0.1"
    port: int = 8000
    activation_distance: float = 5.0
    request_timeout: float = 30.0
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Settings:
        """Create settings from a dictionary, coercing values to field types.

        Raises:
            ConfigError: If a key is unknown or a value has the wrong type.
        """
        known = {f.name: f for f in fields(cls)}
        unknown = sorted(set(data) - set(known))
        if unknown:
            raise ConfigError(f"Unknown settings: {', '.join(unknown)}")

        values: dict[str, Any] = {}
        for name, raw in data.items():
            values[name] = _coerce(name, raw, known[name].default)
        return cls(**values)


def _coerce(name: str, raw: Any, default: Any) -> Any:
    if raw is None:
        return None
    try:
        if isinstance(default, bool):
            return str(raw).lower() in ("1", "true", "yes")
        if isinstance(default, int):
            return int(raw)
        if isinstance(default, float):
            return float(raw)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value for '{name}': {raw!r}") from e
    return str(raw)


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from YAML (if present) and apply environment overrides.

    Args:
        config_path: Path to a YAML file. When None, ``trackboard.yaml`` in the
            current directory is used if it exists.

    Returns:
        Parsed settings.

    Raises:
        ConfigError: If an explicit file is missing or any file is invalid.
    """
    data: dict[str, Any] = {}

    if config_path is None:
        candidate = Path.cwd() / DEFAULT_CONFIG_FILE
        path = candidate if candidate.exists() else None
    else:
        path = Path(config_path)
        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

    if path is not None:
        try:
            with open(path) as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError(f"Configuration must be a YAML mapping, got {type(loaded).__name__}")
        data.update(loaded)

    for env_name, field_name in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value is not None:
            data[field_name] = value

    return Settings.from_dict(data)
