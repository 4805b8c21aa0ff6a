"""Load and validate optional compaction settings from YAML."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from anvilcompact.errors import CompactError

# File looked up in the world root when no --config is given
CONFIG_FILENAME = ".anvilcompact.yaml"

# Default config values
DEFAULTS: dict[str, Any] = {
    "avoid_empty_chunks": True,
    "backup_suffix": ".bak",
    "required_dir": "region",
    "metadata_dirs": ["entities", "poi"],
    "player_data": {
        "enabled": True,
        "file": "level.dat",
    },
}


class ConfigError(CompactError):
    """Raised when config is invalid or missing."""


def _deep_merge(base: dict, override: dict) -> dict:
    """Merge override into base recursively. Override wins on conflicts."""
    result = base.copy()
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _validate(config: dict) -> None:
    """Validate field types in config."""
    if not isinstance(config.get("avoid_empty_chunks"), bool):
        raise ConfigError("'avoid_empty_chunks' must be true or false")

    suffix = config.get("backup_suffix")
    if not isinstance(suffix, str) or not suffix.startswith(".") or len(suffix) < 2:
        raise ConfigError(f"'backup_suffix' must look like '.bak', got {suffix!r}")

    required = config.get("required_dir")
    if not isinstance(required, str) or not required:
        raise ConfigError("'required_dir' must be a directory name")

    metadata_dirs = config.get("metadata_dirs")
    if not isinstance(metadata_dirs, list) or not all(isinstance(d, str) for d in metadata_dirs):
        raise ConfigError("'metadata_dirs' must be a list of directory names")
    if required in metadata_dirs:
        raise ConfigError(f"'{required}' cannot be both the primary and a metadata directory")

    player = config.get("player_data")
    if not isinstance(player, dict):
        raise ConfigError("'player_data' must be a mapping")
    if not isinstance(player.get("enabled"), bool):
        raise ConfigError("'player_data.enabled' must be true or false")
    if not isinstance(player.get("file"), str) or not player["file"]:
        raise ConfigError("'player_data.file' must be a file name")


def load_config(world: Path | None = None, config_path: Path | None = None) -> dict:
    """Load settings, merged over DEFAULTS.

    An explicit ``config_path`` must exist. Otherwise ``<world>/.anvilcompact.yaml``
    is used when present, and plain defaults when not.
    """
    if config_path is not None:
        path = Path(config_path)
        if not path.exists():
            raise ConfigError(f"Config not found: {path}")
    elif world is not None and (Path(world) / CONFIG_FILENAME).exists():
        path = Path(world) / CONFIG_FILENAME
    else:
        return _deep_merge(DEFAULTS, {})

    with open(path) as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Config is not valid YAML: {path}: {exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config must be a YAML mapping, got {type(raw).__name__}")

    config = _deep_merge(DEFAULTS, raw)
    _validate(config)
    return config


def apply_overrides(config: dict, overrides: dict) -> dict:
    """Return a copy of config with command-line overrides merged in."""
    merged = _deep_merge(config, overrides)
    _validate(merged)
    return merged
