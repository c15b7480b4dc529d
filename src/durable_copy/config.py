"""durable-copy configuration.

Config files:
  - Global:  ~/.config/durable-copy/config.json
  - Project: .durable-copy.json (current directory)

Merge order: defaults → global → project → environment variables (highest priority).
"""

from __future__ import annotations

import json
import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict

from .file_io import DEFAULT_BUFFER_SIZE

logger = logging.getLogger(__name__)


class Scope(Enum):
    GLOBAL = "global"
    PROJECT = "project"


def config_dir() -> Path:
    return Path.home() / ".config" / "durable-copy"


def config_path(scope: Scope) -> Path:
    if scope is Scope.PROJECT:
        return Path.cwd() / ".durable-copy.json"
    return config_dir() / "config.json"


def default_config() -> Dict[str, Any]:
    return {
        "source": "source.txt",
        "destination": "destination.txt",
        "buffer_size": DEFAULT_BUFFER_SIZE,
        "debug": False,
        "log_file": str(config_dir() / "durable_copy.log"),
        "log_max_bytes": 1024 * 1024,
        "log_backups": 3,
    }


def _read_json(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    return json.loads(path.read_text(encoding="utf-8"))


# (config key, env var name)
_ENV_OVERRIDES: list[tuple[str, str]] = [
    ("source", "DURABLE_COPY_SOURCE"),
    ("destination", "DURABLE_COPY_DESTINATION"),
    ("buffer_size", "DURABLE_COPY_BUFFER_SIZE"),
    ("debug", "DURABLE_COPY_DEBUG"),
    ("log_file", "DURABLE_COPY_LOG_FILE"),
    ("log_max_bytes", "DURABLE_COPY_LOG_MAX_BYTES"),
    ("log_backups", "DURABLE_COPY_LOG_BACKUPS"),
]

_INT_KEYS = {"buffer_size": 1, "log_max_bytes": 0, "log_backups": 0}  # key -> minimum


def load_config() -> Dict[str, Any]:
    """Load merged config: defaults → global → project → env vars."""
    merged = default_config()
    merged.update(load_raw_config(Scope.GLOBAL))
    merged.update(load_raw_config(Scope.PROJECT))

    # Environment variables override everything
    _apply_env_overrides(merged)

    _normalise(merged)

    return merged


def load_raw_config(scope: Scope) -> Dict[str, Any]:
    """Load config for a specific scope without merge/env overrides."""
    return _read_json(config_path(scope))


def _apply_env_overrides(merged: Dict[str, Any]) -> None:
    for config_key, env_var in _ENV_OVERRIDES:
        val = os.environ.get(env_var)
        if not val:
            continue
        if config_key in _INT_KEYS:
            try:
                merged[config_key] = int(val)
            except ValueError:
                logger.warning("Invalid %s value %r; ignoring", env_var, val)
        elif config_key == "debug":
            merged[config_key] = _as_bool(val)
        else:
            merged[config_key] = val


def _as_bool(val: Any) -> bool:
    if isinstance(val, str):
        return val.lower() == "true"
    return val is True


def _normalise(merged: Dict[str, Any]) -> None:
    """Coerce file-sourced values; JSON gives no guarantee on their types."""
    merged["debug"] = _as_bool(merged["debug"])

    defaults = default_config()
    for key, minimum in _INT_KEYS.items():
        val = merged[key]
        # bool is an int subclass; `true` must not become 1
        if isinstance(val, bool) or not isinstance(val, int) or val < minimum:
            logger.warning("Invalid %s %r; using %d", key, val, defaults[key])
            merged[key] = defaults[key]
