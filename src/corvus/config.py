"""Configuration loading with file and environment variable overrides.

Configuration is a small YAML mapping:

    engine: corvus_wasm.bindings:create_engine
    log_level: INFO

Search order for the file:
    1. An explicit path passed to ``load_config``
    2. The CORVUS_CONFIG environment variable
    3. The user config directory (~/.config/corvus/config.yaml)

Environment Variables:
    CORVUS_CONFIG: Path to a YAML configuration file.
    CORVUS_ENGINE: Engine spec ("module" or "module:factory"); overrides
                   the ``engine`` key of any configuration file.

Example:
    export CORVUS_ENGINE="corvus_wasm.bindings"
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import error_configuration

__all__ = [
    "CORVUS_CONFIG",
    "CORVUS_ENGINE",
    "CorvusConfig",
    "load_config",
    "user_config_path",
]

# Environment variable names
CORVUS_CONFIG = "CORVUS_CONFIG"
CORVUS_ENGINE = "CORVUS_ENGINE"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class CorvusConfig:
    """Settings for creating an engine and wiring up logging."""
    engine: Optional[str] = None
    log_level: str = "WARNING"
    source: Optional[Path] = None

    @property
    def log_level_number(self) -> int:
        return getattr(logging, self.log_level)


def user_config_path() -> Path:
    """Location of the per-user configuration file."""
    if sys.platform == "win32":
        config_base = Path(os.environ.get("APPDATA", "~")).expanduser()
    else:
        config_base = Path.home() / ".config"
    return config_base / "corvus" / "config.yaml"


def _find_config_file(path: Optional[Path]) -> Optional[Path]:
    if path is not None:
        path = Path(path).expanduser()
        if not path.exists():
            raise error_configuration(f"config file not found: {path}")
        return path

    env_path = os.environ.get(CORVUS_CONFIG)
    if env_path:
        path = Path(env_path).expanduser()
        if not path.exists():
            raise error_configuration(f"{CORVUS_CONFIG} points to a missing file: {path}")
        return path

    path = user_config_path()
    if path.is_file():
        return path
    return None


def _load_yaml(path: Path) -> Dict[str, Any]:
    """Load and validate a YAML configuration file."""
    with open(path, 'r', encoding='utf-8') as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise error_configuration(f"invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise error_configuration(f"invalid config format in {path}: expected a mapping at root")

    unknown = set(data) - {"engine", "log_level"}
    if unknown:
        raise error_configuration(f"unknown config keys in {path}: {sorted(unknown)}")
    return data


def load_config(path: Optional[Path] = None) -> CorvusConfig:
    """Load configuration from file and environment."""
    config = CorvusConfig()

    found = _find_config_file(path)
    if found is not None:
        data = _load_yaml(found)
        config.source = found
        if data.get("engine") is not None:
            config.engine = str(data["engine"])
        if data.get("log_level") is not None:
            config.log_level = str(data["log_level"]).upper()

    env_engine = os.environ.get(CORVUS_ENGINE)
    if env_engine:
        config.engine = env_engine

    if config.log_level not in _LOG_LEVELS:
        raise error_configuration(
            f"unknown log level '{config.log_level}' (expected one of {', '.join(_LOG_LEVELS)})"
        )
    return config
