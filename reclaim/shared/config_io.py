"""Configuration I/O utilities for reading and writing TOML config files.

This module handles serialization/deserialization of RunConfig to/from TOML.
The config file holds a single [run] table whose keys are RunConfig fields.
"""

import logging
import os
import platform
import tomllib  # Built-in Python 3.11+
from dataclasses import asdict
from pathlib import Path
from typing import Any

import tomli_w

from reclaim.domain.config import RunConfig

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "RECLAIM_CONFIG"
RUN_SECTION = "run"


def get_global_config_path() -> Path:
    """Get the path to the config file.

    The location is platform-dependent:
    - $RECLAIM_CONFIG if set (any platform)
    - Linux/macOS: $XDG_CONFIG_HOME/reclaim/config.toml or ~/.config/reclaim/config.toml
    - Windows: %APPDATA%/reclaim/config.toml

    Returns:
        Path to the config file (may not exist)
    """
    override = os.environ.get(CONFIG_ENV_VAR, "")
    if override:
        return Path(override)

    if platform.system() == "Windows":
        appdata = os.environ.get("APPDATA", "")
        if appdata:
            return Path(appdata) / "reclaim" / "config.toml"
        # Fallback to home directory
        return Path.home() / ".config" / "reclaim" / "config.toml"
    else:
        xdg_config = os.environ.get("XDG_CONFIG_HOME", "")
        if xdg_config:
            return Path(xdg_config) / "reclaim" / "config.toml"
        return Path.home() / ".config" / "reclaim" / "config.toml"


def load_config_data(path: Path) -> dict[str, Any]:
    """Load raw TOML data from a config file.

    Args:
        path: Path to config.toml file

    Returns:
        Dictionary with parsed TOML data

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is malformed
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in config file: {e}") from e


def config_data_to_run_config(data: dict[str, Any]) -> RunConfig:
    """Convert raw config data to RunConfig.

    Unknown keys in the [run] table are logged and ignored.

    Args:
        data: Dictionary with config sections

    Returns:
        RunConfig instance

    Raises:
        ValueError: If [run] is not a table or a value fails validation
    """
    run_data = data.get(RUN_SECTION, {})
    if not isinstance(run_data, dict):
        raise ValueError(f"[{RUN_SECTION}] must be a table")

    known = set(RunConfig.field_names())
    unknown = sorted(set(run_data) - known)
    if unknown:
        logger.warning("Ignoring unknown config keys: %s", ", ".join(unknown))

    return RunConfig(**{k: v for k, v in run_data.items() if k in known})


def load_config(path: Path) -> RunConfig:
    """Load configuration from a TOML file.

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config file is malformed
    """
    return config_data_to_run_config(load_config_data(path))


def save_config(config: RunConfig, path: Path) -> None:
    """Save configuration to a TOML file.

    Args:
        config: RunConfig to save
        path: Destination path for config.toml
    """
    data: dict[str, Any] = {RUN_SECTION: asdict(config)}

    # Ensure parent directory exists
    path.parent.mkdir(parents=True, exist_ok=True)

    with path.open("wb") as f:
        tomli_w.dump(data, f)
