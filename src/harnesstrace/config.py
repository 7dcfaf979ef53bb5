"""
Global Configuration and Safety Defaults.

Centralizes the bounds that keep graph walks finite on malformed or cyclic
data, plus the optional per-project overrides read from
``.harnesstrace/config.yaml``.
"""

import logging
from pathlib import Path
from typing import Tuple

import yaml
from pydantic import BaseModel, Field, ValidationError

from .core.exceptions import LoadError

logger = logging.getLogger(__name__)

# --- Walk Bounds ---
# Maximum edge traversals for each leg of a circuit trace
DEFAULT_MAX_HOPS = 15

# Maximum edge traversals for the show-path shortest path search
DEFAULT_PATH_MAX_HOPS = 15

# Depth used by show_connections when the command does not specify one
DEFAULT_CONNECTION_DEPTH = 1

# Depth used by show_power_distribution when the command does not specify one
DEFAULT_POWER_DEPTH = 2

# --- Camera ---
DEFAULT_CAMERA_POSITION: Tuple[float, float, float] = (2.0, 1.5, 2.0)
DEFAULT_CAMERA_TARGET: Tuple[float, float, float] = (0.0, 0.5, 0.0)
DEFAULT_CAMERA_FOV = 60.0

# Closest the camera may sit to a focused component, in metres
MIN_FOCUS_DISTANCE = 1.5

DEFAULT_CONFIG_PATH = Path(".harnesstrace/config.yaml")


class TraceSettings(BaseModel):
    max_hops: int = Field(default=DEFAULT_MAX_HOPS, ge=1)


class PathSettings(BaseModel):
    max_hops: int = Field(default=DEFAULT_PATH_MAX_HOPS, ge=1)


class ConnectionSettings(BaseModel):
    default_depth: int = Field(default=DEFAULT_CONNECTION_DEPTH, ge=0)


class Settings(BaseModel):
    """Project settings. Every field has a safe default."""

    trace: TraceSettings = Field(default_factory=TraceSettings)
    path: PathSettings = Field(default_factory=PathSettings)
    connections: ConnectionSettings = Field(default_factory=ConnectionSettings)


def load_settings(config_path: Path | None = None) -> Settings:
    """
    Load settings from a YAML file.

    A missing file yields the defaults. Unreadable YAML or values that fail
    validation raise LoadError.
    """
    path = config_path or DEFAULT_CONFIG_PATH
    if not path.exists():
        return Settings()

    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise LoadError(str(path), str(e)) from e

    if not isinstance(data, dict):
        raise LoadError(str(path), "config root must be a mapping")

    try:
        settings = Settings.model_validate(data)
    except ValidationError as e:
        raise LoadError(str(path), f"invalid settings: {e.error_count()} error(s)") from e

    logger.debug(f"Loaded settings from {path}")
    return settings
