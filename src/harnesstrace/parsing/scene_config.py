"""
Scene configuration loader.

The scene configuration describes physical harness bundles as named 3D
polylines. The graph engine never traverses harnesses; this module only
validates the document for the rendering layer.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..core.exceptions import LoadError
from ..core.types import Point3
from .sources import read_text

logger = logging.getLogger(__name__)


class HarnessBundle(BaseModel):
    path: List[Point3]
    thickness: float = Field(gt=0)
    bundle_count: int = Field(default=1, alias="bundleCount", ge=1)

    model_config = ConfigDict(populate_by_name=True)


class SceneConfig(BaseModel):
    harnesses: Dict[str, HarnessBundle] = Field(default_factory=dict)
    materials: Dict[str, Dict[str, Any]] = Field(default_factory=dict)


def parse_scene_config(data: Dict[str, Any]) -> SceneConfig:
    """
    Validate a scene configuration mapping.

    Individual harnesses that fail validation, or have fewer than two path
    points, are dropped with a warning instead of failing the whole document.
    """
    raw_harnesses = data.get("harnesses") or {}
    if not isinstance(raw_harnesses, dict):
        logger.warning("Ignoring non-mapping 'harnesses' section")
        raw_harnesses = {}

    harnesses: Dict[str, HarnessBundle] = {}
    for name, raw in raw_harnesses.items():
        try:
            bundle = HarnessBundle.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Skipping harness '{name}': {e.error_count()} validation error(s)")
            continue
        if len(bundle.path) < 2:
            logger.warning(f"Skipping harness '{name}': path needs at least two points")
            continue
        harnesses[name] = bundle

    materials = data.get("materials") or {}
    if not isinstance(materials, dict):
        logger.warning("Ignoring non-mapping 'materials' section")
        materials = {}

    return SceneConfig(harnesses=harnesses, materials=materials)


def load_scene_config(location: Union[str, Path]) -> SceneConfig:
    """
    Read and validate a scene configuration from a path or URL.

    Raises:
        LoadError: The document could not be read or is not a JSON object.
    """
    text = read_text(location)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise LoadError(str(location), f"invalid JSON ({e.msg})") from e
    if not isinstance(data, dict):
        raise LoadError(str(location), "scene config must be a JSON object")
    return parse_scene_config(data)
