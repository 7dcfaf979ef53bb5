"""
Input parsing for harnesstrace.

- ndjson: wiring model records (nodes, edges, metadata)
- scene_config: harness bundle geometry for the renderer
"""

from .ndjson import load_model, parse
from .scene_config import SceneConfig, load_scene_config, parse_scene_config

__all__ = ["parse", "load_model", "SceneConfig", "load_scene_config", "parse_scene_config"]
