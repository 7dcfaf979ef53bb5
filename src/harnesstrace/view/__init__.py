"""
View state for the 3D viewer: scene events and the store that applies them.
"""

from .events import SceneEvent, parse_event
from .state import ViewState
from .store import ViewStore

__all__ = ["SceneEvent", "parse_event", "ViewState", "ViewStore"]
