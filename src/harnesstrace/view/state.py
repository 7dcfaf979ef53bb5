"""
View state models.

Everything the rendering layer observes lives in one ViewState owned by the
ViewStore; there is no module-level mutable state.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..config import DEFAULT_CAMERA_FOV, DEFAULT_CAMERA_POSITION, DEFAULT_CAMERA_TARGET
from ..core.types import Node, NodeType, Point3


class CameraView(BaseModel):
    position: Point3 = DEFAULT_CAMERA_POSITION
    target: Point3 = DEFAULT_CAMERA_TARGET
    fov: float = DEFAULT_CAMERA_FOV


class ModelRotation(BaseModel):
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


class VehicleComponent(BaseModel):
    """A renderable component, derived from a positioned node."""
    id: str
    name: str
    type: NodeType = NodeType.OTHER
    position: Optional[Point3] = None
    zone: Optional[str] = None
    specifications: Dict[str, Any] = Field(default_factory=dict)
    faulty: bool = False
    fault_reason: Optional[str] = None

    @classmethod
    def from_node(cls, node: Node) -> "VehicleComponent":
        return cls(
            id=node.id,
            name=node.label,
            type=node.node_type,
            position=node.anchor_xyz,
            zone=node.anchor_zone,
            specifications=dict(node.attributes),
        )


class EventQueue(BaseModel):
    """FIFO cursor over queued scene events. Advanced by the caller."""
    events: List[Any] = Field(default_factory=list)
    current_index: int = 0
    is_playing: bool = False

    @property
    def remaining(self) -> int:
        return max(0, len(self.events) - self.current_index)


class ViewState(BaseModel):
    components: List[VehicleComponent] = Field(default_factory=list)

    camera_view: CameraView = Field(default_factory=CameraView)
    model_rotation: ModelRotation = Field(default_factory=ModelRotation)
    selected_component_id: Optional[str] = None
    hovered_component_id: Optional[str] = None
    highlighted_component_ids: List[str] = Field(default_factory=list)
    # Ordered source -> ground sequence used for wire generation
    current_circuit_path: List[str] = Field(default_factory=list)

    show_chassis: bool = True
    show_effects: bool = True
    show_models: bool = True

    ai_control_enabled: bool = True
    current_focus: Optional[str] = None

    event_queue: EventQueue = Field(default_factory=EventQueue)
    last_executed_event: Optional[Any] = None

    @property
    def faulty_component_ids(self) -> List[str]:
        return [c.id for c in self.components if c.faulty]
