"""
Scene event definitions.

Scene events are the commands an external producer (the chat assistant, a
UI button) sends to the view store. They form a closed tagged union on the
``type`` field; the wire format uses camelCase keys.
"""

import time
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

from ..core.types import Point3


class EventData(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FocusComponentData(EventData):
    component_id: str
    component_name: Optional[str] = None


class HighlightComponentsData(EventData):
    component_ids: List[str]
    color: Optional[str] = None
    duration: Optional[int] = None


class ShowPathData(EventData):
    from_component_id: str
    to_component_id: str
    path_type: Optional[Literal["power", "ground", "signal", "data"]] = None


class ShowCircuitData(EventData):
    circuit_name: str
    component_ids: List[str]


class TraceCircuitData(EventData):
    component_id: str


class Rotation(EventData):
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0


class RotateViewData(EventData):
    rotation: Rotation
    animate: bool = True
    duration: Optional[int] = None


class BoundingBox(EventData):
    min: Point3
    max: Point3


class ZoomToAreaData(EventData):
    zone: str
    bounding_box: Optional[BoundingBox] = None


class ResetViewData(EventData):
    animate: bool = True


class ShowConnectionsData(EventData):
    component_id: str
    depth: Optional[int] = None


class CompareComponentsData(EventData):
    component_ids: List[str]
    highlight_differences: bool = False


class GroundPointFilter(EventData):
    zone: Optional[str] = None
    quality: Literal["good", "poor", "all"] = "all"


class ShowGroundPointsData(EventData):
    filter: Optional[GroundPointFilter] = None


class ShowPowerDistributionData(EventData):
    from_component: Optional[str] = None
    max_depth: Optional[int] = None


class AnimateSignalFlowData(EventData):
    path: List[str]
    speed: float = 1.0
    color: Optional[str] = None


class MarkComponentFaultyData(EventData):
    component_ids: List[str]
    reason: Optional[str] = None


class MarkComponentHealthyData(EventData):
    component_ids: List[str]


class SceneEventBase(BaseModel):
    description: Optional[str] = None
    timestamp: float = Field(default_factory=time.time)


class FocusComponentEvent(SceneEventBase):
    type: Literal["focus_component"] = "focus_component"
    data: FocusComponentData


class HighlightComponentsEvent(SceneEventBase):
    type: Literal["highlight_components"] = "highlight_components"
    data: HighlightComponentsData


class ShowPathEvent(SceneEventBase):
    type: Literal["show_path"] = "show_path"
    data: ShowPathData


class ShowCircuitEvent(SceneEventBase):
    type: Literal["show_circuit"] = "show_circuit"
    data: ShowCircuitData


class TraceCircuitEvent(SceneEventBase):
    type: Literal["trace_circuit"] = "trace_circuit"
    data: TraceCircuitData


class RotateViewEvent(SceneEventBase):
    type: Literal["rotate_view"] = "rotate_view"
    data: RotateViewData


class ZoomToAreaEvent(SceneEventBase):
    type: Literal["zoom_to_area"] = "zoom_to_area"
    data: ZoomToAreaData


class ResetViewEvent(SceneEventBase):
    type: Literal["reset_view"] = "reset_view"
    data: ResetViewData = Field(default_factory=ResetViewData)


class ShowConnectionsEvent(SceneEventBase):
    type: Literal["show_connections"] = "show_connections"
    data: ShowConnectionsData


class CompareComponentsEvent(SceneEventBase):
    type: Literal["compare_components"] = "compare_components"
    data: CompareComponentsData


class ShowGroundPointsEvent(SceneEventBase):
    type: Literal["show_ground_points"] = "show_ground_points"
    data: ShowGroundPointsData = Field(default_factory=ShowGroundPointsData)


class ShowPowerDistributionEvent(SceneEventBase):
    type: Literal["show_power_distribution"] = "show_power_distribution"
    data: ShowPowerDistributionData = Field(default_factory=ShowPowerDistributionData)


class AnimateSignalFlowEvent(SceneEventBase):
    type: Literal["animate_signal_flow"] = "animate_signal_flow"
    data: AnimateSignalFlowData


class MarkComponentFaultyEvent(SceneEventBase):
    type: Literal["mark_component_faulty"] = "mark_component_faulty"
    data: MarkComponentFaultyData


class MarkComponentHealthyEvent(SceneEventBase):
    type: Literal["mark_component_healthy"] = "mark_component_healthy"
    data: MarkComponentHealthyData


SceneEvent = Annotated[
    Union[
        FocusComponentEvent,
        HighlightComponentsEvent,
        ShowPathEvent,
        ShowCircuitEvent,
        TraceCircuitEvent,
        RotateViewEvent,
        ZoomToAreaEvent,
        ResetViewEvent,
        ShowConnectionsEvent,
        CompareComponentsEvent,
        ShowGroundPointsEvent,
        ShowPowerDistributionEvent,
        AnimateSignalFlowEvent,
        MarkComponentFaultyEvent,
        MarkComponentHealthyEvent,
    ],
    Field(discriminator="type"),
]

SCENE_EVENT_ADAPTER: TypeAdapter[SceneEvent] = TypeAdapter(SceneEvent)

# Event types whose handlers read the wiring model
GRAPH_EVENT_TYPES = frozenset({
    "show_path",
    "trace_circuit",
    "zoom_to_area",
    "show_connections",
    "show_power_distribution",
})


def parse_event(raw: dict) -> SceneEvent:
    """
    Validate a raw event mapping into its concrete event model.

    Raises:
        pydantic.ValidationError: Unknown ``type`` or malformed ``data``.
    """
    return SCENE_EVENT_ADAPTER.validate_python(raw)
