"""
View state store.

The ViewStore owns the loaded model and every piece of observable view
state. Scene events are routed by their ``type`` tag to one handler each;
graph events call into the tracer and query helpers, everything else is a
direct state mutation. Listeners are notified after every change.
"""

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from pydantic import ValidationError

from ..analysis.circuit import trace
from ..analysis.queries import connections_of, nodes_in_zone, nodes_of_type, shortest_path
from ..config import DEFAULT_POWER_DEPTH, MIN_FOCUS_DISTANCE, Settings
from ..core.exceptions import ModelNotLoadedError
from ..core.model import ParsedModel
from ..core.types import NodeType, Point3, TracedCircuit
from . import events as ev
from .state import CameraView, EventQueue, ModelRotation, VehicleComponent, ViewState

logger = logging.getLogger(__name__)

Listener = Callable[[ViewState], None]
EventInput = Union[ev.SceneEvent, Dict[str, Any]]


def focus_camera(position: Point3, bbox: Optional[Sequence[float]] = None) -> CameraView:
    """Camera pose looking at ``position`` from a distance scaled to the bbox."""
    distance = MIN_FOCUS_DISTANCE
    if bbox:
        try:
            distance = max(MIN_FOCUS_DISTANCE, 3 * max(float(side) for side in bbox))
        except (TypeError, ValueError):
            logger.debug(f"Ignoring malformed bbox {bbox!r}")
    x, y, z = position
    return CameraView(
        position=(x + distance, y + distance * 2 / 3, z + distance),
        target=(x, y, z),
    )


class ViewStore:
    """
    Single owner of view state.

    Example:
        store = ViewStore()
        store.set_model(load_model("harness.ndjson"))
        store.execute({"type": "trace_circuit", "data": {"componentId": "W1"}})
        store.state.highlighted_component_ids
    """

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or Settings()
        self.model: Optional[ParsedModel] = None
        self.state = ViewState()
        self._listeners: List[Listener] = []

        self._handlers: Dict[str, Callable[[Any], None]] = {
            "focus_component": self._on_focus_component,
            "highlight_components": self._on_highlight_components,
            "show_path": self._on_show_path,
            "show_circuit": self._on_show_circuit,
            "trace_circuit": self._on_trace_circuit,
            "rotate_view": self._on_rotate_view,
            "zoom_to_area": self._on_zoom_to_area,
            "reset_view": self._on_reset_view,
            "show_connections": self._on_show_connections,
            "compare_components": self._on_compare_components,
            "show_ground_points": self._on_show_ground_points,
            "show_power_distribution": self._on_show_power_distribution,
            "animate_signal_flow": self._on_animate_signal_flow,
            "mark_component_faulty": self._on_mark_faulty,
            "mark_component_healthy": self._on_mark_healthy,
        }

    # --- Observation ---

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self.state)

    # --- Model lifecycle ---

    def set_model(self, model: Optional[ParsedModel]) -> None:
        """
        Replace the loaded model.

        Components are rebuilt from the positioned nodes, and highlight and
        circuit state from the previous model is dropped.
        """
        self.model = model
        nodes = model.nodes_by_id.values() if model is not None else []
        self.state.components = [VehicleComponent.from_node(n) for n in nodes if n.is_positioned]
        self.state.highlighted_component_ids = []
        self.state.current_circuit_path = []
        self.state.selected_component_id = None
        self.state.hovered_component_id = None
        if model is not None:
            logger.info(f"Loaded model: {len(model.nodes_by_id)} nodes, "
                        f"{len(self.state.components)} positioned")
        self._notify()

    def clear_model(self) -> None:
        self.set_model(None)

    @property
    def has_model(self) -> bool:
        return self.model is not None and not self.model.is_empty

    def _require_model(self, operation: str) -> ParsedModel:
        if not self.has_model:
            raise ModelNotLoadedError(operation)
        return self.model

    def get_component(self, component_id: str) -> Optional[VehicleComponent]:
        for component in self.state.components:
            if component.id == component_id:
                return component
        return None

    # --- Direct setters ---

    def set_selected(self, component_id: Optional[str]) -> None:
        self.state.selected_component_id = component_id
        self._notify()

    def set_hovered(self, component_id: Optional[str]) -> None:
        self.state.hovered_component_id = component_id
        self._notify()

    def set_highlighted(self, component_ids: Sequence[str]) -> None:
        self.state.highlighted_component_ids = list(component_ids)
        self._notify()

    def set_current_circuit_path(self, path: Sequence[str]) -> None:
        self.state.current_circuit_path = list(path)
        self._notify()

    def set_camera_view(self, view: CameraView) -> None:
        self.state.camera_view = view
        self._notify()

    def set_model_rotation(self, rotation: ModelRotation) -> None:
        self.state.model_rotation = rotation
        self._notify()

    def set_visibility(
        self,
        chassis: Optional[bool] = None,
        effects: Optional[bool] = None,
        models: Optional[bool] = None,
    ) -> None:
        if chassis is not None:
            self.state.show_chassis = chassis
        if effects is not None:
            self.state.show_effects = effects
        if models is not None:
            self.state.show_models = models
        self._notify()

    def set_ai_control_enabled(self, enabled: bool) -> None:
        self.state.ai_control_enabled = enabled
        self._notify()

    def set_current_focus(self, component_id: Optional[str]) -> None:
        self.state.current_focus = component_id
        self._notify()

    # --- View operations ---

    def focus_on_component(self, component_id: str) -> bool:
        """
        Point the camera at a component and select it.

        Returns False, leaving state untouched, when the component is unknown
        or has no position.
        """
        component = self.get_component(component_id)
        if component is None or component.position is None:
            logger.debug(f"Cannot focus {component_id}: unknown or unpositioned")
            return False

        self.state.camera_view = focus_camera(
            component.position, component.specifications.get("bbox_m")
        )
        self.state.selected_component_id = component_id
        self.state.current_focus = component_id
        self._notify()
        return True

    def reset_view(self) -> None:
        self._reset()
        self._notify()

    def _reset(self) -> None:
        self.state.camera_view = CameraView()
        self.state.model_rotation = ModelRotation()
        self.state.selected_component_id = None
        self.state.hovered_component_id = None
        self.state.highlighted_component_ids = []
        self.state.current_circuit_path = []
        self.state.current_focus = None

    def trace_component(self, component_id: str) -> TracedCircuit:
        """
        Click-to-trace: trace a circuit and highlight it.

        Raises:
            ModelNotLoadedError: No model is loaded.
        """
        result = self._apply_trace(component_id)
        self._notify()
        return result

    def _apply_trace(self, component_id: str) -> TracedCircuit:
        model = self._require_model("trace_circuit")
        result = trace(model, component_id, max_hops=self.settings.trace.max_hops)
        self.state.highlighted_component_ids = list(result.all_highlighted)
        self.state.current_circuit_path = list(result.complete_circuit)
        self.state.selected_component_id = component_id if not result.is_empty else None
        return result

    # --- Event dispatch ---

    def execute(self, event: EventInput) -> bool:
        """
        Apply one scene event.

        Unknown or malformed events, and graph events arriving before a model
        is loaded, are logged and leave state untouched. Returns True when the
        event was applied.
        """
        if isinstance(event, dict):
            event_type = event.get("type")
            if event_type not in self._handlers:
                logger.warning(f"Unknown event type: {event_type}")
                return False
            try:
                event = ev.parse_event(event)
            except ValidationError as e:
                logger.warning(f"Invalid '{event_type}' event: {e.error_count()} validation error(s)")
                return False

        event_type = getattr(event, "type", None)
        handler = self._handlers.get(event_type)
        if handler is None:
            logger.warning(f"Unknown event type: {event_type}")
            return False

        if event_type in ev.GRAPH_EVENT_TYPES and not self.has_model:
            logger.warning(str(ModelNotLoadedError(event_type)))
            return False

        handler(event.data)

        self.state.last_executed_event = event
        self._notify()
        return True

    # --- Event queue ---

    def queue_events(self, events: Sequence[EventInput]) -> None:
        """Replace the queue. Playback is driven by calling play_next_event."""
        self.state.event_queue = EventQueue(events=list(events), is_playing=bool(events))
        self._notify()

    def play_next_event(self) -> bool:
        """Execute the event under the cursor and advance. False when exhausted."""
        queue = self.state.event_queue
        if queue.current_index >= len(queue.events):
            return False

        event = queue.events[queue.current_index]
        self.execute(event)
        queue.current_index += 1
        queue.is_playing = queue.current_index < len(queue.events)
        self._notify()
        return True

    def clear_event_queue(self) -> None:
        self.state.event_queue = EventQueue()
        self._notify()

    # --- Handlers ---

    def _on_focus_component(self, data: ev.FocusComponentData) -> None:
        self.focus_on_component(data.component_id)

    def _on_highlight_components(self, data: ev.HighlightComponentsData) -> None:
        self.state.highlighted_component_ids = list(data.component_ids)
        self.state.current_circuit_path = []

    def _on_show_path(self, data: ev.ShowPathData) -> None:
        model = self._require_model("show_path")
        path = shortest_path(
            model,
            data.from_component_id,
            data.to_component_id,
            max_hops=self.settings.path.max_hops,
        )
        if not path:
            logger.info(f"No path between {data.from_component_id} and {data.to_component_id}")
            self.state.highlighted_component_ids = [
                i for i in (data.from_component_id, data.to_component_id) if model.has_node(i)
            ]
            self.state.current_circuit_path = []
            return
        self.state.highlighted_component_ids = path
        self.state.current_circuit_path = list(path)

    def _on_show_circuit(self, data: ev.ShowCircuitData) -> None:
        self.state.highlighted_component_ids = list(data.component_ids)
        self.state.current_circuit_path = list(data.component_ids)

    def _on_trace_circuit(self, data: ev.TraceCircuitData) -> None:
        self._apply_trace(data.component_id)

    def _on_rotate_view(self, data: ev.RotateViewData) -> None:
        rotation = data.rotation
        self.state.model_rotation = ModelRotation(x=rotation.x, y=rotation.y, z=rotation.z)

    def _on_zoom_to_area(self, data: ev.ZoomToAreaData) -> None:
        model = self._require_model("zoom_to_area")
        nodes = nodes_in_zone(model, data.zone)
        self.state.highlighted_component_ids = [n.id for n in nodes]
        self.state.current_circuit_path = []

        if data.bounding_box is not None:
            lo, hi = data.bounding_box.min, data.bounding_box.max
        else:
            points = [n.anchor_xyz for n in nodes if n.anchor_xyz is not None]
            if not points:
                return
            lo = tuple(min(p[i] for p in points) for i in range(3))
            hi = tuple(max(p[i] for p in points) for i in range(3))

        center = tuple((lo[i] + hi[i]) / 2 for i in range(3))
        extent = max(hi[i] - lo[i] for i in range(3))
        self.state.camera_view = focus_camera(center, [extent / 2])

    def _on_reset_view(self, data: ev.ResetViewData) -> None:
        self._reset()

    def _on_show_connections(self, data: ev.ShowConnectionsData) -> None:
        model = self._require_model("show_connections")
        depth = data.depth if data.depth is not None else self.settings.connections.default_depth
        reached = connections_of(model, data.component_id, depth=depth)
        self.state.highlighted_component_ids = [data.component_id] + reached
        self.state.current_circuit_path = []
        self.state.selected_component_id = data.component_id

    def _on_compare_components(self, data: ev.CompareComponentsData) -> None:
        self.state.highlighted_component_ids = list(data.component_ids)
        self.state.current_circuit_path = []

    def _on_show_ground_points(self, data: ev.ShowGroundPointsData) -> None:
        flt = data.filter or ev.GroundPointFilter()
        grounds = [c for c in self.state.components if c.type.is_ground]
        if flt.zone:
            grounds = [c for c in grounds if c.zone == flt.zone]
        if flt.quality != "all":
            grounds = [c for c in grounds if c.specifications.get("quality", flt.quality) == flt.quality]
        self.state.highlighted_component_ids = [c.id for c in grounds]
        self.state.current_circuit_path = []

    def _on_show_power_distribution(self, data: ev.ShowPowerDistributionData) -> None:
        model = self._require_model("show_power_distribution")
        origin = data.from_component
        if origin is None:
            sources = nodes_of_type(model, NodeType.BATTERY) or nodes_of_type(model, NodeType.FUSE)
            if not sources:
                logger.info("No battery or fuse to start power distribution from")
                return
            origin = sources[0].id
        depth = data.max_depth if data.max_depth is not None else DEFAULT_POWER_DEPTH
        reached = connections_of(model, origin, depth=depth, electrical_only=True)
        self.state.highlighted_component_ids = [origin] + reached
        self.state.current_circuit_path = []
        self.state.selected_component_id = origin

    def _on_animate_signal_flow(self, data: ev.AnimateSignalFlowData) -> None:
        self.state.highlighted_component_ids = list(data.path)
        self.state.current_circuit_path = list(data.path)

    def _on_mark_faulty(self, data: ev.MarkComponentFaultyData) -> None:
        targets = set(data.component_ids)
        for component in self.state.components:
            if component.id in targets:
                component.faulty = True
                component.fault_reason = data.reason
        self.state.highlighted_component_ids = list(data.component_ids)

    def _on_mark_healthy(self, data: ev.MarkComponentHealthyData) -> None:
        targets = set(data.component_ids)
        for component in self.state.components:
            if component.id in targets:
                component.faulty = False
                component.fault_reason = None
