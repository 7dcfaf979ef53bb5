"""Unit tests for the view state store."""

import logging

import pytest

from harnesstrace.config import Settings
from harnesstrace.core.model import ParsedModel
from harnesstrace.view.events import GRAPH_EVENT_TYPES, HighlightComponentsEvent, ResetViewEvent
from harnesstrace.view.state import CameraView, ModelRotation, VehicleComponent
from harnesstrace.view.store import ViewStore, focus_camera


@pytest.fixture
def store():
    return ViewStore()


@pytest.fixture
def loaded(harness):
    store = ViewStore()
    store.set_model(harness)
    return store


def _event(type_, **data):
    return {"type": type_, "data": data}


MODEL_EVENTS = [
    _event("show_path", fromComponentId="A", toComponentId="B"),
    _event("trace_circuit", componentId="A"),
    _event("zoom_to_area", zone="engine_bay"),
    _event("show_connections", componentId="A"),
    {"type": "show_power_distribution"},
]


class TestModelLifecycle:
    def test_components_come_from_positioned_nodes(self, loaded):
        ids = [c.id for c in loaded.state.components]
        assert ids == ["BATT", "W0", "F1", "L1", "G1", "GP", "M1", "C1"]
        fuse = loaded.get_component("F1")
        assert fuse.name == "FUSE_HEADLAMP"
        assert fuse.specifications["bbox_m"] == [0.02, 0.01, 0.03]

    def test_new_model_clears_highlight(self, loaded, scenario_a):
        loaded.set_highlighted(["L1"])
        loaded.set_model(scenario_a)
        assert loaded.state.highlighted_component_ids == []
        assert loaded.state.components == []

    def test_clear_model(self, loaded):
        loaded.clear_model()
        assert loaded.model is None
        assert loaded.state.components == []


class TestDirectState:
    def test_setters(self, store):
        store.set_ai_control_enabled(False)
        store.set_current_focus("comp-1")
        store.set_current_circuit_path(["a", "b"])
        store.set_visibility(chassis=False)

        assert store.state.ai_control_enabled is False
        assert store.state.current_focus == "comp-1"
        assert store.state.current_circuit_path == ["a", "b"]
        assert store.state.show_chassis is False
        assert store.state.show_models is True

    def test_focus_on_component(self, loaded):
        assert loaded.focus_on_component("F1")
        view = loaded.state.camera_view
        assert view.target == (0.3, 0.8, 0.5)
        # Small bbox: the minimum distance applies
        assert view.position == pytest.approx((1.8, 1.8, 2.0))
        assert loaded.state.selected_component_id == "F1"
        assert loaded.state.current_focus == "F1"

    def test_focus_unknown_or_unpositioned(self, loaded):
        assert not loaded.focus_on_component("NOPE")
        assert not loaded.focus_on_component("W1")
        assert loaded.state.selected_component_id is None

    def test_focus_distance_scales_with_bbox(self):
        view = focus_camera((0.0, 0.0, 1.0), [1.0, 0.2, 0.5])
        assert view.position == pytest.approx((3.0, 2.0, 4.0))

    def test_reset_view(self, loaded):
        loaded.set_camera_view(CameraView(position=(5, 5, 5), target=(1, 1, 1), fov=45))
        loaded.set_model_rotation(ModelRotation(x=45, y=90, z=180))
        loaded.set_selected("F1")
        loaded.set_hovered("L1")
        loaded.set_highlighted(["F1", "L1"])
        loaded.set_current_circuit_path(["F1", "L1"])
        loaded.set_current_focus("F1")

        loaded.reset_view()

        state = loaded.state
        assert state.camera_view == CameraView(position=(2, 1.5, 2), target=(0, 0.5, 0), fov=60)
        assert state.model_rotation == ModelRotation()
        assert state.selected_component_id is None
        assert state.hovered_component_id is None
        assert state.highlighted_component_ids == []
        assert state.current_circuit_path == []
        assert state.current_focus is None

    def test_trace_component(self, loaded):
        result = loaded.trace_component("L1")
        assert loaded.state.highlighted_component_ids == result.all_highlighted
        assert loaded.state.current_circuit_path == ["BATT", "W0", "F1", "W1", "L1", "G1"]
        assert loaded.state.selected_component_id == "L1"

    def test_trace_component_without_model(self, store):
        from harnesstrace.core.exceptions import ModelNotLoadedError
        with pytest.raises(ModelNotLoadedError):
            store.trace_component("L1")


class TestExecute:
    def test_focus_component(self, loaded):
        event = _event("focus_component", componentId="L1")
        assert loaded.execute(event)
        assert loaded.state.selected_component_id == "L1"
        assert loaded.state.last_executed_event.type == "focus_component"

    def test_accepts_event_objects(self, store):
        event = HighlightComponentsEvent(data={"componentIds": ["a", "b"]})
        assert store.execute(event)
        assert store.state.highlighted_component_ids == ["a", "b"]
        assert store.state.last_executed_event is event

    def test_show_path(self, loaded):
        loaded.execute(_event("show_path", fromComponentId="BATT", toComponentId="G1"))
        assert loaded.state.highlighted_component_ids == ["BATT", "W0", "F1", "W1", "L1", "G1"]
        assert loaded.state.current_circuit_path == ["BATT", "W0", "F1", "W1", "L1", "G1"]

    def test_show_path_not_found_highlights_endpoints(self, loaded):
        loaded.execute(_event("show_path", fromComponentId="W2", toComponentId="L1"))
        assert loaded.state.highlighted_component_ids == ["W2", "L1"]
        assert loaded.state.current_circuit_path == []

    def test_trace_circuit(self, loaded):
        assert loaded.execute(_event("trace_circuit", componentId="L1"))
        assert loaded.state.current_circuit_path == ["BATT", "W0", "F1", "W1", "L1", "G1"]
        assert set(loaded.state.highlighted_component_ids) == {"BATT", "W0", "F1", "W1", "L1", "G1"}

    def test_show_connections_includes_start(self, loaded):
        loaded.execute(_event("show_connections", componentId="L1", depth=1))
        assert loaded.state.highlighted_component_ids == ["L1", "W1", "G1", "M1", "C1"]
        assert loaded.state.selected_component_id == "L1"

    def test_show_connections_default_depth_from_settings(self, harness):
        store = ViewStore(Settings.model_validate({"connections": {"default_depth": 2}}))
        store.set_model(harness)
        store.execute(_event("show_connections", componentId="L1"))
        assert "F1" in store.state.highlighted_component_ids

    def test_show_circuit(self, store):
        store.execute(_event("show_circuit", circuitName="headlamp", componentIds=["a", "b"]))
        assert store.state.highlighted_component_ids == ["a", "b"]
        assert store.state.current_circuit_path == ["a", "b"]

    def test_reset_view(self, loaded):
        loaded.set_selected("L1")
        loaded.set_highlighted(["L1"])
        loaded.execute({"type": "reset_view", "data": {}})
        assert loaded.state.selected_component_id is None
        assert loaded.state.highlighted_component_ids == []

    def test_rotate_view(self, store):
        store.execute(_event("rotate_view", rotation={"x": 45, "y": 90, "z": 0}))
        assert store.state.model_rotation == ModelRotation(x=45, y=90, z=0)

    def test_zoom_to_area(self, loaded):
        loaded.execute(_event("zoom_to_area", zone="engine_bay"))
        assert loaded.state.highlighted_component_ids == ["BATT", "W0", "F1"]
        assert loaded.state.camera_view.target == pytest.approx((0.15, 0.65, 1.15))

    def test_zoom_to_area_with_bounding_box(self, loaded):
        loaded.execute(_event("zoom_to_area", zone="chassis",
                              boundingBox={"min": [0, 0, 0], "max": [2, 2, 2]}))
        assert loaded.state.highlighted_component_ids == ["GP"]
        assert loaded.state.camera_view.target == pytest.approx((1.0, 1.0, 1.0))

    def test_compare_components(self, store):
        store.execute(_event("compare_components", componentIds=["a", "b"]))
        assert store.state.highlighted_component_ids == ["a", "b"]

    def test_show_ground_points(self, store):
        store.state.components = [
            VehicleComponent(id="ground-1", name="g1", type="ground_point"),
            VehicleComponent(id="ground-2", name="g2", type="ground_plane"),
            VehicleComponent(id="other", name="r", type="relay"),
        ]
        store.execute({"type": "show_ground_points", "data": {}})
        assert store.state.highlighted_component_ids == ["ground-1", "ground-2"]

    def test_show_ground_points_filters(self, loaded):
        loaded.execute(_event("show_ground_points", filter={"zone": "dashboard"}))
        assert loaded.state.highlighted_component_ids == ["G1"]

        loaded.execute(_event("show_ground_points", filter={"quality": "poor"}))
        assert loaded.state.highlighted_component_ids == ["GP"]

    def test_show_power_distribution(self, loaded):
        loaded.execute({"type": "show_power_distribution"})
        assert loaded.state.highlighted_component_ids == ["BATT", "W0", "F1"]
        assert loaded.state.selected_component_id == "BATT"

    def test_animate_signal_flow(self, store):
        store.execute(_event("animate_signal_flow", path=["a", "b", "c"]))
        assert store.state.current_circuit_path == ["a", "b", "c"]

    def test_mark_faulty_and_healthy(self, loaded):
        loaded.execute(_event("mark_component_faulty", componentIds=["F1"], reason="blown"))
        fuse = loaded.get_component("F1")
        assert fuse.faulty and fuse.fault_reason == "blown"
        assert loaded.get_component("L1").faulty is False
        assert loaded.state.highlighted_component_ids == ["F1"]
        assert loaded.state.faulty_component_ids == ["F1"]

        loaded.execute(_event("mark_component_healthy", componentIds=["F1"]))
        assert loaded.state.faulty_component_ids == []

    def test_unknown_type_is_logged(self, store, caplog):
        with caplog.at_level(logging.WARNING):
            assert store.execute({"type": "unknown_type", "data": {}}) is False
        assert "Unknown event type: unknown_type" in caplog.text
        assert store.state.last_executed_event is None

    def test_invalid_payload_is_logged(self, store, caplog):
        with caplog.at_level(logging.WARNING):
            assert store.execute({"type": "focus_component", "data": {}}) is False
        assert "Invalid 'focus_component' event" in caplog.text

    @pytest.mark.parametrize("event", MODEL_EVENTS)
    def test_graph_events_need_a_model(self, store, caplog, event):
        store.set_highlighted(["keep"])
        with caplog.at_level(logging.WARNING):
            assert store.execute(event) is False
        assert "No model loaded" in caplog.text
        assert store.state.highlighted_component_ids == ["keep"]
        assert store.state.last_executed_event is None

    def test_every_model_event_is_guarded(self):
        assert {e["type"] for e in MODEL_EVENTS} == GRAPH_EVENT_TYPES

    def test_graph_event_on_empty_model(self, store):
        store.set_model(ParsedModel.empty())
        assert store.execute(_event("trace_circuit", componentId="A")) is False


class TestEventQueue:
    def test_queue_events(self, store):
        events = [
            _event("focus_component", componentId="comp-1"),
            _event("highlight_components", componentIds=["comp-2"]),
        ]
        store.queue_events(events)
        queue = store.state.event_queue
        assert queue.events == events
        assert queue.current_index == 0
        assert queue.is_playing is True

    def test_queueing_nothing_is_not_playing(self, store):
        store.queue_events([])
        assert store.state.event_queue.is_playing is False

    def test_play_next_event(self, loaded):
        loaded.queue_events([_event("focus_component", componentId="L1")])
        assert loaded.play_next_event()
        assert loaded.state.selected_component_id == "L1"
        assert loaded.state.event_queue.current_index == 1

    def test_is_playing_while_events_remain(self, store):
        store.queue_events([ResetViewEvent(), ResetViewEvent()])
        store.play_next_event()
        assert store.state.event_queue.is_playing is True
        store.play_next_event()
        assert store.state.event_queue.is_playing is False
        assert store.state.event_queue.remaining == 0

    def test_empty_queue_does_nothing(self, store):
        assert store.play_next_event() is False
        assert store.state.last_executed_event is None

    def test_clear_event_queue(self, store):
        store.queue_events([ResetViewEvent()])
        store.play_next_event()
        store.clear_event_queue()
        queue = store.state.event_queue
        assert (queue.events, queue.current_index, queue.is_playing) == ([], 0, False)


class TestSubscribe:
    def test_listener_notified_after_mutation(self, store):
        seen = []
        store.subscribe(lambda state: seen.append(list(state.highlighted_component_ids)))
        store.execute(_event("highlight_components", componentIds=["a"]))
        assert seen[-1] == ["a"]

    def test_unsubscribe(self, store):
        seen = []
        unsubscribe = store.subscribe(lambda state: seen.append(1))
        store.set_selected("a")
        unsubscribe()
        store.set_selected("b")
        assert seen == [1]
