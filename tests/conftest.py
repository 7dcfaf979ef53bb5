"""Shared fixtures for harnesstrace tests."""

import json
from typing import Any, Dict, List

import pytest

from harnesstrace.parsing.ndjson import parse


def to_ndjson(records: List[Dict[str, Any]]) -> str:
    return "\n".join(json.dumps(r) for r in records)


def node(node_id: str, node_type: str = "wire", **extra) -> Dict[str, Any]:
    return {"kind": "node", "id": node_id, "node_type": node_type, **extra}


def edge(source: str, target: str, relationship: str, **extra) -> Dict[str, Any]:
    return {"kind": "edge", "source": source, "target": target, "relationship": relationship, **extra}


@pytest.fixture
def build_model():
    """Factory: parse a list of record dicts into a ParsedModel."""
    def _build(records: List[Dict[str, Any]]):
        return parse(to_ndjson(records))
    return _build


@pytest.fixture
def scenario_a_records():
    return [
        node("F1", "fuse"),
        node("W1", "wire"),
        node("G1", "ground_point"),
        edge("F1", "W1", "wire_to_fuse"),
        edge("W1", "G1", "wire_to_ground"),
    ]


@pytest.fixture
def scenario_a(build_model, scenario_a_records):
    return build_model(scenario_a_records)


@pytest.fixture
def harness_records():
    """
    A small positioned harness:

        BATT --pin_to_wire-- W0 --wire_to_fuse-- F1
        F1 --wire_to_fuse-- W1 --pin_to_wire-- L1 --wire_to_ground-- G1 --ground_to_plane-- GP
        L1 --mounted_on-- M1 (structural)
        C1 (connector) --has_pin-- L1
        W2 --wire_to_splice-- S404 (dangling)
    """
    return [
        {"kind": "meta", "model": "Test Vehicle", "version": "1.0"},
        node("BATT", "battery", anchor_xyz=[0.0, 0.5, 1.8], anchor_zone="engine_bay"),
        node("W0", "wire", anchor_xyz=[0.2, 0.6, 1.2], anchor_zone="engine_bay"),
        node("F1", "fuse", anchor_xyz=[0.3, 0.8, 0.5], anchor_zone="engine_bay",
             canonical_id="FUSE_HEADLAMP", bbox_m=[0.02, 0.01, 0.03]),
        node("W1", "wire", anchor_zone="dashboard"),
        node("L1", "sensor", anchor_xyz=[0.6, 0.7, -0.2], anchor_zone="dashboard"),
        node("G1", "ground_point", anchor_xyz=[0.5, 0.2, -0.1], anchor_zone="dashboard",
             quality="good"),
        node("GP", "ground_plane", anchor_xyz=[0.0, 0.0, 0.0], anchor_zone="chassis"),
        node("M1", "module", anchor_xyz=[0.8, 0.9, -0.5], anchor_zone="dashboard"),
        node("C1", "connector", anchor_xyz=[0.65, 0.7, -0.25], anchor_zone="dashboard"),
        node("W2", "wire"),
        edge("BATT", "W0", "pin_to_wire"),
        edge("F1", "W0", "wire_to_fuse"),
        edge("F1", "W1", "wire_to_fuse"),
        edge("L1", "W1", "pin_to_wire"),
        edge("L1", "G1", "wire_to_ground"),
        edge("G1", "GP", "ground_to_plane"),
        edge("L1", "M1", "mounted_on"),
        edge("C1", "L1", "has_pin"),
        edge("W2", "S404", "wire_to_splice"),
    ]


@pytest.fixture
def harness(build_model, harness_records):
    return build_model(harness_records)


@pytest.fixture
def harness_file(tmp_path, harness_records):
    path = tmp_path / "harness.ndjson"
    path.write_text(to_ndjson(harness_records))
    return path
