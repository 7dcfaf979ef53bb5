"""
Wiring helpers for the rendering layer.

Turns highlight sets and ordered circuit paths into straight wire segments
between positioned components, summarizes what a highlighted path passes
through, and groups positioned components into a zone hierarchy.
"""

from typing import List, Literal, Optional, Sequence, Set, Tuple

from pydantic import BaseModel, Field

from ..core.model import ParsedModel
from ..core.types import NodeType, Point3, RelationshipType

DEFAULT_ROOT_NAME = "Electrical System"


class WireSegment(BaseModel):
    """A straight wire between two positioned components."""
    id: str
    source_id: str
    target_id: str
    start: Point3
    end: Point3
    origin: Literal["edge", "path"]
    relationship: RelationshipType | None = None


class PathSummary(BaseModel):
    has_ground: bool = False
    has_battery: bool = False
    fuse_count: int = 0
    relay_count: int = 0
    connector_count: int = 0


class SceneNode(BaseModel):
    """One entry of the zone hierarchy shown in the scene explorer."""
    id: str
    name: str
    type: str
    position: Point3 = (0.0, 0.0, 0.0)
    children: List["SceneNode"] = Field(default_factory=list)


def _positions(model: ParsedModel, a: str, b: str) -> Optional[Tuple[Point3, Point3]]:
    node_a = model.get_node(a)
    node_b = model.get_node(b)
    if node_a is None or node_b is None:
        return None
    if node_a.anchor_xyz is None or node_b.anchor_xyz is None:
        return None
    return node_a.anchor_xyz, node_b.anchor_xyz


def wire_segments(
    model: ParsedModel,
    highlighted_ids: Sequence[str],
    ordered_path: Sequence[str] | None = None,
) -> List[WireSegment]:
    """
    Build highlighted wire segments.

    First every electrical edge whose two ends are both highlighted, then a
    segment for each consecutive pair of ``ordered_path`` that no edge
    already covered. Pairs without positions on both ends are skipped.
    """
    if len(highlighted_ids) < 2:
        return []

    highlighted = set(highlighted_ids)
    covered: Set[frozenset] = set()
    segments: List[WireSegment] = []

    for edge in model.edges:
        if not edge.is_electrical:
            continue
        if edge.source not in highlighted or edge.target not in highlighted:
            continue
        ends = _positions(model, edge.source, edge.target)
        if ends is None:
            continue
        pair = frozenset((edge.source, edge.target))
        if pair in covered:
            continue
        covered.add(pair)
        segments.append(WireSegment(
            id=f"edge_wire_{edge.source}_{edge.target}",
            source_id=edge.source,
            target_id=edge.target,
            start=ends[0],
            end=ends[1],
            origin="edge",
            relationship=edge.relationship,
        ))

    path = list(ordered_path or [])
    for source_id, target_id in zip(path, path[1:]):
        pair = frozenset((source_id, target_id))
        if pair in covered:
            continue
        ends = _positions(model, source_id, target_id)
        if ends is None:
            continue
        covered.add(pair)
        segments.append(WireSegment(
            id=f"path_wire_{source_id}_{target_id}",
            source_id=source_id,
            target_id=target_id,
            start=ends[0],
            end=ends[1],
            origin="path",
        ))

    return segments


def summarize_path(model: ParsedModel, node_ids: Sequence[str]) -> PathSummary:
    """Count the notable component kinds along a highlighted path."""
    summary = PathSummary()
    for node_id in node_ids:
        node = model.get_node(node_id)
        if node is None:
            continue
        if node.node_type.is_ground:
            summary.has_ground = True
        elif node.node_type == NodeType.BATTERY:
            summary.has_battery = True
        elif node.node_type == NodeType.FUSE:
            summary.fuse_count += 1
        elif node.node_type == NodeType.RELAY:
            summary.relay_count += 1
        elif node.node_type == NodeType.CONNECTOR:
            summary.connector_count += 1
    return summary


def build_zone_tree(model: ParsedModel, root_name: str | None = None) -> SceneNode:
    """
    Group positioned components under one node per zone.

    Zones with no positioned components are left out.
    """
    if root_name is None:
        root_name = (model.metadata or {}).get("model") or DEFAULT_ROOT_NAME

    zones: List[SceneNode] = []
    for zone, nodes in model.by_zone.items():
        children = [
            SceneNode(
                id=node.id,
                name=node.label,
                type=node.node_type.value,
                position=node.anchor_xyz,
            )
            for node in nodes
            if node.anchor_xyz is not None
        ]
        if not children:
            continue
        zones.append(SceneNode(id=f"zone_{zone}", name=zone, type="zone", children=children))

    return SceneNode(id="root", name=root_name, type="root", children=zones)
