"""
Zone and connection queries.

Plain lookups and breadth-first expansions over the graph index. Unlike the
circuit tracer these have no preferred direction: they explore exhaustively
within a hop budget.
"""

from collections import deque
from typing import Dict, List, Optional

from ..config import DEFAULT_PATH_MAX_HOPS
from ..core.model import ParsedModel
from ..core.types import Node, NodeType


def nodes_in_zone(model: Optional[ParsedModel], zone: str) -> List[Node]:
    """All nodes whose ``anchor_zone`` equals ``zone``. Unknown zones give []."""
    if model is None:
        return []
    return list(model.by_zone.get(zone, []))


def nodes_of_type(model: Optional[ParsedModel], node_type: NodeType | str) -> List[Node]:
    if model is None:
        return []
    if not isinstance(node_type, NodeType):
        node_type = NodeType.classify(node_type)
    return list(model.by_type.get(node_type, []))


def positioned_nodes(model: Optional[ParsedModel]) -> List[Node]:
    """Nodes with a full 3D anchor, i.e. the renderable component set."""
    if model is None:
        return []
    return [node for node in model.nodes_by_id.values() if node.is_positioned]


def connections_of(
    model: Optional[ParsedModel],
    node_id: str,
    depth: int = 1,
    electrical_only: bool = False,
) -> List[str]:
    """
    Node IDs reachable from ``node_id`` within ``depth`` hops, either direction.

    The start node is excluded. Results are in BFS discovery order, so a
    larger depth always returns a superset of a smaller one.

    Args:
        model (ParsedModel): The loaded wiring model, or None.
        node_id (str): ID of the node to expand from.
        depth (int): Hop budget. Zero or less returns [].
        electrical_only (bool): Ignore structural edges such as mounted_on.

    Returns:
        List[str]: Reached node IDs, nearest first.
    """
    if model is None or depth <= 0 or not model.has_node(node_id):
        return []

    graph = model.graph
    visited = {node_id}
    reached: List[str] = []
    queue = deque([(node_id, 0)])

    while queue:
        current, dist = queue.popleft()
        if dist >= depth:
            continue
        for neighbor in graph.neighbor_ids(current, electrical_only):
            if neighbor in visited:
                continue
            visited.add(neighbor)
            reached.append(neighbor)
            queue.append((neighbor, dist + 1))

    return reached


def shortest_path(
    model: Optional[ParsedModel],
    from_id: str,
    to_id: str,
    max_hops: int = DEFAULT_PATH_MAX_HOPS,
) -> List[str]:
    """
    Shortest direction-agnostic path between two nodes, by hop count.

    Serves the show-path command; it does not look at node or edge types.

    Args:
        model (ParsedModel): The loaded wiring model, or None.
        from_id (str): First node of the path.
        to_id (str): Last node of the path.
        max_hops (int): Longest path searched, in edges.

    Returns:
        List[str]: Node IDs from ``from_id`` to ``to_id`` inclusive, or []
        when either end is unknown or no path exists within ``max_hops``.
    """
    if model is None or not model.has_node(from_id) or not model.has_node(to_id):
        return []
    if from_id == to_id:
        return [from_id]

    graph = model.graph
    parents: Dict[str, Optional[str]] = {from_id: None}
    queue = deque([(from_id, 0)])

    while queue:
        current, dist = queue.popleft()
        if dist >= max_hops:
            continue
        for neighbor in graph.neighbor_ids(current):
            if neighbor in parents:
                continue
            parents[neighbor] = current
            if neighbor == to_id:
                return unwind_path(parents, to_id)
            queue.append((neighbor, dist + 1))

    return []


def unwind_path(parents: Dict[str, Optional[str]], end: str) -> List[str]:
    """Follow a BFS parent map back from ``end`` to its root."""
    path: List[str] = []
    node: Optional[str] = end
    while node is not None:
        path.append(node)
        node = parents[node]
    return path[::-1]
