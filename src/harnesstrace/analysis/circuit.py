"""
Circuit Tracing.

Reconstructs a plausible circuit through a selected component by running two
independent greedy walks over electrical edges: one toward a power source
(fuse, relay, bus, module, battery) and one toward a ground return. A source
leg that ends on a fuse is carried on to the battery feeding it. The legs
are then merged into a single ordered source -> start -> ground sequence.

This is deliberately not a shortest-path search. At each step the walk
prefers edges whose relationship points the way it is heading, then
neighbors that would end the walk, then file order.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import AbstractSet, Dict, FrozenSet, Iterable, List, Optional, Tuple

from ..config import DEFAULT_MAX_HOPS
from ..core.graph import CircuitGraph, Neighbor
from ..core.model import ParsedModel
from ..core.types import Node, NodeType, RelationshipType, TracedCircuit
from .queries import unwind_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WalkPolicy:
    """Classification rules for one direction of a circuit walk."""

    name: str
    terminal_types: FrozenSet[NodeType]
    preferred_relationships: FrozenSet[RelationshipType]
    # Lowercase fragments of a canonical id that also mark a terminal
    terminal_markers: Tuple[str, ...] = ()
    blocked_relationships: FrozenSet[RelationshipType] = frozenset()
    blocked_types: FrozenSet[NodeType] = frozenset()
    blocked_markers: Tuple[str, ...] = ()

    def is_terminal(self, node: Optional[Node]) -> bool:
        if node is None:
            return False
        return node.node_type in self.terminal_types or _has_marker(node, self.terminal_markers)

    def blocks(self, node: Optional[Node], relationship: RelationshipType) -> bool:
        if relationship in self.blocked_relationships:
            return True
        if node is None:
            return False
        return node.node_type in self.blocked_types or _has_marker(node, self.blocked_markers)


def _has_marker(node: Node, markers: Tuple[str, ...]) -> bool:
    if not markers or not node.canonical_id:
        return False
    canonical = node.canonical_id.lower()
    return any(marker in canonical for marker in markers)


GROUND_MARKERS = ("ground", "gnd")
BATTERY_MARKERS = ("batt", "battery")

GROUND_WALK = WalkPolicy(
    name="ground",
    terminal_types=frozenset({NodeType.GROUND_POINT, NodeType.GROUND_PLANE}),
    preferred_relationships=frozenset({
        RelationshipType.WIRE_TO_GROUND, RelationshipType.GROUND_TO_PLANE,
    }),
    terminal_markers=GROUND_MARKERS,
)

SOURCE_WALK = WalkPolicy(
    name="source",
    terminal_types=frozenset({
        NodeType.FUSE, NodeType.RELAY, NodeType.BUS, NodeType.MODULE, NodeType.BATTERY,
    }),
    preferred_relationships=frozenset({
        RelationshipType.WIRE_TO_FUSE, RelationshipType.WIRE_TO_RELAY, RelationshipType.PIN_TO_WIRE,
    }),
    terminal_markers=BATTERY_MARKERS + ("fusebox",),
    # The source walk never crosses into the ground return
    blocked_relationships=GROUND_WALK.preferred_relationships,
    blocked_types=GROUND_WALK.terminal_types,
    blocked_markers=GROUND_MARKERS,
)

# Target of the fuse -> battery continuation
BATTERY_SEARCH = WalkPolicy(
    name="battery",
    terminal_types=frozenset({NodeType.BATTERY}),
    preferred_relationships=frozenset(),
    terminal_markers=BATTERY_MARKERS,
    blocked_relationships=SOURCE_WALK.blocked_relationships,
    blocked_types=SOURCE_WALK.blocked_types,
    blocked_markers=SOURCE_WALK.blocked_markers,
)


@dataclass(frozen=True)
class WalkResult:
    """Outcome of one bounded walk. ``path`` always starts at the start node."""

    path: List[str]
    found: bool


def dedupe(ids: Iterable[str]) -> List[str]:
    """Drop repeated IDs, keeping the first occurrence."""
    return list(dict.fromkeys(ids))


class CircuitTracer:
    """
    Traces source and ground legs for components of one model snapshot.

    Tracing only reads the snapshot, so one tracer may serve any number of
    calls and every call returns a fresh, independent result.
    """

    def __init__(self, model: ParsedModel, max_hops: int = DEFAULT_MAX_HOPS):
        self.model = model
        self.graph: CircuitGraph = model.graph
        self.max_hops = max_hops

    def trace(self, start_id: str) -> TracedCircuit:
        if not self.graph.has_node(start_id):
            logger.debug(f"Trace requested for unknown component '{start_id}'")
            return TracedCircuit(start_id=start_id)

        to_source = self.walk(start_id, SOURCE_WALK)
        path_to_source = to_source.path if to_source.found else []
        if path_to_source:
            path_to_source = self.extend_to_battery(path_to_source)

        # The ground return may not double back through the source leg
        to_ground = self.walk(start_id, GROUND_WALK, avoid=set(path_to_source[1:]))
        path_to_ground = to_ground.path if to_ground.found else []

        source_leg = list(reversed(path_to_source)) or [start_id]
        ground_leg = path_to_ground or [start_id]
        complete = dedupe(source_leg + ground_leg[1:])

        highlighted = dedupe([*path_to_source, *path_to_ground, start_id])

        logger.debug(
            f"Traced {start_id}: source={'found' if to_source.found else 'missing'} "
            f"({len(path_to_source) or len(to_source.path)} nodes), "
            f"ground={'found' if to_ground.found else 'missing'} ({len(to_ground.path)} nodes)"
        )

        return TracedCircuit(
            start_id=start_id,
            path_to_source=path_to_source,
            path_to_ground=path_to_ground,
            complete_circuit=complete,
            all_highlighted=highlighted,
            source_found=to_source.found,
            ground_found=to_ground.found,
        )

    def walk(
        self,
        start_id: str,
        policy: WalkPolicy,
        avoid: AbstractSet[str] = frozenset(),
    ) -> WalkResult:
        """
        Greedy walk from ``start_id`` until a terminal node is reached.

        Each step takes the best-ranked unvisited neighbor. A dead end backs
        up one node and tries the next best, so a wrong first turn (say, into
        a fuse that only leads back toward the battery) does not lose the
        circuit. Paths never grow past ``max_hops`` edges and nodes in
        ``avoid`` are never entered.

        Returns:
            The path to the terminal when found, otherwise the deepest
            partial path explored.
        """
        start = self.graph.get_node(start_id)
        if start is None:
            return WalkResult(path=[], found=False)

        path = [start_id]
        if policy.is_terminal(start):
            return WalkResult(path=path, found=True)

        visited = {start_id, *avoid}
        deepest = list(path)
        bounded = False

        while path:
            if len(path) > self.max_hops:
                bounded = True
                path.pop()
                continue

            step = self._choose_step(path[-1], visited, policy)
            if step is None:
                path.pop()
                continue

            visited.add(step.node_id)
            path.append(step.node_id)
            if policy.is_terminal(self.graph.get_node(step.node_id)):
                return WalkResult(path=path, found=True)
            if len(path) > len(deepest):
                deepest = list(path)

        if bounded:
            logger.debug(f"{policy.name} walk from {start_id} hit the {self.max_hops}-hop bound")
        return WalkResult(path=deepest, found=False)

    def extend_to_battery(self, path_to_source: List[str]) -> List[str]:
        """
        Carry a source leg that ends on a fuse on to the nearest battery.

        The continuation is a breadth-first search over electrical edges that
        stays off the ground return and off the leg itself. The leg is
        returned unchanged when no battery is reachable within ``max_hops``.
        """
        end_id = path_to_source[-1]
        end = self.graph.get_node(end_id)
        if end is None or end.node_type != NodeType.FUSE:
            return path_to_source

        avoid = set(path_to_source)
        parents: Dict[str, Optional[str]] = {end_id: None}
        queue = deque([(end_id, 0)])

        while queue:
            current, depth = queue.popleft()
            if current != end_id and BATTERY_SEARCH.is_terminal(self.graph.get_node(current)):
                continuation = unwind_path(parents, current)
                logger.debug(f"Continued source leg from fuse {end_id} to battery {current}")
                return path_to_source + continuation[1:]
            if depth >= self.max_hops:
                continue
            for nb in self.graph.neighbors(current, electrical_only=True):
                if nb.node_id in parents or nb.node_id in avoid:
                    continue
                if BATTERY_SEARCH.blocks(self.graph.get_node(nb.node_id), nb.relationship):
                    continue
                parents[nb.node_id] = current
                queue.append((nb.node_id, depth + 1))

        return path_to_source

    def _choose_step(
        self, current: str, visited: set, policy: WalkPolicy
    ) -> Optional[Neighbor]:
        best: Optional[Neighbor] = None
        best_rank = None

        for order, nb in enumerate(self.graph.neighbors(current, electrical_only=True)):
            if nb.node_id in visited:
                continue
            node = self.graph.get_node(nb.node_id)
            if policy.blocks(node, nb.relationship):
                continue

            rank = (
                0 if nb.relationship in policy.preferred_relationships else 1,
                0 if policy.is_terminal(node) else 1,
                order,
            )
            if best_rank is None or rank < best_rank:
                best, best_rank = nb, rank

        return best


def trace(
    model: Optional[ParsedModel],
    start_id: str,
    max_hops: int = DEFAULT_MAX_HOPS,
) -> TracedCircuit:
    """
    Trace the circuit through ``start_id``.

    Never raises: an absent or empty model, or an unknown start ID, yields an
    empty TracedCircuit.
    """
    if model is None or model.is_empty:
        return TracedCircuit(start_id=start_id)
    return CircuitTracer(model, max_hops=max_hops).trace(start_id)
