"""
The parsed wiring model.

A ParsedModel is an immutable snapshot: it is built once by the parser and
replaced wholesale on the next load, never mutated in place.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional

from .types import Edge, ModelMetadata, Node, NodeType

if TYPE_CHECKING:
    from .graph import CircuitGraph


@dataclass
class ParseStats:
    """Counters collected while parsing one NDJSON source."""

    lines_read: int = 0
    nodes: int = 0
    edges: int = 0
    skipped_lines: int = 0
    duplicate_ids: int = 0
    dangling_edges: int = 0
    errors: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ParsedModel:
    """
    Indexed in-memory wiring model.

    Attributes:
        nodes_by_id: Node ID -> Node. Last write wins on duplicate IDs.
        edges: All edge records in file order.
        by_zone: Zone name -> nodes in that zone, first-seen order.
        by_type: NodeType -> nodes of that type, first-seen order.
        metadata: The optional ``meta`` record.
        stats: Parse counters.
    """

    nodes_by_id: Dict[str, Node]
    edges: List[Edge]
    by_zone: Dict[str, List[Node]]
    by_type: Dict[NodeType, List[Node]]
    metadata: Optional[ModelMetadata] = None
    stats: ParseStats = field(default_factory=ParseStats)
    _graph: Optional["CircuitGraph"] = field(default=None, init=False, repr=False, compare=False)

    @classmethod
    def build(
        cls,
        nodes_by_id: Dict[str, Node],
        edges: List[Edge],
        metadata: Optional[ModelMetadata] = None,
        stats: Optional[ParseStats] = None,
    ) -> "ParsedModel":
        """Derive the zone and type groupings in a single pass over the nodes."""
        by_zone: Dict[str, List[Node]] = {}
        by_type: Dict[NodeType, List[Node]] = {}

        for node in nodes_by_id.values():
            if node.anchor_zone:
                by_zone.setdefault(node.anchor_zone, []).append(node)
            by_type.setdefault(node.node_type, []).append(node)

        return cls(
            nodes_by_id=nodes_by_id,
            edges=edges,
            by_zone=by_zone,
            by_type=by_type,
            metadata=metadata,
            stats=stats or ParseStats(),
        )

    @classmethod
    def empty(cls) -> "ParsedModel":
        return cls.build({}, [])

    def get_node(self, node_id: str) -> Optional[Node]:
        return self.nodes_by_id.get(node_id)

    def has_node(self, node_id: str) -> bool:
        return node_id in self.nodes_by_id

    @property
    def graph(self) -> "CircuitGraph":
        """Adjacency index for this snapshot, built on first use."""
        if self._graph is None:
            from .graph import CircuitGraph
            object.__setattr__(self, "_graph", CircuitGraph.from_model(self))
        return self._graph

    @property
    def zones(self) -> List[str]:
        return list(self.by_zone.keys())

    @property
    def is_empty(self) -> bool:
        return not self.nodes_by_id
