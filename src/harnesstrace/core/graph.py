"""
Circuit graph index backed by rustworkx.

Built once from a ParsedModel. It manages:
- The bimap between string node IDs and rustworkx integer indices.
- Direction-agnostic neighbor lookups in file order.
- The electrical-continuity predicate shared by the tracer and wiring code.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional

import rustworkx as rx

from .model import ParsedModel
from .types import ELECTRICAL_RELATIONSHIPS, Edge, Node, RelationshipType

logger = logging.getLogger(__name__)


def is_electrical(relationship: RelationshipType | str) -> bool:
    """Check whether a relationship represents real electrical continuity."""
    if not isinstance(relationship, RelationshipType):
        relationship = RelationshipType.classify(relationship)
    return relationship in ELECTRICAL_RELATIONSHIPS


@dataclass(frozen=True)
class Neighbor:
    """
    One incident edge seen from a given node.

    ``forward`` is True when the edge points away from the node we looked
    up, i.e. the neighbor is the edge's target.
    """

    node_id: str
    edge: Edge
    forward: bool

    @property
    def relationship(self) -> RelationshipType:
        return self.edge.relationship


class CircuitGraph:
    """
    Adjacency index over a wiring model.

    Features:
    - O(1) node lookup via ID-to-Index bimap
    - Incident edges returned in the order they appeared in the source
    - Dangling edges dropped at build time
    """

    def __init__(self):
        self._graph = rx.PyDiGraph(multigraph=True)
        self._id_to_idx: Dict[str, int] = {}
        self._idx_to_id: Dict[int, str] = {}

    @classmethod
    def from_model(cls, model: ParsedModel) -> "CircuitGraph":
        graph = cls()
        for node in model.nodes_by_id.values():
            graph.add_node(node)
        for edge in model.edges:
            graph.add_edge(edge)
        return graph

    def add_node(self, node: Node) -> None:
        """Add or replace a node."""
        if node.id in self._id_to_idx:
            self._graph[self._id_to_idx[node.id]] = node
            return
        idx = self._graph.add_node(node)
        self._id_to_idx[node.id] = idx
        self._idx_to_id[idx] = node.id

    def add_edge(self, edge: Edge) -> bool:
        """Add an edge. Returns False when either endpoint is unknown."""
        u_idx = self._id_to_idx.get(edge.source)
        v_idx = self._id_to_idx.get(edge.target)
        if u_idx is None or v_idx is None:
            logger.debug(f"Skipping dangling edge {edge.source} -> {edge.target}")
            return False
        self._graph.add_edge(u_idx, v_idx, edge)
        return True

    def get_node(self, node_id: str) -> Optional[Node]:
        idx = self._id_to_idx.get(node_id)
        if idx is None:
            return None
        return self._graph[idx]

    def has_node(self, node_id: str) -> bool:
        return node_id in self._id_to_idx

    def neighbors(self, node_id: str, electrical_only: bool = False) -> List[Neighbor]:
        """
        All edges touching ``node_id``, annotated with the far endpoint.

        Edge indices grow with insertion, so sorting by index restores file
        order for deterministic tie-breaking.

        Args:
            node_id (str): The node whose edges to list.
            electrical_only (bool): Skip edges outside the electrical set.

        Returns:
            List[Neighbor]: One entry per incident edge, with ``forward`` set
            when ``node_id`` is the edge source. [] for unknown nodes.
        """
        idx = self._id_to_idx.get(node_id)
        if idx is None:
            return []

        incident = self._graph.incident_edge_index_map(idx, all_edges=True)
        result: List[Neighbor] = []
        for edge_idx in sorted(incident.keys()):
            src_idx, tgt_idx, edge = incident[edge_idx]
            if electrical_only and not edge.is_electrical:
                continue
            if src_idx == idx:
                result.append(Neighbor(self._idx_to_id[tgt_idx], edge, forward=True))
            else:
                result.append(Neighbor(self._idx_to_id[src_idx], edge, forward=False))
        return result

    def neighbor_ids(self, node_id: str, electrical_only: bool = False) -> List[str]:
        """Distinct neighbor IDs in first-seen order."""
        seen: Dict[str, None] = {}
        for nb in self.neighbors(node_id, electrical_only):
            seen.setdefault(nb.node_id, None)
        return list(seen)

    def iter_nodes(self) -> Iterator[Node]:
        return iter(self._graph.nodes())

    def iter_edges(self) -> Iterator[Edge]:
        return iter(self._graph.edges())

    @property
    def node_count(self) -> int:
        return self._graph.num_nodes()

    @property
    def edge_count(self) -> int:
        return self._graph.num_edges()

    def get_stats(self) -> Dict[str, Any]:
        node_counts: Dict[str, int] = defaultdict(int)
        for node in self.iter_nodes():
            node_counts[node.node_type.value] += 1

        edge_counts: Dict[str, int] = defaultdict(int)
        electrical = 0
        for edge in self.iter_edges():
            edge_counts[edge.relationship.value] += 1
            if edge.is_electrical:
                electrical += 1

        orphans = len([
            n for n in self._graph.node_indices()
            if self._graph.in_degree(n) == 0 and self._graph.out_degree(n) == 0
        ])

        return {
            "total_nodes": self.node_count,
            "total_edges": self.edge_count,
            "electrical_edges": electrical,
            "nodes_by_type": dict(node_counts),
            "edges_by_type": dict(edge_counts),
            "orphans": orphans,
            "backend": "rustworkx",
        }
