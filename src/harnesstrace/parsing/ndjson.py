"""
NDJSON Wiring Model Parser.

Consumes newline-delimited JSON records (``node``, ``edge`` and an optional
``meta`` record) and produces an indexed ParsedModel. Individual bad lines
are skipped with a warning; only a total read failure or a source with no
usable nodes raises LoadError.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Union

from pydantic import ValidationError

from ..core.exceptions import LineParseError, LoadError
from ..core.model import ParsedModel, ParseStats
from ..core.types import Edge, ModelMetadata, Node, NodeType, RelationshipType
from .sources import read_text

logger = logging.getLogger(__name__)

Record = Union[Node, Edge, ModelMetadata]

# Keys lifted into first-class Node fields; everything else stays in attributes
_NODE_FIELDS = {"kind", "id", "node_type", "anchor_xyz", "anchor_zone", "canonical_id", "code_id"}
_EDGE_FIELDS = {"kind", "source", "target", "from", "to", "relationship"}


def _coerce_xyz(value: Any) -> tuple | None:
    """Return a float 3-tuple, or None when the anchor is absent or partial."""
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        return None
    if not all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in value):
        return None
    return tuple(float(v) for v in value)


def _build_node(record: Dict[str, Any], line_no: int) -> Node:
    node_id = record.get("id")
    if not isinstance(node_id, str) or not node_id:
        raise LineParseError(line_no, "node record has no 'id'")

    raw_type = record.get("node_type")
    raw_type = str(raw_type) if raw_type is not None else None
    zone = record.get("anchor_zone")

    try:
        return Node(
            id=node_id,
            node_type=NodeType.classify(raw_type),
            raw_type=raw_type,
            anchor_xyz=_coerce_xyz(record.get("anchor_xyz")),
            anchor_zone=str(zone) if zone else None,
            canonical_id=record.get("canonical_id") or None,
            code_id=record.get("code_id") or None,
            attributes={k: v for k, v in record.items() if k not in _NODE_FIELDS},
        )
    except ValidationError as e:
        raise LineParseError(line_no, f"invalid node '{node_id}' ({e.error_count()} validation error(s))") from e


def _build_edge(record: Dict[str, Any], line_no: int) -> Edge:
    source = record.get("source") or record.get("from")
    target = record.get("target") or record.get("to")
    if not isinstance(source, str) or not isinstance(target, str):
        raise LineParseError(line_no, "edge record needs 'source'/'from' and 'target'/'to'")

    raw_rel = record.get("relationship")
    raw_rel = str(raw_rel) if raw_rel is not None else None

    try:
        return Edge(
            source=source,
            target=target,
            relationship=RelationshipType.classify(raw_rel),
            raw_relationship=raw_rel,
            attributes={k: v for k, v in record.items() if k not in _EDGE_FIELDS},
        )
    except ValidationError as e:
        raise LineParseError(line_no, f"invalid edge ({e.error_count()} validation error(s))") from e


def parse_record(line: str, line_no: int) -> Record:
    """
    Parse one NDJSON line into a Node, Edge or metadata dict.

    Records without a ``kind`` are routed by shape: anything with both
    endpoints is an edge, anything with an ``id`` is a node.

    Raises:
        LineParseError: The line is not a usable record.
    """
    try:
        record = json.loads(line)
    except json.JSONDecodeError as e:
        raise LineParseError(line_no, f"invalid JSON ({e.msg})") from e

    if not isinstance(record, dict):
        raise LineParseError(line_no, "record is not a JSON object")

    kind = record.get("kind")
    if kind is None:
        has_ends = ("source" in record or "from" in record) and ("target" in record or "to" in record)
        kind = "edge" if has_ends else "node"

    if kind == "node":
        return _build_node(record, line_no)
    if kind == "edge":
        return _build_edge(record, line_no)
    if kind == "meta":
        return {k: v for k, v in record.items() if k != "kind"}

    raise LineParseError(line_no, f"unknown record kind '{kind}'")


def parse(source: Union[str, Iterable[str]]) -> ParsedModel:
    """
    Parse NDJSON text (or pre-split lines) into a ParsedModel.

    Raises:
        LoadError: No node records could be parsed.
    """
    lines = source.splitlines() if isinstance(source, str) else source

    stats = ParseStats()
    nodes_by_id: Dict[str, Node] = {}
    edges: List[Edge] = []
    metadata: ModelMetadata | None = None

    for line_no, line in enumerate(lines, 1):
        stats.lines_read += 1
        if not line.strip():
            continue

        try:
            record = parse_record(line, line_no)
        except LineParseError as e:
            stats.skipped_lines += 1
            stats.errors.append(str(e))
            logger.warning(f"Skipping {e}")
            continue

        if isinstance(record, Node):
            if record.id in nodes_by_id:
                stats.duplicate_ids += 1
                logger.warning(f"Duplicate node id '{record.id}' on line {line_no}; overwriting")
            nodes_by_id[record.id] = record
        elif isinstance(record, Edge):
            edges.append(record)
        else:
            metadata = record

    if not nodes_by_id:
        raise LoadError("<ndjson>", f"no node records parsed ({stats.skipped_lines} line(s) skipped)")

    for edge in edges:
        missing = [end for end in (edge.source, edge.target) if end not in nodes_by_id]
        if missing:
            stats.dangling_edges += 1
            logger.warning(
                f"Edge {edge.source} -> {edge.target} references unknown node(s) "
                f"{', '.join(missing)}; it will not be traversed"
            )

    stats.nodes = len(nodes_by_id)
    stats.edges = len(edges)
    logger.info(
        f"Parsed {stats.nodes} nodes, {stats.edges} edges "
        f"({stats.skipped_lines} skipped, {stats.dangling_edges} dangling)"
    )
    return ParsedModel.build(nodes_by_id, edges, metadata=metadata, stats=stats)


def load_model(location: Union[str, Path]) -> ParsedModel:
    """
    Read and parse a model from a local path or URL.

    Raises:
        LoadError: The source could not be read, or contained no nodes.
    """
    text = read_text(location)
    try:
        return parse(text)
    except LoadError as e:
        raise LoadError(str(location), e.reason) from e
