"""
Core type definitions for harnesstrace.

Node and relationship vocabularies are closed StrEnums with an explicit
fallback member, so classification of raw NDJSON strings happens here and
nowhere else.
"""

from enum import StrEnum
from typing import Any, Dict, List, NotRequired, Tuple, TypedDict

from pydantic import BaseModel, ConfigDict, Field

Point3 = Tuple[float, float, float]


class NodeType(StrEnum):
    """Categories of components in the wiring graph."""
    FUSE = "fuse"
    RELAY = "relay"
    SENSOR = "sensor"
    CONNECTOR = "connector"
    WIRE = "wire"
    MODULE = "module"
    GROUND_POINT = "ground_point"
    GROUND_PLANE = "ground_plane"
    BUS = "bus"
    SPLICE = "splice"
    PIN = "pin"
    BATTERY = "battery"
    OTHER = "other"

    @classmethod
    def classify(cls, raw: str | None) -> "NodeType":
        """Normalize a raw ``node_type`` string. Unknown values map to OTHER."""
        if not raw:
            return cls.OTHER
        key = raw.strip().lower().replace("-", "_").replace(" ", "_")
        return _NODE_TYPE_ALIASES.get(key, cls.OTHER)

    @property
    def is_ground(self) -> bool:
        return self in (NodeType.GROUND_POINT, NodeType.GROUND_PLANE)

    @property
    def is_pass_through(self) -> bool:
        return self in (NodeType.WIRE, NodeType.PIN, NodeType.CONNECTOR, NodeType.SPLICE)


_NODE_TYPE_ALIASES: Dict[str, NodeType] = {
    **{t.value: t for t in NodeType},
    "plug": NodeType.CONNECTOR,
    "cable": NodeType.WIRE,
    "ecu": NodeType.MODULE,
    "control": NodeType.MODULE,
    "control_module": NodeType.MODULE,
    "batt": NodeType.BATTERY,
    "battery_terminal": NodeType.BATTERY,
    "component": NodeType.OTHER,
}


class RelationshipType(StrEnum):
    """Types of relationships between nodes."""
    PIN_TO_WIRE = "pin_to_wire"
    WIRE_TO_FUSE = "wire_to_fuse"
    WIRE_TO_RELAY = "wire_to_relay"
    WIRE_TO_GROUND = "wire_to_ground"
    WIRE_TO_SPLICE = "wire_to_splice"
    HAS_PIN = "has_pin"
    HAS_CONNECTOR = "has_connector"
    GROUND_TO_PLANE = "ground_to_plane"
    UNKNOWN = "unknown"

    @classmethod
    def classify(cls, raw: str | None) -> "RelationshipType":
        if not raw:
            return cls.UNKNOWN
        try:
            return cls(raw.strip().lower())
        except ValueError:
            return cls.UNKNOWN

    @property
    def is_electrical(self) -> bool:
        """Whether this relationship carries real electrical continuity."""
        return self in ELECTRICAL_RELATIONSHIPS


ELECTRICAL_RELATIONSHIPS = frozenset({
    RelationshipType.PIN_TO_WIRE,
    RelationshipType.WIRE_TO_FUSE,
    RelationshipType.WIRE_TO_RELAY,
    RelationshipType.WIRE_TO_GROUND,
    RelationshipType.WIRE_TO_SPLICE,
    RelationshipType.HAS_PIN,
    RelationshipType.HAS_CONNECTOR,
    RelationshipType.GROUND_TO_PLANE,
})


class ModelMetadata(TypedDict, total=False):
    """
    Contents of the optional ``kind: "meta"`` record.

    All fields are optional; unknown keys are preserved by the parser.
    """
    model: NotRequired[str]
    version: NotRequired[str]
    units: NotRequired[Dict[str, str]]
    coord_frame: NotRequired[Dict[str, str]]
    vehicle_specs: NotRequired[Dict[str, float]]


class Node(BaseModel):
    """
    A single electrical component or junction.

    Attributes the engine does not interpret (voltage, bbox_m, ...) live in
    ``attributes`` untouched.
    """
    id: str
    node_type: NodeType = NodeType.OTHER
    raw_type: str | None = None
    anchor_xyz: Point3 | None = None
    anchor_zone: str | None = None
    canonical_id: str | None = None
    code_id: str | None = None
    attributes: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True, extra="ignore")

    @property
    def is_positioned(self) -> bool:
        return self.anchor_xyz is not None

    @property
    def label(self) -> str:
        return self.canonical_id or self.id

    def __hash__(self):
        return hash(self.id)

    def __eq__(self, other):
        if isinstance(other, Node):
            return self.id == other.id
        return False


class Edge(BaseModel):
    """
    Directed relationship between two node IDs.

    Direction is recorded, but traversal may use either end.
    """
    source: str
    target: str
    relationship: RelationshipType = RelationshipType.UNKNOWN
    raw_relationship: str | None = None
    attributes: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True, extra="ignore")

    @property
    def is_electrical(self) -> bool:
        return self.relationship.is_electrical

    def other_end(self, node_id: str) -> str:
        return self.target if node_id == self.source else self.source


class TracedCircuit(BaseModel):
    """
    Result of tracing a circuit through one component.

    ``complete_circuit`` runs source -> start -> ground and is suitable for
    generating sequential wire segments.
    """
    start_id: str | None = None
    path_to_source: List[str] = Field(default_factory=list)
    path_to_ground: List[str] = Field(default_factory=list)
    complete_circuit: List[str] = Field(default_factory=list)
    all_highlighted: List[str] = Field(default_factory=list)
    source_found: bool = False
    ground_found: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.all_highlighted
