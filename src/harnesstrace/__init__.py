"""
harnesstrace: circuit tracing over vehicle wiring graphs.

Load a wiring model from NDJSON, trace a component's circuit from power
source to ground, and run zone and connection queries against it.
"""

from .analysis.circuit import trace
from .analysis.queries import connections_of, nodes_in_zone, shortest_path
from .parsing.ndjson import load_model, parse

__all__ = ["parse", "load_model", "trace", "nodes_in_zone", "connections_of", "shortest_path"]
