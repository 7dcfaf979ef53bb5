"""
Exception hierarchy for harnesstrace.

Only LoadError and ModelNotLoadedError ever escape the library. Line-level
problems are recorded as LineParseError values; dangling edges are only
logged and counted.
"""


class HarnessTraceError(Exception):
    """Base class for all harnesstrace errors."""


class LoadError(HarnessTraceError):
    """The model source could not be read, fetched, or yielded no nodes."""

    def __init__(self, location: str, reason: str):
        self.location = location
        self.reason = reason
        super().__init__(f"Failed to load {location}: {reason}")


class LineParseError(HarnessTraceError):
    """A single NDJSON line was malformed. Recovered locally by the parser."""

    def __init__(self, line_no: int, message: str):
        self.line_no = line_no
        self.message = message
        super().__init__(f"line {line_no}: {message}")


class ModelNotLoadedError(HarnessTraceError):
    """A graph operation was requested before any model was loaded."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"No model loaded; cannot run '{operation}'")


class NodeNotFoundError(HarnessTraceError):
    """A requested component ID is not present in the loaded model."""

    def __init__(self, node_id: str):
        self.node_id = node_id
        super().__init__(f"Component not found: {node_id}")
