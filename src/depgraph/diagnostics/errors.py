"""depgraph exception hierarchy with structured diagnostics.

All exceptions accept either a plain message or a Diagnostic object for
rich error information.

Python 3.13+. Zero external dependencies.
"""

from collections.abc import Sequence

from .codes import Diagnostic
from .templates import ErrorTemplate


class GraphError(Exception):
    """Base exception for all depgraph errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize GraphError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.format_error())
        else:
            self.diagnostic = None
            super().__init__(message)


class UnknownNodeError(GraphError):
    """Edge or query references a node that was never added.

    Recoverable by constructing the store with the placeholder policy.

    Attributes:
        node_id: The missing id
    """

    def __init__(self, node_id: str, role: str = "node") -> None:
        super().__init__(ErrorTemplate.unknown_node(node_id, role))
        self.node_id = node_id


class UnknownEdgeError(GraphError):
    """A cycle or edge key references a pair with no edge between them."""

    def __init__(self, source: str, target: str, kind: str | None = None) -> None:
        super().__init__(ErrorTemplate.unknown_edge(source, target, kind))
        self.source = source
        self.target = target
        self.kind = kind


class NodeConflictError(GraphError):
    """Node id re-added with a different category (id collision)."""

    def __init__(self, node_id: str, existing: str, requested: str) -> None:
        super().__init__(ErrorTemplate.node_category_conflict(node_id, existing, requested))
        self.node_id = node_id
        self.existing = existing
        self.requested = requested


class CycleError(GraphError):
    """Topological order requested on a graph that is not acyclic.

    Always surfaced: an order generated under a hidden cycle is meaningless.
    Feed ``remaining_nodes`` to the SCC detector (via ``GraphStore.subgraph``)
    to obtain the concrete cycle.

    Attributes:
        remaining_nodes: Nodes left unordered, in input order
    """

    def __init__(self, remaining_nodes: Sequence[str]) -> None:
        self.remaining_nodes: tuple[str, ...] = tuple(remaining_nodes)
        super().__init__(ErrorTemplate.cycle_detected(self.remaining_nodes))


class InvariantViolation(GraphError):
    """Internal consistency failure; never expected, never recovered."""

    def __init__(self, detail: str) -> None:
        super().__init__(ErrorTemplate.invariant_violation(detail))


class ConfigError(GraphError):
    """Configuration file or mapping could not be turned into a GraphConfig."""


class SinkError(GraphError):
    """Streaming sink could not commit a batch within its retry budget.

    The batch is reported, not dropped: callers decide whether to abort the
    run or persist the entities another way.

    Attributes:
        attempts: Total attempts made for the batch
        dropped_nodes: Nodes in the uncommitted batch
        dropped_edges: Edges in the uncommitted batch
    """

    def __init__(
        self,
        message: str | Diagnostic,
        *,
        attempts: int = 0,
        dropped_nodes: int = 0,
        dropped_edges: int = 0,
    ) -> None:
        super().__init__(message)
        self.attempts = attempts
        self.dropped_nodes = dropped_nodes
        self.dropped_edges = dropped_edges
