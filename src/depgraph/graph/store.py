"""In-memory graph store.

Owns the nodes and edges of one analysis run. Populated once by external
producers (source traversal, schema readers), then read by the algorithms.

Determinism:
    Every iteration order is insertion order: ``nodes()``, ``edges()``,
    ``outgoing()``, ``incoming()``, ``successors()``. Outputs built on top
    of the store reproduce byte-for-byte on identical input.

Complexity:
    Upserts and lookups are O(1) amortized. The reverse (incoming) index is
    built lazily in O(E) on first use and dropped on any mutation.

Thread Safety:
    Not thread-safe. Each run owns a private store.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Collection, Iterable, Iterator, Mapping
from dataclasses import replace
from typing import TYPE_CHECKING

from depgraph.constants import DEFAULT_EDGE_WEIGHT, PLACEHOLDER_CATEGORY
from depgraph.diagnostics import NodeConflictError, UnknownEdgeError, UnknownNodeError
from depgraph.enums import UnknownNodePolicy, WeightAggregation

from .model import Edge, EdgeKey, Node, NodeId, merge_attributes

if TYPE_CHECKING:
    from depgraph.config import AnalysisConfig

__all__ = ["GraphStore"]

logger = logging.getLogger(__name__)


class GraphStore:
    """Directed multigraph with idempotent upserts and stable iteration.

    Example:
        >>> graph = GraphStore()
        >>> for bean in ("orderService", "paymentService"):
        ...     _ = graph.add_node(bean, "bean")
        >>> _ = graph.add_edge("orderService", "paymentService", "field")
        >>> _ = graph.add_edge("paymentService", "orderService", "constructor")
        >>> [e.target for e in graph.outgoing("orderService")]
        ['paymentService']
    """

    __slots__ = (
        "_edge_order",
        "_edges",
        "_incoming",
        "_next_edge_index",
        "_nodes",
        "_outgoing",
        "_placeholders",
        "_policy",
    )

    def __init__(self, unknown_node_policy: UnknownNodePolicy = UnknownNodePolicy.REJECT) -> None:
        """Create an empty store.

        Args:
            unknown_node_policy: What add_edge() does with unknown endpoints
        """
        self._policy = UnknownNodePolicy(unknown_node_policy)
        self._nodes: dict[NodeId, Node] = {}
        self._edges: dict[EdgeKey, Edge] = {}
        self._edge_order: dict[EdgeKey, int] = {}
        self._next_edge_index = 0
        self._outgoing: dict[NodeId, list[EdgeKey]] = {}
        self._incoming: dict[NodeId, list[EdgeKey]] | None = None
        self._placeholders: dict[NodeId, None] = {}

    @classmethod
    def from_config(cls, config: AnalysisConfig) -> GraphStore:
        """Create an empty store using the configured unknown-node policy."""
        return cls(config.unknown_node_policy)

    @property
    def unknown_node_policy(self) -> UnknownNodePolicy:
        return self._policy

    # ------------------------------------------------------------------
    # Population
    # ------------------------------------------------------------------

    def add_node(
        self,
        node_id: NodeId,
        category: str = "",
        attributes: Mapping[str, str] | None = None,
    ) -> Node:
        """Insert a node, or merge attributes into an existing one.

        Re-adding a placeholder under a real category resolves the
        placeholder in place (its position in iteration order is kept).

        Args:
            node_id: Unique id
            category: Caller-defined tag
            attributes: Attributes to merge

        Returns:
            The stored node

        Raises:
            NodeConflictError: If the id exists under a different category
        """
        existing = self._nodes.get(node_id)
        if existing is None:
            node = Node(node_id, category, attributes or {})
            self._nodes[node_id] = node
            self._outgoing[node_id] = []
            self._invalidate()
            return node

        if existing.category != category:
            if node_id not in self._placeholders:
                raise NodeConflictError(node_id, existing.category, category)
            del self._placeholders[node_id]
            logger.debug("Resolved placeholder node: %s -> %s", node_id, category)
            existing = replace(existing, category=category)

        node = existing.with_attributes(attributes)
        self._nodes[node_id] = node
        return node

    def add_edge(
        self,
        source: NodeId,
        target: NodeId,
        kind: str = "",
        weight: float = DEFAULT_EDGE_WEIGHT,
        attributes: Mapping[str, str] | None = None,
        *,
        aggregation: WeightAggregation = WeightAggregation.REPLACE,
    ) -> Edge:
        """Insert an edge, or upsert the edge with the same (source, target, kind).

        Args:
            source: Source node id
            target: Target node id
            kind: Caller-defined tag
            weight: Non-negative removal cost
            attributes: Attributes to merge
            aggregation: How a re-inserted edge's weight combines with the stored one

        Returns:
            The stored edge

        Raises:
            UnknownNodeError: If an endpoint is absent and the policy is REJECT
            ValueError: If weight is negative or NaN
        """
        candidate = Edge(source, target, kind, weight, attributes or {})
        self._require_endpoint(source, "source")
        self._require_endpoint(target, "target")

        key = candidate.key
        existing = self._edges.get(key)
        if existing is None:
            edge = candidate
            self._edges[key] = edge
            self._edge_order[key] = self._next_edge_index
            self._next_edge_index += 1
            self._outgoing[source].append(key)
            self._invalidate()
            return edge

        match WeightAggregation(aggregation):
            case WeightAggregation.REPLACE:
                combined = weight
            case WeightAggregation.MAX:
                combined = max(existing.weight, weight)
            case WeightAggregation.SUM:
                combined = existing.weight + weight

        edge = replace(
            existing,
            weight=combined,
            attributes=merge_attributes(existing.attributes, candidate.attributes),
        )
        self._edges[key] = edge
        return edge

    def _require_endpoint(self, node_id: NodeId, role: str) -> None:
        if node_id in self._nodes:
            return
        if self._policy is UnknownNodePolicy.REJECT:
            raise UnknownNodeError(node_id, role)
        self.add_node(node_id, PLACEHOLDER_CATEGORY)
        self._placeholders[node_id] = None
        logger.debug("Created placeholder node for unknown %s: %s", role, node_id)

    def _invalidate(self) -> None:
        self._incoming = None

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def edge_count(self) -> int:
        return len(self._edges)

    def has_node(self, node_id: NodeId) -> bool:
        return node_id in self._nodes

    def has_edge(self, source: NodeId, target: NodeId, kind: str | None = None) -> bool:
        """Check for an edge; ``kind=None`` matches any kind."""
        if kind is not None:
            return (source, target, kind) in self._edges
        return any(key[1] == target for key in self._outgoing.get(source, ()))

    def node(self, node_id: NodeId) -> Node:
        """Return the node with ``node_id``.

        Raises:
            UnknownNodeError: If absent
        """
        try:
            return self._nodes[node_id]
        except KeyError:
            raise UnknownNodeError(node_id) from None

    def edge(self, source: NodeId, target: NodeId, kind: str = "") -> Edge:
        """Return the edge with the given key.

        Raises:
            UnknownEdgeError: If absent
        """
        try:
            return self._edges[(source, target, kind)]
        except KeyError:
            raise UnknownEdgeError(source, target, kind) from None

    def edge_index(self, key: EdgeKey) -> int:
        """Insertion ordinal of an edge, used for deterministic tie-breaks.

        Raises:
            UnknownEdgeError: If absent
        """
        try:
            return self._edge_order[key]
        except KeyError:
            raise UnknownEdgeError(*key) from None

    def edges_between(self, source: NodeId, target: NodeId) -> tuple[Edge, ...]:
        """All parallel edges source -> target, in insertion order."""
        return tuple(self._edges[k] for k in self._outgoing_keys(source) if k[1] == target)

    def placeholders(self) -> tuple[NodeId, ...]:
        """Ids of nodes auto-created for unknown endpoints and not yet resolved."""
        return tuple(self._placeholders)

    # ------------------------------------------------------------------
    # Iteration
    # ------------------------------------------------------------------

    def nodes(self) -> Iterator[Node]:
        """Iterate nodes in insertion order. Each call starts a fresh pass."""
        return iter(self._nodes.values())

    def node_ids(self) -> Iterator[NodeId]:
        """Iterate node ids in insertion order."""
        return iter(self._nodes)

    def edges(self) -> Iterator[Edge]:
        """Iterate edges in insertion order. Each call starts a fresh pass."""
        return iter(self._edges.values())

    def outgoing(self, node_id: NodeId) -> tuple[Edge, ...]:
        """Edges leaving ``node_id``, in insertion order."""
        return tuple(self._edges[k] for k in self._outgoing_keys(node_id))

    def incoming(self, node_id: NodeId) -> tuple[Edge, ...]:
        """Edges entering ``node_id``, in insertion order."""
        if node_id not in self._nodes:
            raise UnknownNodeError(node_id)
        return tuple(self._edges[k] for k in self._reverse_index().get(node_id, ()))

    def successors(self, node_id: NodeId) -> tuple[NodeId, ...]:
        """Distinct targets of ``node_id`` (parallel edges collapsed)."""
        return tuple(dict.fromkeys(k[1] for k in self._outgoing_keys(node_id)))

    def predecessors(self, node_id: NodeId) -> tuple[NodeId, ...]:
        """Distinct sources pointing at ``node_id`` (parallel edges collapsed)."""
        return tuple(dict.fromkeys(e.source for e in self.incoming(node_id)))

    def adjacency(self) -> dict[NodeId, tuple[NodeId, ...]]:
        """Successor lists for every node, both in insertion order."""
        return {node_id: self.successors(node_id) for node_id in self._nodes}

    def _outgoing_keys(self, node_id: NodeId) -> list[EdgeKey]:
        try:
            return self._outgoing[node_id]
        except KeyError:
            raise UnknownNodeError(node_id) from None

    def _reverse_index(self) -> dict[NodeId, list[EdgeKey]]:
        if self._incoming is None:
            incoming: dict[NodeId, list[EdgeKey]] = {}
            for key in self._edges:
                incoming.setdefault(key[1], []).append(key)
            self._incoming = incoming
        return self._incoming

    # ------------------------------------------------------------------
    # Relationship queries
    # ------------------------------------------------------------------

    def sources_of(self, target: NodeId, kind: str | None = None) -> tuple[NodeId, ...]:
        """Distinct nodes with an edge into ``target`` (e.g. callers, users).

        Args:
            target: Node being pointed at
            kind: Restrict to one edge kind; None matches all
        """
        return tuple(
            dict.fromkeys(
                e.source for e in self.incoming(target) if kind is None or e.kind == kind
            )
        )

    def targets_of(self, source: NodeId, kind: str | None = None) -> tuple[NodeId, ...]:
        """Distinct nodes ``source`` points at (e.g. callees, injected beans).

        Args:
            source: Node pointing out
            kind: Restrict to one edge kind; None matches all
        """
        return tuple(
            dict.fromkeys(
                e.target for e in self.outgoing(source) if kind is None or e.kind == kind
            )
        )

    # ------------------------------------------------------------------
    # Derived graphs
    # ------------------------------------------------------------------

    def subgraph(self, node_ids: Iterable[NodeId]) -> GraphStore:
        """Induced subgraph on ``node_ids``.

        Node and edge insertion order follow this store, not ``node_ids``.

        Raises:
            UnknownNodeError: If an id is absent
        """
        wanted = set(node_ids)
        for node_id in wanted:
            if node_id not in self._nodes:
                raise UnknownNodeError(node_id)
        return self._copy(
            node_filter=wanted.__contains__,
            edge_filter=lambda key: key[0] in wanted and key[1] in wanted,
        )

    def without_edges(self, keys: Collection[EdgeKey]) -> GraphStore:
        """Copy of this store with the given edges removed."""
        removed = set(keys)
        return self._copy(node_filter=lambda _: True, edge_filter=lambda key: key not in removed)

    def _copy(
        self,
        node_filter: Callable[[NodeId], bool],
        edge_filter: Callable[[EdgeKey], bool],
    ) -> GraphStore:
        clone = GraphStore(self._policy)
        for node_id, node in self._nodes.items():
            if node_filter(node_id):
                clone._nodes[node_id] = node
                clone._outgoing[node_id] = []
                if node_id in self._placeholders:
                    clone._placeholders[node_id] = None
        for key, edge in self._edges.items():
            if edge_filter(key):
                clone._edges[key] = edge
                clone._edge_order[key] = self._edge_order[key]
                clone._outgoing[key[0]].append(key)
        clone._next_edge_index = self._next_edge_index
        return clone

    def __repr__(self) -> str:
        return f"GraphStore(nodes={len(self._nodes)}, edges={len(self._edges)})"
