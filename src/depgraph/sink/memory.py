"""Dict-backed GraphSink with transactional staging.

Useful as a test double and for small exports. Writes are staged and only
become visible to queries after ``commit()``; ``rollback()`` drops them.
Upserts merge attributes into the stored entity, matching what a graph
database ``MERGE ... SET r += attributes`` does.

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence

from depgraph.graph import Edge, EdgeKey, Node, NodeId, merge_attributes

__all__ = ["InMemoryGraphSink"]


class InMemoryGraphSink:
    """In-process sink; implements the GraphSink protocol."""

    __slots__ = ("_edges", "_nodes", "_open", "_staged_edges", "_staged_nodes", "commits")

    def __init__(self) -> None:
        self._nodes: dict[NodeId, Node] = {}
        self._edges: dict[EdgeKey, Edge] = {}
        self._staged_nodes: dict[NodeId, Node] = {}
        self._staged_edges: dict[EdgeKey, Edge] = {}
        self._open = False
        self.commits = 0

    @property
    def is_open(self) -> bool:
        return self._open

    def open(self) -> None:
        self._open = True

    def close(self) -> None:
        self.rollback()
        self._open = False

    def write_nodes(self, batch: Sequence[Node]) -> None:
        for node in batch:
            self._staged_nodes[node.id] = self._merge_node(node)

    def write_edges(self, batch: Sequence[Edge]) -> None:
        for edge in batch:
            self._staged_edges[edge.key] = self._merge_edge(edge)

    def _merge_node(self, node: Node) -> Node:
        current = self._staged_nodes.get(node.id) or self._nodes.get(node.id)
        if current is None:
            return node
        return Node(node.id, node.category, merge_attributes(current.attributes, node.attributes))

    def _merge_edge(self, edge: Edge) -> Edge:
        current = self._staged_edges.get(edge.key) or self._edges.get(edge.key)
        if current is None:
            return edge
        attributes = merge_attributes(current.attributes, edge.attributes)
        return Edge(edge.source, edge.target, edge.kind, edge.weight, attributes)

    def commit(self) -> None:
        self._nodes.update(self._staged_nodes)
        self._edges.update(self._staged_edges)
        self._staged_nodes.clear()
        self._staged_edges.clear()
        self.commits += 1

    def rollback(self) -> None:
        self._staged_nodes.clear()
        self._staged_edges.clear()

    # ------------------------------------------------------------------
    # Queries over committed data
    # ------------------------------------------------------------------

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def edge_count(self) -> int:
        return len(self._edges)

    def node(self, node_id: NodeId) -> Node | None:
        return self._nodes.get(node_id)

    def edge(self, source: NodeId, target: NodeId, kind: str = "") -> Edge | None:
        return self._edges.get((source, target, kind))

    def nodes(self) -> Iterator[Node]:
        return iter(self._nodes.values())

    def edges(self) -> Iterator[Edge]:
        return iter(self._edges.values())

    def sources_of(self, target: NodeId, kind: str | None = None) -> tuple[NodeId, ...]:
        """Distinct committed sources pointing at ``target`` (callers, usages)."""
        return tuple(
            dict.fromkeys(
                e.source
                for e in self._edges.values()
                if e.target == target and (kind is None or e.kind == kind)
            )
        )

    def targets_of(self, source: NodeId, kind: str | None = None) -> tuple[NodeId, ...]:
        """Distinct committed targets of ``source`` (callees)."""
        return tuple(
            dict.fromkeys(
                e.target
                for e in self._edges.values()
                if e.source == source and (kind is None or e.kind == kind)
            )
        )
