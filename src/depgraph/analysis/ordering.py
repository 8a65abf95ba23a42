"""Topological ordering (Kahn).

Direction convention:
    A dependency ``(source, target)`` reads "source depends on target".
    The target is emitted before the source: dependencies first.

    For foreign keys, ``(orders, customers)`` means the ``orders`` table
    references ``customers``, so ``customers`` is inserted first.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Collection, Iterable
from typing import TypeAlias

from depgraph.diagnostics import CycleError
from depgraph.graph import Edge, GraphStore, NodeId

__all__ = [
    "order_graph",
    "topological_order",
]

logger = logging.getLogger(__name__)

Dependency: TypeAlias = tuple[NodeId, NodeId] | Edge
"""Either a bare (source, target) pair or a graph Edge."""


def _pair(dependency: Dependency) -> tuple[NodeId, NodeId]:
    if isinstance(dependency, Edge):
        return dependency.source, dependency.target
    source, target = dependency
    return source, target


def topological_order(
    node_ids: Iterable[NodeId],
    dependencies: Iterable[Dependency],
) -> tuple[NodeId, ...]:
    """Order ``node_ids`` so that every dependency precedes its dependents.

    Kahn's algorithm with a FIFO queue seeded in ``node_ids`` order. Nodes
    freed by an emission are queued in the order they are freed, so the
    output is stable for a given input.

    Dependencies with an endpoint outside ``node_ids`` are ignored, which
    lets callers order one slice of a larger graph. Duplicate pairs count
    once.

    Args:
        node_ids: Nodes to order (duplicates ignored)
        dependencies: ``(source, target)`` pairs or Edges; source depends on target

    Returns:
        All nodes, dependencies first

    Raises:
        CycleError: If a cycle prevents a complete order. ``remaining_nodes``
            lists the unordered nodes in input order.

    Example:
        >>> topological_order(["orders", "customers"], [("orders", "customers")])
        ('customers', 'orders')
    """
    ids = tuple(dict.fromkeys(node_ids))
    members = set(ids)

    dependents: dict[NodeId, list[NodeId]] = {node_id: [] for node_id in ids}
    in_degree = dict.fromkeys(ids, 0)
    seen: set[tuple[NodeId, NodeId]] = set()

    for dependency in dependencies:
        source, target = _pair(dependency)
        if source not in members or target not in members:
            continue
        if (source, target) in seen:
            continue
        seen.add((source, target))
        dependents[target].append(source)
        in_degree[source] += 1

    queue = deque(node_id for node_id in ids if in_degree[node_id] == 0)
    ordered: list[NodeId] = []
    while queue:
        node_id = queue.popleft()
        ordered.append(node_id)
        for dependent in dependents[node_id]:
            in_degree[dependent] -= 1
            if in_degree[dependent] == 0:
                queue.append(dependent)

    if len(ordered) != len(ids):
        remaining = [node_id for node_id in ids if in_degree[node_id] > 0]
        logger.debug("Ordering stopped with %d node(s) on cycles", len(remaining))
        raise CycleError(remaining)

    return tuple(ordered)


def order_graph(
    graph: GraphStore,
    *,
    kinds: Collection[str] | None = None,
) -> tuple[NodeId, ...]:
    """Topologically order every node of ``graph``.

    An edge ``A -> B`` means A depends on B, so B comes first.

    Args:
        graph: Fully populated graph store
        kinds: Only edges of these kinds constrain the order; None = all edges

    Raises:
        CycleError: If the constraining edges form a cycle
    """
    edges = graph.edges() if kinds is None else (e for e in graph.edges() if e.kind in kinds)
    return topological_order(graph.node_ids(), edges)
