"""Strongly connected components (Tarjan).

Partitions a graph into SCCs in one O(V + E) pass. The pass is iterative
(explicit stack) so that long dependency chains do not hit Python's
recursion limit.

Output order:
    Tarjan completes a component only after every component reachable
    from it, so components come out in reverse topological order of the
    condensation graph: sinks first. Callers that need dependencies before
    dependents (A depends on B means edge A -> B) can use this order
    directly.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass

from depgraph.diagnostics import InvariantViolation
from depgraph.graph import GraphStore, NodeId

__all__ = [
    "Condensation",
    "StronglyConnectedComponent",
    "condensation",
    "cycle_bearing_components",
    "find_strongly_connected_components",
    "strongly_connected",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StronglyConnectedComponent:
    """One SCC.

    Attributes:
        index: Position in reverse topological order (0 = a sink component)
        nodes: Member ids in graph insertion order
        cycle_bearing: True for two or more members, or one member with a self edge
    """

    index: int
    nodes: tuple[NodeId, ...]
    cycle_bearing: bool

    @property
    def size(self) -> int:
        return len(self.nodes)

    @property
    def is_trivial(self) -> bool:
        """Single node without a self edge."""
        return not self.cycle_bearing

    def as_dict(self) -> dict[str, object]:
        return {"index": self.index, "nodes": list(self.nodes), "cycle_bearing": self.cycle_bearing}


@dataclass(frozen=True, slots=True)
class Condensation:
    """DAG formed by contracting each SCC to one vertex.

    Attributes:
        component_of: Node id -> component index
        edges: Distinct (from_component, to_component) pairs, first-seen order
    """

    component_of: Mapping[NodeId, int]
    edges: tuple[tuple[int, int], ...]


def strongly_connected(
    order: Iterable[NodeId],
    successors: Callable[[NodeId], Iterable[NodeId]],
) -> list[list[NodeId]]:
    """Tarjan's algorithm over an abstract graph.

    Args:
        order: Root visiting order (every node of the graph)
        successors: Neighbours of a node, in deterministic order

    Returns:
        Components in completion order (reverse topological), members in
        stack-pop order
    """
    index: dict[NodeId, int] = {}
    lowlink: dict[NodeId, int] = {}
    on_stack: set[NodeId] = set()
    stack: list[NodeId] = []
    components: list[list[NodeId]] = []
    counter = 0

    for root in order:
        if root in index:
            continue

        index[root] = lowlink[root] = counter
        counter += 1
        stack.append(root)
        on_stack.add(root)
        # Work stack entries: (node, iterator over its remaining successors)
        work = [(root, iter(successors(root)))]

        while work:
            node, neighbours = work[-1]
            for nxt in neighbours:
                if nxt not in index:
                    index[nxt] = lowlink[nxt] = counter
                    counter += 1
                    stack.append(nxt)
                    on_stack.add(nxt)
                    work.append((nxt, iter(successors(nxt))))
                    break
                if nxt in on_stack:
                    lowlink[node] = min(lowlink[node], index[nxt])
            else:
                work.pop()
                if work:
                    parent = work[-1][0]
                    lowlink[parent] = min(lowlink[parent], lowlink[node])
                if lowlink[node] == index[node]:
                    members: list[NodeId] = []
                    while True:
                        member = stack.pop()
                        on_stack.discard(member)
                        members.append(member)
                        if member == node:
                            break
                    components.append(members)

    return components


def find_strongly_connected_components(
    graph: GraphStore,
) -> tuple[StronglyConnectedComponent, ...]:
    """Partition ``graph`` into strongly connected components.

    Roots are visited in node insertion order and successors in edge
    insertion order, so the result is deterministic.

    Args:
        graph: Fully populated graph store

    Returns:
        Components in reverse topological order of the condensation graph

    Raises:
        InvariantViolation: If a node lands in two components or none

    Example:
        >>> g = GraphStore()
        >>> for n in "abc":
        ...     _ = g.add_node(n)
        >>> _ = g.add_edge("a", "b"); _ = g.add_edge("b", "a"); _ = g.add_edge("b", "c")
        >>> [c.nodes for c in find_strongly_connected_components(g)]
        [('c',), ('a', 'b')]

    Complexity:
        Time: O(V + E)
        Space: O(V)
    """
    position = {node_id: i for i, node_id in enumerate(graph.node_ids())}
    raw = strongly_connected(position, graph.successors)

    assigned: set[NodeId] = set()
    components: list[StronglyConnectedComponent] = []
    for idx, members in enumerate(raw):
        for member in members:
            if member in assigned:
                msg = f"node '{member}' assigned to more than one SCC"
                raise InvariantViolation(msg)
            assigned.add(member)
        ordered = tuple(sorted(members, key=position.__getitem__))
        if len(ordered) > 1:
            bearing = True
        else:
            bearing = graph.has_edge(ordered[0], ordered[0])
        components.append(StronglyConnectedComponent(idx, ordered, bearing))

    if len(assigned) != len(position):
        msg = f"{len(position) - len(assigned)} node(s) not assigned to any SCC"
        raise InvariantViolation(msg)

    logger.debug(
        "Found %d SCC(s), %d cycle-bearing, over %d node(s)",
        len(components),
        sum(1 for c in components if c.cycle_bearing),
        len(position),
    )
    return tuple(components)


def cycle_bearing_components(
    graph: GraphStore,
    components: Sequence[StronglyConnectedComponent] | None = None,
) -> tuple[StronglyConnectedComponent, ...]:
    """Components that contain at least one cycle."""
    if components is None:
        components = find_strongly_connected_components(graph)
    return tuple(c for c in components if c.cycle_bearing)


def condensation(
    graph: GraphStore,
    components: Sequence[StronglyConnectedComponent] | None = None,
) -> Condensation:
    """Contract each SCC of ``graph`` to one vertex.

    Args:
        graph: Graph the components were computed on
        components: Result of find_strongly_connected_components (computed if omitted)

    Returns:
        Condensation with the node -> component map and distinct inter-component edges
    """
    if components is None:
        components = find_strongly_connected_components(graph)
    component_of = {node_id: c.index for c in components for node_id in c.nodes}

    pairs: dict[tuple[int, int], None] = {}
    for edge in graph.edges():
        pair = (component_of[edge.source], component_of[edge.target])
        if pair[0] != pair[1]:
            pairs[pair] = None
    return Condensation(component_of=component_of, edges=tuple(pairs))
