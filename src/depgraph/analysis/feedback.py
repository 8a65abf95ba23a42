"""Greedy weighted feedback-arc selection.

Chooses a small, cheap set of arcs whose removal breaks every given cycle.
Minimum feedback arc set is NP-hard; this is the classic frequency / weight
greedy heuristic:

    score(arc) = cycles_through(arc) / max(weight(arc), epsilon)

The highest-scoring arc is taken, the cycles it breaks are retired, scores
are recomputed over the cycles still unbroken, and the loop repeats.

Arcs vs edges:
    A cycle is a node sequence, so it is broken only when *every* parallel
    edge between two consecutive nodes is gone. The unit of selection is
    therefore the arc ``(source, target)``, carrying all its parallel edges;
    its weight is the sum of their weights.

Ties:
    Equal scores are resolved by the lowest edge insertion index, so the
    result is deterministic for a given population order.

Python 3.13+.
"""

from __future__ import annotations

import heapq
import logging
import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TypeAlias

from depgraph.constants import WEIGHT_EPSILON
from depgraph.diagnostics import UnknownEdgeError, UnknownNodeError
from depgraph.graph import Edge, EdgeKey, GraphStore, NodeId

from .cycles import Cycle

__all__ = [
    "FeedbackArc",
    "FeedbackArcSelection",
    "WeightFunction",
    "select_feedback_arcs",
]

logger = logging.getLogger(__name__)

WeightFunction: TypeAlias = Callable[[Edge], float]
"""Removal cost of one edge; lower means safer to remove."""

_Arc: TypeAlias = tuple[NodeId, NodeId]


@dataclass(frozen=True, slots=True)
class FeedbackArc:
    """One selected arc.

    Attributes:
        source: Arc source node id
        target: Arc target node id
        edges: Every parallel edge source -> target, in insertion order
        weight: Summed removal cost of ``edges``
        cycles_broken: Cycles this arc broke that no earlier pick had broken
    """

    source: NodeId
    target: NodeId
    edges: tuple[Edge, ...]
    weight: float
    cycles_broken: int

    def as_dict(self) -> dict[str, object]:
        return {
            "source": self.source,
            "target": self.target,
            "edges": [e.as_dict() for e in self.edges],
            "weight": self.weight,
            "cycles_broken": self.cycles_broken,
        }


@dataclass(frozen=True, slots=True)
class FeedbackArcSelection:
    """Greedy selection result.

    Attributes:
        arcs: Selected arcs in pick order
        unbroken_cycles: Cycles left unbroken (empty on any completed run)
    """

    arcs: tuple[FeedbackArc, ...] = ()
    unbroken_cycles: tuple[Cycle, ...] = ()

    def edge_keys(self) -> tuple[EdgeKey, ...]:
        """Keys of every edge to remove, in pick order."""
        return tuple(edge.key for arc in self.arcs for edge in arc.edges)

    def as_dict(self) -> dict[str, object]:
        return {
            "arcs": [a.as_dict() for a in self.arcs],
            "unbroken_cycles": [c.as_dict() for c in self.unbroken_cycles],
        }


def _default_weight(edge: Edge) -> float:
    return edge.weight


def _arc_edges(graph: GraphStore, arc: _Arc) -> tuple[Edge, ...]:
    source, target = arc
    for node_id in arc:
        if not graph.has_node(node_id):
            raise UnknownNodeError(node_id)
    edges = graph.edges_between(source, target)
    if not edges:
        raise UnknownEdgeError(source, target)
    return edges


def select_feedback_arcs(
    graph: GraphStore,
    cycles: Sequence[Cycle],
    *,
    weight: WeightFunction | None = None,
    epsilon: float = WEIGHT_EPSILON,
) -> FeedbackArcSelection:
    """Pick arcs that break every cycle in ``cycles``.

    Args:
        graph: Graph the cycles were enumerated on
        cycles: Cycles to break
        weight: Per-edge removal cost; defaults to ``Edge.weight``
        epsilon: Floor applied to arc weights so zero-cost arcs score finitely

    Returns:
        FeedbackArcSelection; arcs in pick order

    Raises:
        UnknownNodeError: If a cycle names a node absent from ``graph``
        UnknownEdgeError: If a cycle names an arc with no edge in ``graph``
        ValueError: If an edge weight is negative or NaN, or epsilon is not positive

    Example:
        >>> g = GraphStore()
        >>> for n in "ABC":
        ...     _ = g.add_node(n)
        >>> for s, t in ("AB", "BC", "CA"):
        ...     _ = g.add_edge(s, t)
        >>> picks = select_feedback_arcs(g, [Cycle(("A", "B", "C", "A"))])
        >>> [(a.source, a.target) for a in picks.arcs]
        [('A', 'B')]
    """
    if epsilon <= 0:
        msg = f"epsilon must be positive, got {epsilon}"
        raise ValueError(msg)
    weigh = weight or _default_weight

    # Cycles through each arc, each cycle counted once per arc.
    cycles_through: dict[_Arc, list[int]] = {}
    arcs_of: list[tuple[_Arc, ...]] = []
    for number, cycle in enumerate(cycles):
        arcs = tuple(dict.fromkeys(cycle.arcs()))
        arcs_of.append(arcs)
        for arc in arcs:
            cycles_through.setdefault(arc, []).append(number)

    edges_of: dict[_Arc, tuple[Edge, ...]] = {}
    cost: dict[_Arc, float] = {}
    order: dict[_Arc, int] = {}
    for arc in cycles_through:
        edges = _arc_edges(graph, arc)
        total = 0.0
        for edge in edges:
            value = weigh(edge)
            if math.isnan(value) or value < 0:
                msg = (
                    f"Edge {edge.source} -> {edge.target} ({edge.kind!r}) "
                    f"has negative or NaN weight {value}"
                )
                raise ValueError(msg)
            total += value
        edges_of[arc] = edges
        cost[arc] = total
        order[arc] = min(graph.edge_index(e.key) for e in edges)

    frequency = {arc: len(numbers) for arc, numbers in cycles_through.items()}

    def score(arc: _Arc) -> float:
        return frequency[arc] / max(cost[arc], epsilon)

    # Lazy max-heap: stale entries are re-scored when popped.
    heap = [(-score(arc), order[arc], arc) for arc in cycles_through]
    heapq.heapify(heap)

    broken: set[int] = set()
    picks: list[FeedbackArc] = []
    while heap and len(broken) < len(arcs_of):
        neg_score, position, arc = heapq.heappop(heap)
        if frequency[arc] == 0:
            continue
        current = score(arc)
        if current != -neg_score:
            heapq.heappush(heap, (-current, position, arc))
            continue

        newly = [n for n in cycles_through[arc] if n not in broken]
        for number in newly:
            broken.add(number)
            for other in arcs_of[number]:
                frequency[other] -= 1
        picks.append(FeedbackArc(arc[0], arc[1], edges_of[arc], cost[arc], len(newly)))

    unbroken = tuple(c for n, c in enumerate(cycles) if n not in broken)
    logger.debug(
        "Selected %d arc(s) breaking %d of %d cycle(s)",
        len(picks),
        len(broken),
        len(arcs_of),
    )
    return FeedbackArcSelection(tuple(picks), unbroken)
