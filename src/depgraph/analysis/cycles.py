"""Elementary cycle enumeration (Johnson), bounded.

Lists the elementary cycles of one strongly connected component. Cycles
cannot cross SCC boundaries, so enumeration is always scoped to one SCC's
induced subgraph; parallel edges between the same ordered pair collapse to
one arc (cycles are node sequences).

Bounds:
    Johnson's algorithm is O((V + E)(C + 1)) for C cycles, and C can be
    exponential. Every run is bounded by ``max_cycles`` and
    ``max_cycle_length``. Hitting either bound sets ``truncated=True`` and
    records a TruncationWarning, so a partial report is never mistaken for
    a complete one.

    The length bound is exact: a pruned continuation marks the result
    truncated only if it can still return to the start vertex without
    revisiting the path, i.e. a longer cycle was actually skipped.

Determinism:
    Start vertices follow the component's node order (graph insertion
    order) and successors follow edge insertion order.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass

from depgraph.constants import DEFAULT_MAX_CYCLES
from depgraph.diagnostics import TruncationWarning
from depgraph.enums import TruncationBound
from depgraph.graph import GraphStore, NodeId

from .scc import StronglyConnectedComponent, find_strongly_connected_components

__all__ = [
    "Cycle",
    "CycleEnumeration",
    "enumerate_all_cycles",
    "enumerate_cycles",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Cycle:
    """Elementary cycle ``(n0, ..., n(k-1), n0)``.

    Attributes:
        nodes: Closed node sequence; the first id is repeated at the end
        component: Index of the SCC the cycle belongs to
    """

    nodes: tuple[NodeId, ...]
    component: int = 0

    def __post_init__(self) -> None:
        """Validate closure.

        Raises:
            ValueError: If fewer than two entries or first != last
        """
        if len(self.nodes) < 2 or self.nodes[0] != self.nodes[-1]:
            msg = f"Cycle must be closed (first node repeated last), got {self.nodes!r}"
            raise ValueError(msg)

    @property
    def length(self) -> int:
        """Number of distinct nodes (arcs) in the cycle."""
        return len(self.nodes) - 1

    def arcs(self) -> tuple[tuple[NodeId, NodeId], ...]:
        """Consecutive (source, target) pairs, in cycle order."""
        return tuple(zip(self.nodes, self.nodes[1:], strict=False))

    def as_dict(self) -> dict[str, object]:
        return {"nodes": list(self.nodes), "component": self.component}


@dataclass(frozen=True, slots=True)
class CycleEnumeration:
    """Result of a bounded enumeration.

    Attributes:
        cycles: Elementary cycles found, in discovery order
        truncated: True if a bound stopped the enumeration early
        warnings: One TruncationWarning per bound hit
    """

    cycles: tuple[Cycle, ...] = ()
    truncated: bool = False
    warnings: tuple[TruncationWarning, ...] = ()

    def __len__(self) -> int:
        return len(self.cycles)

    def as_dict(self) -> dict[str, object]:
        return {
            "cycles": [c.as_dict() for c in self.cycles],
            "truncated": self.truncated,
            "warnings": [w.as_dict() for w in self.warnings],
        }


@dataclass(slots=True)
class _LengthCut:
    """Mutable flag set when the length bound skips a longer cycle."""

    hit: bool = False


def _validate_bounds(max_cycles: int, max_cycle_length: int | None) -> None:
    if max_cycles < 1:
        msg = f"max_cycles must be positive, got {max_cycles}"
        raise ValueError(msg)
    if max_cycle_length is not None and max_cycle_length < 1:
        msg = f"max_cycle_length must be positive, got {max_cycle_length}"
        raise ValueError(msg)


def _reachable(
    start: NodeId, scope: set[NodeId], neighbours: Mapping[NodeId, Sequence[NodeId]]
) -> set[NodeId]:
    seen = {start}
    pending = [start]
    while pending:
        node = pending.pop()
        for nxt in neighbours[node]:
            if nxt in scope and nxt not in seen:
                seen.add(nxt)
                pending.append(nxt)
    return seen


def _returns_to(
    start: NodeId,
    node: NodeId,
    scope: set[NodeId],
    on_path: set[NodeId],
    successors: Mapping[NodeId, Sequence[NodeId]],
) -> bool:
    """True if ``node`` reaches ``start`` inside ``scope`` avoiding ``on_path``."""
    seen = {node}
    pending = [node]
    while pending:
        current = pending.pop()
        for nxt in successors[current]:
            if nxt == start:
                return True
            if nxt in scope and nxt not in on_path and nxt not in seen:
                seen.add(nxt)
                pending.append(nxt)
    return False


def _unblock(
    node: NodeId,
    blocked: set[NodeId],
    blocked_by: defaultdict[NodeId, set[NodeId]],
    on_path: set[NodeId],
) -> None:
    pending = [node]
    while pending:
        current = pending.pop()
        if current not in blocked:
            continue
        # Path members stay blocked so every reported cycle is elementary.
        if current not in on_path:
            blocked.discard(current)
        pending.extend(blocked_by.pop(current, ()))


def _circuits(
    start: NodeId,
    scope: set[NodeId],
    successors: Mapping[NodeId, Sequence[NodeId]],
    max_length: int,
    cut: _LengthCut,
) -> Iterator[tuple[NodeId, ...]]:
    """Yield every elementary cycle through ``start`` inside ``scope``.

    Iterative form of Johnson's CIRCUIT procedure: ``blocked`` holds nodes
    that cannot currently reach ``start`` without touching the path,
    ``blocked_by`` is Johnson's B-lists.
    """
    path = [start]
    on_path = {start}
    blocked = {start}
    blocked_by: defaultdict[NodeId, set[NodeId]] = defaultdict(set)
    # closed[i] is True once path[i] is known to lie on (or be pruned toward) a cycle
    closed = [False]
    stack = [iter(successors[start])]

    while stack:
        for nxt in stack[-1]:
            if nxt not in scope:
                continue
            if nxt == start:
                yield (*path, start)
                closed[-1] = True
            elif nxt not in blocked:
                if len(path) >= max_length:
                    if not cut.hit and _returns_to(start, nxt, scope, on_path, successors):
                        cut.hit = True
                    # Treat as closed so pruned nodes are unblocked again.
                    closed[-1] = True
                    continue
                path.append(nxt)
                on_path.add(nxt)
                blocked.add(nxt)
                closed.append(False)
                stack.append(iter(successors[nxt]))
                break
        else:
            stack.pop()
            node = path.pop()
            on_path.discard(node)
            if closed.pop():
                if closed:
                    closed[-1] = True
                _unblock(node, blocked, blocked_by, on_path)
            else:
                for nxt in successors[node]:
                    if nxt in scope:
                        blocked_by[nxt].add(node)


def _component_cycles(
    graph: GraphStore,
    component: StronglyConnectedComponent,
    max_length: int,
    cut: _LengthCut,
) -> Iterator[tuple[NodeId, ...]]:
    members = component.nodes
    member_set = set(members)
    successors = {n: tuple(s for s in graph.successors(n) if s in member_set) for n in members}
    predecessors: dict[NodeId, list[NodeId]] = {n: [] for n in members}
    for node, targets in successors.items():
        for target in targets:
            predecessors[target].append(node)

    remaining = set(members)
    for start in members:
        # Johnson: cycles through `start` within the SCC of the subgraph
        # induced by `start` and the vertices after it.
        scope = _reachable(start, remaining, successors) & _reachable(
            start, remaining, predecessors
        )
        if len(scope) > 1 or start in successors[start]:
            yield from _circuits(start, scope, successors, max_length, cut)
        remaining.discard(start)


def enumerate_cycles(
    graph: GraphStore,
    component: StronglyConnectedComponent,
    *,
    max_cycles: int = DEFAULT_MAX_CYCLES,
    max_cycle_length: int | None = None,
) -> CycleEnumeration:
    """Enumerate elementary cycles of one SCC.

    Args:
        graph: Graph the component was computed on
        component: Component to enumerate (trivial components yield nothing)
        max_cycles: Stop after this many cycles if more exist
        max_cycle_length: Longest cycle (distinct nodes) explored; None = component size

    Returns:
        CycleEnumeration with ``truncated=True`` if a bound was hit

    Raises:
        ValueError: If a bound is not positive

    Example:
        >>> g = GraphStore()
        >>> for n in "ABC":
        ...     _ = g.add_node(n)
        >>> for s, t in ("AB", "BC", "CA"):
        ...     _ = g.add_edge(s, t)
        >>> [scc] = find_strongly_connected_components(g)
        >>> enumerate_cycles(g, scc).cycles[0].nodes
        ('A', 'B', 'C', 'A')
    """
    _validate_bounds(max_cycles, max_cycle_length)
    if not component.cycle_bearing:
        return CycleEnumeration()

    max_length = component.size if max_cycle_length is None else max_cycle_length
    cut = _LengthCut()
    found: list[Cycle] = []
    warnings: list[TruncationWarning] = []

    for nodes in _component_cycles(graph, component, max_length, cut):
        if len(found) == max_cycles:
            warnings.append(
                TruncationWarning(
                    TruncationBound.MAX_CYCLES, component.index, max_cycles, len(found)
                )
            )
            break
        found.append(Cycle(nodes, component.index))

    if cut.hit:
        warnings.append(
            TruncationWarning(
                TruncationBound.MAX_CYCLE_LENGTH, component.index, max_length, len(found)
            )
        )

    logger.debug(
        "Component %d: %d cycle(s)%s",
        component.index,
        len(found),
        " (truncated)" if warnings else "",
    )
    return CycleEnumeration(tuple(found), bool(warnings), tuple(warnings))


def enumerate_all_cycles(
    graph: GraphStore,
    components: Sequence[StronglyConnectedComponent] | None = None,
    *,
    max_cycles: int = DEFAULT_MAX_CYCLES,
    max_cycle_length: int | None = None,
) -> CycleEnumeration:
    """Enumerate cycles of every cycle-bearing SCC under one shared budget.

    ``max_cycles`` bounds the whole run. Once it is spent, remaining
    cycle-bearing components are skipped and each gets a MAX_CYCLES
    warning with ``reported=0``.

    Args:
        graph: Fully populated graph store
        components: Result of find_strongly_connected_components (computed if omitted)
        max_cycles: Total cycle budget for the run
        max_cycle_length: Longest cycle explored; None = size of each component

    Returns:
        Merged CycleEnumeration, cycles grouped by component in component order
    """
    _validate_bounds(max_cycles, max_cycle_length)
    if components is None:
        components = find_strongly_connected_components(graph)

    cycles: list[Cycle] = []
    warnings: list[TruncationWarning] = []
    for component in components:
        if not component.cycle_bearing:
            continue
        budget = max_cycles - len(cycles)
        if budget == 0:
            warnings.append(
                TruncationWarning(TruncationBound.MAX_CYCLES, component.index, max_cycles, 0)
            )
            continue
        result = enumerate_cycles(
            graph, component, max_cycles=budget, max_cycle_length=max_cycle_length
        )
        cycles.extend(result.cycles)
        for warning in result.warnings:
            if warning.bound is TruncationBound.MAX_CYCLES:
                # Report the run-wide budget, not the component's remainder.
                warnings.append(
                    TruncationWarning(
                        warning.bound, warning.component, max_cycles, warning.reported
                    )
                )
            else:
                warnings.append(warning)

    return CycleEnumeration(tuple(cycles), bool(warnings), tuple(warnings))
