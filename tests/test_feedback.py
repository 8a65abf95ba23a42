"""Tests for analysis/feedback.py: greedy weighted feedback-arc selection.

Tested components:
- select_feedback_arcs: scoring, tie-breaks, parallel edges, custom weights
- FeedbackArcSelection: edge_keys, as_dict
- Error paths: unknown arcs, negative weights, bad epsilon

Properties tested:
- Soundness: every input cycle contains a selected arc
- Removing the selected edges leaves the graph acyclic (untruncated input)

Python 3.13+.
"""

from __future__ import annotations

import pytest
from hypothesis import given, settings

from depgraph.analysis import (
    Cycle,
    enumerate_all_cycles,
    select_feedback_arcs,
    verify_breaks_cycles,
)
from depgraph.diagnostics import UnknownEdgeError, UnknownNodeError
from depgraph.graph import Edge, GraphStore
from tests.strategies import graph_stores


def _graph(nodes: str, edges: list[str]) -> GraphStore:
    graph = GraphStore()
    for node_id in nodes:
        graph.add_node(node_id)
    for pair in edges:
        graph.add_edge(pair[0], pair[1])
    return graph


def _picked(graph: GraphStore, **kwargs: object) -> list[tuple[str, str]]:
    cycles = enumerate_all_cycles(graph).cycles
    selection = select_feedback_arcs(graph, cycles, **kwargs)  # type: ignore[arg-type]
    return [(a.source, a.target) for a in selection.arcs]


class TestSelection:
    """Unit tests for the greedy selector."""

    def test_triangle_picks_first_arc(self) -> None:
        """Equal scores: the lowest edge insertion index wins."""
        assert _picked(_graph("ABC", ["AB", "BC", "CA"])) == [("A", "B")]

    def test_shared_arc_preferred(self) -> None:
        """An arc on two cycles outscores arcs on one."""
        graph = _graph("ABC", ["AB", "BA", "BC", "CA"])
        assert _picked(graph) == [("A", "B")]

    def test_cheap_arc_preferred(self) -> None:
        """Lower weight raises the score."""
        graph = GraphStore()
        for node_id in "ABC":
            graph.add_node(node_id)
        graph.add_edge("A", "B", weight=5.0)
        graph.add_edge("B", "C", weight=5.0)
        graph.add_edge("C", "A", weight=0.5)
        assert _picked(graph) == [("C", "A")]

    def test_zero_weight_arc_first(self) -> None:
        """Zero-weight arcs are free to remove and rank first."""
        graph = GraphStore()
        for node_id in "AB":
            graph.add_node(node_id)
        graph.add_edge("A", "B", weight=1.0)
        graph.add_edge("B", "A", weight=0.0)
        assert _picked(graph) == [("B", "A")]

    def test_parallel_edges_selected_together(self) -> None:
        """An arc carries every parallel edge; its weight is their sum."""
        graph = GraphStore()
        for node_id in "AB":
            graph.add_node(node_id)
        graph.add_edge("A", "B", "field", weight=1.0)
        graph.add_edge("A", "B", "constructor", weight=1.0)
        graph.add_edge("B", "A", "field", weight=1.5)
        cycles = enumerate_all_cycles(graph).cycles
        selection = select_feedback_arcs(graph, cycles)
        [arc] = selection.arcs
        assert (arc.source, arc.target) == ("B", "A")
        assert arc.weight == 1.5

        graph.add_edge("B", "A", "field", weight=3.0)
        [arc] = select_feedback_arcs(graph, cycles).arcs
        assert (arc.source, arc.target) == ("A", "B")
        assert [e.kind for e in arc.edges] == ["field", "constructor"]
        assert arc.weight == 2.0

    def test_custom_weight_function(self) -> None:
        """A weight callable overrides Edge.weight."""
        graph = GraphStore()
        for node_id in "AB":
            graph.add_node(node_id)
        graph.add_edge("A", "B", "constructor")
        graph.add_edge("B", "A", "field")

        def by_kind(edge: Edge) -> float:
            return 0.1 if edge.kind == "field" else 10.0

        assert _picked(graph, weight=by_kind) == [("B", "A")]

    def test_greedy_recomputes_after_pick(self) -> None:
        """Cycles broken by a pick no longer count toward other arcs."""
        # Two 2-cycles share node A; AB and AC each sit on one cycle.
        graph = _graph("ABC", ["AB", "BA", "AC", "CA"])
        selection = select_feedback_arcs(graph, enumerate_all_cycles(graph).cycles)
        assert [(a.source, a.target) for a in selection.arcs] == [("A", "B"), ("A", "C")]
        assert [a.cycles_broken for a in selection.arcs] == [1, 1]
        assert selection.unbroken_cycles == ()

    def test_no_cycles_no_arcs(self) -> None:
        """Nothing to break, nothing selected."""
        selection = select_feedback_arcs(_graph("AB", ["AB"]), [])
        assert selection.arcs == ()
        assert selection.edge_keys() == ()

    def test_edge_keys_and_as_dict(self) -> None:
        """edge_keys flattens arcs; as_dict is plain data."""
        graph = _graph("A", ["AA"])
        selection = select_feedback_arcs(graph, [Cycle(("A", "A"))])
        assert selection.edge_keys() == (("A", "A", ""),)
        data = selection.as_dict()
        assert data["unbroken_cycles"] == []
        assert data["arcs"] == [
            {
                "source": "A",
                "target": "A",
                "edges": [
                    {"source": "A", "target": "A", "kind": "", "weight": 1.0, "attributes": {}}
                ],
                "weight": 1.0,
                "cycles_broken": 1,
            }
        ]


class TestSelectionErrors:
    """Error paths."""

    def test_unknown_node(self) -> None:
        """A cycle through a missing node raises UnknownNodeError."""
        graph = _graph("A", [])
        with pytest.raises(UnknownNodeError):
            select_feedback_arcs(graph, [Cycle(("A", "Z", "A"))])

    def test_unknown_arc(self) -> None:
        """A cycle over a missing arc raises UnknownEdgeError."""
        graph = _graph("AB", ["AB"])
        with pytest.raises(UnknownEdgeError):
            select_feedback_arcs(graph, [Cycle(("A", "B", "A"))])

    def test_negative_weight_function(self) -> None:
        """A weight callable returning a negative value raises ValueError."""
        graph = _graph("A", ["AA"])
        with pytest.raises(ValueError, match="negative or NaN weight"):
            select_feedback_arcs(graph, [Cycle(("A", "A"))], weight=lambda _: -1.0)

    def test_negative_parallel_edge_rejected(self) -> None:
        """Each edge is checked, even when the arc total would be positive."""
        graph = GraphStore()
        for node_id in "AB":
            graph.add_node(node_id)
        graph.add_edge("A", "B", "field")
        graph.add_edge("A", "B", "constructor")
        graph.add_edge("B", "A", "field")
        costs = {"field": 2.0, "constructor": -1.0}
        cycles = enumerate_all_cycles(graph).cycles
        with pytest.raises(ValueError, match=r"A -> B ('constructor')"):
            select_feedback_arcs(graph, cycles, weight=lambda e: costs[e.kind])

    def test_nan_weight_rejected(self) -> None:
        """NaN cannot be ordered in the selection heap."""
        graph = _graph("A", ["AA"])
        with pytest.raises(ValueError, match="NaN weight nan"):
            select_feedback_arcs(graph, [Cycle(("A", "A"))], weight=lambda _: float("nan"))

    def test_non_positive_epsilon(self) -> None:
        """epsilon must be positive."""
        graph = _graph("A", ["AA"])
        with pytest.raises(ValueError, match="epsilon"):
            select_feedback_arcs(graph, [Cycle(("A", "A"))], epsilon=0.0)


class TestFeedbackProperties:
    """Property-based tests for soundness."""

    @given(graph_stores(max_nodes=6))
    @settings(deadline=None)
    def test_every_cycle_hit(self, graph: GraphStore) -> None:
        """Property: each cycle contains at least one selected arc."""
        cycles = enumerate_all_cycles(graph).cycles
        selection = select_feedback_arcs(graph, cycles)
        picked = {(a.source, a.target) for a in selection.arcs}
        assert selection.unbroken_cycles == ()
        for cycle in cycles:
            assert picked & set(cycle.arcs())

    @given(graph_stores(max_nodes=6))
    @settings(deadline=None)
    def test_removal_leaves_graph_acyclic(self, graph: GraphStore) -> None:
        """Property: removing selected edges breaks every cycle."""
        result = enumerate_all_cycles(graph)
        assert not result.truncated
        selection = select_feedback_arcs(graph, result.cycles)
        assert verify_breaks_cycles(graph, selection)

    @given(graph_stores(max_nodes=6))
    @settings(deadline=None)
    def test_deterministic(self, graph: GraphStore) -> None:
        """Property: identical input gives identical selection."""
        cycles = enumerate_all_cycles(graph).cycles
        assert select_feedback_arcs(graph, cycles) == select_feedback_arcs(graph, cycles)
