"""Tests for analysis/ordering.py and analysis/tables.py.

Tested components:
- topological_order: Kahn ordering, FIFO tie-break, scoping, duplicates
- order_graph: whole-store ordering with kind filters
- insertion_order / deletion_order: foreign-key table ordering

Properties tested:
- Acyclic graphs always order, and every dependency precedes its dependent
- Cyclic graphs raise CycleError naming only unorderable nodes

Python 3.13+.
"""

from __future__ import annotations

import pytest
from hypothesis import given

from depgraph.analysis import (
    ForeignKey,
    deletion_order,
    find_strongly_connected_components,
    insertion_order,
    order_graph,
    topological_order,
)
from depgraph.diagnostics import CycleError, DiagnosticCode
from depgraph.graph import Edge, GraphStore
from tests.strategies import graph_stores


class TestTopologicalOrder:
    """Unit tests for topological_order."""

    def test_customer_address_phone(self) -> None:
        """address -> customer, phone -> address orders customer first."""
        order = topological_order(
            ["customer", "address", "phone"],
            [("address", "customer"), ("phone", "address")],
        )
        assert order == ("customer", "address", "phone")

    def test_independent_nodes_keep_input_order(self) -> None:
        """With no dependencies the input order is kept."""
        assert topological_order(["c", "a", "b"], []) == ("c", "a", "b")

    def test_fifo_tie_break(self) -> None:
        """Freed nodes queue behind nodes already ready."""
        order = topological_order(["x", "y", "root"], [("x", "root")])
        assert order == ("y", "root", "x")

    def test_accepts_edges(self) -> None:
        """Edge objects are read as (source, target)."""
        assert topological_order(["a", "b"], [Edge("a", "b")]) == ("b", "a")

    def test_outside_dependencies_ignored(self) -> None:
        """Dependencies on nodes outside the set do not constrain the order."""
        assert topological_order(["a", "b"], [("a", "zzz"), ("b", "a")]) == ("a", "b")

    def test_duplicate_dependencies_counted_once(self) -> None:
        """Duplicate pairs do not leave phantom in-degree."""
        assert topological_order(["a", "b"], [("a", "b"), ("a", "b")]) == ("b", "a")

    def test_duplicate_node_ids_ignored(self) -> None:
        """Repeated ids appear once in the output."""
        assert topological_order(["a", "a", "b"], []) == ("a", "b")

    def test_cycle_raises_with_remaining(self) -> None:
        """Cycle raises CycleError listing unorderable nodes in input order."""
        with pytest.raises(CycleError) as exc_info:
            topological_order(
                ["ok", "c", "b", "a", "after"],
                [("a", "b"), ("b", "c"), ("c", "a"), ("after", "a")],
            )
        error = exc_info.value
        assert error.remaining_nodes == ("c", "b", "a", "after")
        assert error.diagnostic is not None
        assert error.diagnostic.code is DiagnosticCode.CYCLE_DETECTED

    def test_self_dependency_is_cycle(self) -> None:
        """A node depending on itself cannot be ordered."""
        with pytest.raises(CycleError) as exc_info:
            topological_order(["a"], [("a", "a")])
        assert exc_info.value.remaining_nodes == ("a",)


class TestOrderGraph:
    """order_graph over a GraphStore."""

    def test_dependencies_first(self) -> None:
        """Edge A -> B means A depends on B."""
        graph = GraphStore()
        for node_id in ("service", "repository", "datasource"):
            graph.add_node(node_id, "bean")
        graph.add_edge("service", "repository", "constructor")
        graph.add_edge("repository", "datasource", "constructor")
        assert order_graph(graph) == ("datasource", "repository", "service")

    def test_kind_filter(self) -> None:
        """Only edges of the given kinds constrain the order."""
        graph = GraphStore()
        graph.add_node("a")
        graph.add_node("b")
        graph.add_edge("a", "b", "constructor")
        graph.add_edge("b", "a", "setter")
        with pytest.raises(CycleError):
            order_graph(graph)
        assert order_graph(graph, kinds={"constructor"}) == ("b", "a")


class TestOrderingProperties:
    """Property-based tests for ordering."""

    @given(graph_stores(allow_cycles=False))
    def test_acyclic_respects_every_edge(self, graph: GraphStore) -> None:
        """Property: target precedes source for every edge of a DAG."""
        order = order_graph(graph)
        position = {n: i for i, n in enumerate(order)}
        assert sorted(order) == sorted(graph.node_ids())
        for edge in graph.edges():
            assert position[edge.target] < position[edge.source]

    @given(graph_stores(allow_cycles=True))
    def test_cyclic_raises_with_cycle_members(self, graph: GraphStore) -> None:
        """Property: every cycle-bearing SCC member is reported as remaining."""
        with pytest.raises(CycleError) as exc_info:
            order_graph(graph)
        remaining = set(exc_info.value.remaining_nodes)
        for component in find_strongly_connected_components(graph):
            if component.cycle_bearing:
                assert set(component.nodes) <= remaining


class TestTableOrdering:
    """Foreign-key ordering for inserts and deletes."""

    TABLES = ("phone", "address", "customer")
    KEYS = (
        ForeignKey("address", "customer", "fk_address_customer"),
        ForeignKey("phone", "address", "fk_phone_address"),
    )

    def test_insertion_order(self) -> None:
        """Parents first."""
        assert insertion_order(self.TABLES, self.KEYS) == ("customer", "address", "phone")

    def test_deletion_order(self) -> None:
        """Children first."""
        assert deletion_order(self.TABLES, self.KEYS) == ("phone", "address", "customer")

    def test_self_reference_skipped(self) -> None:
        """employees.manager_id -> employees does not block ordering."""
        keys = [
            ForeignKey("employees", "employees", "fk_manager"),
            ForeignKey("employees", "depts"),
        ]
        assert ForeignKey("employees", "employees").is_self_reference
        assert insertion_order(["employees", "depts"], keys) == ("depts", "employees")

    def test_foreign_key_outside_table_set_ignored(self) -> None:
        """Keys pointing outside the table list are skipped."""
        keys = [ForeignKey("orders", "audit_log")]
        assert insertion_order(["orders"], keys) == ("orders",)

    def test_circular_keys_raise(self) -> None:
        """Mutually referencing tables cannot be ordered."""
        keys = [ForeignKey("a", "b"), ForeignKey("b", "a")]
        with pytest.raises(CycleError):
            insertion_order(["a", "b"], keys)
