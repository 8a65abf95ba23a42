"""Hypothesis strategies for depgraph property-based testing.

This package provides reusable strategies for generating test data
across multiple test modules. Strategies are organized by domain:

- graph: adjacency lists, populated GraphStores and cycle paths

Usage:
    from tests.strategies import dependency_graphs, graph_stores
    from tests.strategies.graph import cycle_paths

Event-Emitting Strategies (HypoFuzz-Optimized):
    These strategies emit hypothesis.event() calls for coverage-guided fuzzing:
    - dependency_graphs, graph_stores, cycle_paths
"""

from .graph import (
    cycle_paths,
    dependency_graphs,
    edge_kinds,
    edge_weights,
    graph_stores,
    node_names,
)

__all__ = [
    "cycle_paths",
    "dependency_graphs",
    "edge_kinds",
    "edge_weights",
    "graph_stores",
    "node_names",
]
