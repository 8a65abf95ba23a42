"""depgraph - Dependency-graph engine for codebase and schema analysis.

Builds a directed multigraph of opaque nodes and tagged, weighted edges,
then answers the questions a circular-dependency or schema-ordering tool
asks of it.

Public API:
    GraphStore - In-memory multigraph with idempotent upserts
    find_strongly_connected_components - Tarjan SCC partition
    enumerate_cycles / enumerate_all_cycles - Bounded Johnson enumeration
    topological_order / order_graph - Kahn ordering, dependencies first
    select_feedback_arcs - Greedy weighted arcs that break every cycle
    analyze_cycles - SCC -> cycles -> feedback arcs in one report
    insertion_order / deletion_order - Table ordering from foreign keys

Exceptions:
    GraphError - Base exception class
    UnknownNodeError - Edge or query names a node never added
    CycleError - Ordering requested on a cyclic graph
    SinkError - Streaming sink exhausted its retry budget

Submodules:
    depgraph.graph - Node, Edge and GraphStore
    depgraph.analysis - Graph algorithms and reports
    depgraph.sink - Batched, retried streaming persistence
    depgraph.config - Run configuration and YAML loading
    depgraph.diagnostics - Error types, codes and formatters
"""

from .analysis import (
    Cycle,
    CycleReport,
    ForeignKey,
    analyze_cycles,
    deletion_order,
    enumerate_all_cycles,
    enumerate_cycles,
    find_strongly_connected_components,
    insertion_order,
    order_graph,
    select_feedback_arcs,
    topological_order,
)
from .config import AnalysisConfig, GraphConfig, SinkConfig, load_config
from .diagnostics import (
    ConfigError,
    CycleError,
    GraphError,
    InvariantViolation,
    NodeConflictError,
    SinkError,
    TruncationWarning,
    UnknownEdgeError,
    UnknownNodeError,
)
from .enums import UnknownNodePolicy, WeightAggregation
from .graph import Edge, GraphStore, Node

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("depgraph")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "AnalysisConfig",
    "ConfigError",
    "Cycle",
    "CycleError",
    "CycleReport",
    "Edge",
    "ForeignKey",
    "GraphConfig",
    "GraphError",
    "GraphStore",
    "InvariantViolation",
    "Node",
    "NodeConflictError",
    "SinkConfig",
    "SinkError",
    "TruncationWarning",
    "UnknownEdgeError",
    "UnknownNodeError",
    "UnknownNodePolicy",
    "WeightAggregation",
    "__version__",
    "analyze_cycles",
    "deletion_order",
    "enumerate_all_cycles",
    "enumerate_cycles",
    "find_strongly_connected_components",
    "insertion_order",
    "load_config",
    "order_graph",
    "select_feedback_arcs",
    "topological_order",
]
