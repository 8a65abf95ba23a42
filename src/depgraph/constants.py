"""Shared constants for depgraph.

This module provides centralized configuration constants used across the
graph, analysis and sink packages. Placing constants here avoids circular
imports and provides a single source of truth.

Constants are grouped by domain:
- Enumeration limits: Bounds for cycle enumeration
- Selection: Numeric guard for feedback-arc scoring
- Sink limits: Batch, retry and queue sizing for streaming persistence
- Node categories: Reserved category tags

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Enumeration limits
    "DEFAULT_MAX_CYCLES",
    # Selection
    "WEIGHT_EPSILON",
    "DEFAULT_EDGE_WEIGHT",
    # Sink limits
    "DEFAULT_BATCH_SIZE",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_RETRY_BACKOFF",
    "DEFAULT_QUEUE_SIZE",
    # Node categories
    "PLACEHOLDER_CATEGORY",
]

# ============================================================================
# ENUMERATION LIMITS
# ============================================================================
#
# Johnson's algorithm is output-sensitive: O((V + E)(C + 1)) for C cycles.
# C is exponential in the worst case (complete digraphs), so every
# enumeration is bounded. Hitting the bound is reported as truncation,
# never silently.
#
# ============================================================================

# Maximum elementary cycles reported per enumeration run.
# Used by: analysis.cycles (per-run shared budget), config.AnalysisConfig.
DEFAULT_MAX_CYCLES: int = 10_000

# ============================================================================
# SELECTION
# ============================================================================

# Lower bound applied to arc weights when scoring (frequency / weight).
# Zero-weight arcs are "free" to remove and must rank first, not divide by 0.
WEIGHT_EPSILON: float = 1e-9

# Weight assigned to edges inserted without an explicit weight.
DEFAULT_EDGE_WEIGHT: float = 1.0

# ============================================================================
# SINK LIMITS
# ============================================================================

# Entities (nodes + edges) buffered before a batch is committed.
# Matches the batch size of the graph.yml "batch_size" default.
DEFAULT_BATCH_SIZE: int = 1000

# Attempts after the first failure before a batch is declared fatal.
DEFAULT_MAX_RETRIES: int = 3

# Seconds slept before retry N is (DEFAULT_RETRY_BACKOFF * N).
DEFAULT_RETRY_BACKOFF: float = 0.5

# Bounded hand-off queue between producer and background writer.
# A full queue blocks the producer (backpressure).
DEFAULT_QUEUE_SIZE: int = 10_000

# ============================================================================
# NODE CATEGORIES
# ============================================================================

# Category given to nodes auto-created for unknown edge endpoints.
PLACEHOLDER_CATEGORY: str = "placeholder"
