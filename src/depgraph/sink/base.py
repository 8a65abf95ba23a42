"""Persistence contract for streaming graph export.

A sink receives nodes and edges in batches and makes each batch durable on
``commit()``. Writes are upserts: a node is keyed by ``id`` and an edge by
``(source, target, kind)``, so replaying a batch after a failed commit never
duplicates entities.

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from depgraph.graph import Edge, Node

__all__ = ["GraphSink"]


class GraphSink(Protocol):
    """Protocol for batch-oriented graph persistence backends.

    This is a Protocol (structural typing) rather than ABC so existing
    database clients can be wrapped without inheriting from depgraph types.

    Call sequence per batch: ``write_nodes`` -> ``write_edges`` -> ``commit``.
    On any exception the caller invokes ``rollback`` before retrying.

    Example:
        >>> class PrintSink:
        ...     def open(self) -> None: ...
        ...     def write_nodes(self, batch): print(len(batch), "node(s)")
        ...     def write_edges(self, batch): print(len(batch), "edge(s)")
        ...     def commit(self) -> None: ...
        ...     def rollback(self) -> None: ...
        ...     def close(self) -> None: ...
    """

    def open(self) -> None:
        """Acquire the underlying connection or session.

        Called once before the first batch. Must be safe to call again
        after ``close()``.
        """

    def write_nodes(self, batch: Sequence[Node]) -> None:
        """Stage a batch of node upserts."""

    def write_edges(self, batch: Sequence[Edge]) -> None:
        """Stage a batch of edge upserts.

        Called after ``write_nodes`` for the same batch.
        """

    def commit(self) -> None:
        """Make everything staged since the last commit durable."""

    def rollback(self) -> None:
        """Discard everything staged since the last commit."""

    def close(self) -> None:
        """Release the connection. Uncommitted writes are discarded."""
