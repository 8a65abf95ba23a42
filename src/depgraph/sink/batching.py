"""Batching, retrying adapter in front of a GraphSink.

Buffers node and edge upserts, commits them in batches of
``SinkConfig.batch_size`` and retries a failed batch as a whole.

Failure semantics:
    A batch attempt is open -> write_nodes -> write_edges -> commit. The
    backend is connected lazily inside the attempt, so a failed connect is
    retried like a failed write. Any exception rolls the attempt back and,
    while retries remain, the same batch is replayed after
    ``retry_backoff * attempt`` seconds. Writes are upserts,
    so a replay cannot duplicate entities. When retries run out a SinkError
    is raised carrying the size of the uncommitted batch; the batch is kept
    pending, never discarded silently.

Thread Safety:
    Not thread-safe. Use BackgroundSink to feed a sink from another thread.

Python 3.13+.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from types import TracebackType

from depgraph.config import SinkConfig
from depgraph.diagnostics import ErrorTemplate, SinkError
from depgraph.graph import Edge, EdgeKey, GraphStore, Node, NodeId

from .base import GraphSink

__all__ = [
    "BatchingSink",
    "SinkStats",
    "stream_graph",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SinkStats:
    """Counters for one BatchingSink.

    Attributes:
        nodes_persisted: Node upserts committed
        edges_persisted: Edge upserts committed
        batches_committed: Successful commits
        retries: Batch attempts repeated after a failure
    """

    nodes_persisted: int = 0
    edges_persisted: int = 0
    batches_committed: int = 0
    retries: int = 0


class BatchingSink:
    """Buffer upserts and commit them to ``sink`` in retried batches.

    Example:
        >>> from depgraph.sink import InMemoryGraphSink
        >>> target = InMemoryGraphSink()
        >>> with BatchingSink(target, SinkConfig(batch_size=2)) as batching:
        ...     batching.persist_node(Node("a"))
        ...     batching.persist_node(Node("b"))
        ...     batching.persist_edge(Edge("a", "b"))
        >>> batching.stats().batches_committed
        2
    """

    __slots__ = (
        "_batches",
        "_config",
        "_edges_persisted",
        "_nodes_persisted",
        "_opened",
        "_pending_edges",
        "_pending_nodes",
        "_retries",
        "_sink",
        "_sleep",
    )

    def __init__(
        self,
        sink: GraphSink,
        config: SinkConfig | None = None,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Wrap ``sink``.

        Args:
            sink: Backend receiving committed batches
            config: Batch size and retry budget; defaults if omitted
            sleep: Backoff function, replaceable in tests
        """
        self._sink = sink
        self._config = config or SinkConfig()
        self._sleep = sleep
        self._pending_nodes: dict[NodeId, Node] = {}
        self._pending_edges: dict[EdgeKey, Edge] = {}
        self._opened = False
        self._nodes_persisted = 0
        self._edges_persisted = 0
        self._batches = 0
        self._retries = 0

    @property
    def config(self) -> SinkConfig:
        return self._config

    @property
    def pending(self) -> int:
        """Entities buffered and not yet committed."""
        return len(self._pending_nodes) + len(self._pending_edges)

    def stats(self) -> SinkStats:
        """Snapshot of the counters."""
        return SinkStats(
            nodes_persisted=self._nodes_persisted,
            edges_persisted=self._edges_persisted,
            batches_committed=self._batches,
            retries=self._retries,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def open(self) -> None:
        if not self._opened:
            self._sink.open()
            self._opened = True

    def close(self) -> None:
        """Close the backend. Pending entities are not flushed."""
        if self._opened:
            self._opened = False
            self._sink.close()

    def __enter__(self) -> BatchingSink:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        try:
            if exc_type is None:
                self.flush()
            else:
                try:
                    self.flush()
                except Exception as e:  # pylint: disable=broad-exception-caught
                    # The body's exception propagates; this one is only logged.
                    logger.error("Flush on error exit failed: %s", e)
        finally:
            self.close()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def persist_node(self, node: Node) -> None:
        """Buffer a node upsert; flushes when the batch is full.

        Raises:
            SinkError: If a triggered flush exhausts its retries
        """
        self._pending_nodes[node.id] = node
        self._maybe_flush()

    def persist_edge(self, edge: Edge) -> None:
        """Buffer an edge upsert; flushes when the batch is full.

        Raises:
            SinkError: If a triggered flush exhausts its retries
        """
        self._pending_edges[edge.key] = edge
        self._maybe_flush()

    def persist_nodes(self, nodes: Iterable[Node]) -> None:
        for node in nodes:
            self.persist_node(node)

    def persist_edges(self, edges: Iterable[Edge]) -> None:
        for edge in edges:
            self.persist_edge(edge)

    def _maybe_flush(self) -> None:
        if self.pending >= self._config.batch_size:
            self.flush()

    def flush(self) -> None:
        """Commit everything pending as one batch.

        Raises:
            SinkError: If every attempt failed; the batch stays pending
        """
        if not self.pending:
            return

        nodes = tuple(self._pending_nodes.values())
        edges = tuple(self._pending_edges.values())
        attempts = self._config.max_retries + 1
        last_error: Exception | None = None

        for attempt in range(1, attempts + 1):
            try:
                self.open()
                self._sink.write_nodes(nodes)
                self._sink.write_edges(edges)
                self._sink.commit()
            except Exception as e:  # pylint: disable=broad-exception-caught
                last_error = e
                if self._opened:
                    self._rollback()
                if attempt < attempts:
                    delay = self._config.retry_backoff * attempt
                    logger.warning(
                        "Sink batch attempt %d/%d failed: %s; retrying in %.2fs",
                        attempt,
                        attempts,
                        e,
                        delay,
                    )
                    self._retries += 1
                    self._sleep(delay)
                continue

            self._pending_nodes.clear()
            self._pending_edges.clear()
            self._nodes_persisted += len(nodes)
            self._edges_persisted += len(edges)
            self._batches += 1
            logger.debug("Committed batch: %d node(s), %d edge(s)", len(nodes), len(edges))
            return

        diagnostic = ErrorTemplate.sink_retries_exhausted(
            attempts, len(nodes), len(edges), str(last_error)
        )
        logger.error("%s", diagnostic.message)
        raise SinkError(
            diagnostic,
            attempts=attempts,
            dropped_nodes=len(nodes),
            dropped_edges=len(edges),
        ) from last_error

    def _rollback(self) -> None:
        try:
            self._sink.rollback()
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.warning("Sink rollback failed: %s", e)


def stream_graph(
    graph: GraphStore,
    sink: GraphSink,
    config: SinkConfig | None = None,
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> SinkStats:
    """Export every node, then every edge, of ``graph`` through ``sink``.

    Args:
        graph: Populated store
        sink: Backend to write to
        config: Batch size and retry budget

    Returns:
        Final counters

    Raises:
        SinkError: If a batch exhausts its retries
    """
    batching = BatchingSink(sink, config, sleep=sleep)
    with batching:
        batching.persist_nodes(graph.nodes())
        batching.persist_edges(graph.edges())
    stats = batching.stats()
    logger.debug(
        "Streamed %d node(s), %d edge(s) in %d batch(es)",
        stats.nodes_persisted,
        stats.edges_persisted,
        stats.batches_committed,
    )
    return stats
