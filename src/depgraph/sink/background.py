"""Background writer thread feeding a BatchingSink.

Producers (graph population, source traversal) call ``persist_node`` and
``persist_edge``; items travel through a bounded queue to one worker thread
that owns the BatchingSink. A full queue blocks the producer, so a slow
backend throttles population instead of exhausting memory.

Error propagation:
    The worker never retries beyond the BatchingSink budget. Its first
    failure is stored and re-raised in the producer on the next
    ``persist_*`` call or on ``close()``. After a failure the worker keeps
    draining the queue so producers never block forever; the items it
    discards are added to the SinkError's dropped counts. Once reported,
    the failure is raised again by every later ``persist_*`` call.

Python 3.13+.
"""

from __future__ import annotations

import logging
import queue
import threading
import time
from collections.abc import Callable
from types import TracebackType
from typing import Final, TypeAlias

from depgraph.config import SinkConfig
from depgraph.diagnostics import SinkError
from depgraph.graph import Edge, Node

from .base import GraphSink
from .batching import BatchingSink, SinkStats

__all__ = ["BackgroundSink"]

logger = logging.getLogger(__name__)

_STOP: Final = object()

_Item: TypeAlias = Node | Edge | object


class BackgroundSink:
    """Asynchronous front end for a GraphSink.

    Example:
        >>> from depgraph.sink import InMemoryGraphSink
        >>> target = InMemoryGraphSink()
        >>> with BackgroundSink(target) as background:
        ...     background.persist_node(Node("a"))
        >>> target.node_count
        1
    """

    __slots__ = (
        "_batching",
        "_closed",
        "_discarded_edges",
        "_discarded_nodes",
        "_error",
        "_queue",
        "_reported",
        "_worker",
    )

    def __init__(
        self,
        sink: GraphSink,
        config: SinkConfig | None = None,
        *,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Start the worker thread.

        Args:
            sink: Backend receiving committed batches
            config: Batch size, retry budget and queue size; defaults if omitted
            sleep: Backoff function, replaceable in tests
        """
        cfg = config or SinkConfig()
        self._batching = BatchingSink(sink, cfg, sleep=sleep)
        self._queue: queue.Queue[_Item] = queue.Queue(maxsize=cfg.queue_size)
        self._error: BaseException | None = None
        self._reported = False
        self._discarded_nodes = 0
        self._discarded_edges = 0
        self._closed = False
        self._worker = threading.Thread(target=self._run, name="depgraph-sink", daemon=True)
        self._worker.start()

    def stats(self) -> SinkStats:
        """Counters of the underlying BatchingSink (final after ``close()``)."""
        return self._batching.stats()

    def persist_node(self, node: Node) -> None:
        """Queue a node upsert; blocks while the queue is full.

        Raises:
            SinkError: If the worker failed on an earlier batch
        """
        self._put(node)

    def persist_edge(self, edge: Edge) -> None:
        """Queue an edge upsert; blocks while the queue is full.

        Raises:
            SinkError: If the worker failed on an earlier batch
        """
        self._put(edge)

    def _put(self, item: _Item) -> None:
        if self._closed:
            msg = "BackgroundSink is closed"
            raise RuntimeError(msg)
        self._raise_failure()
        self._queue.put(item)

    def _raise_failure(self) -> None:
        if self._error is None:
            return
        if not self._reported:
            # The failed worker only discards, so the queue drains promptly.
            self._queue.join()
            self._reported = True
            if isinstance(self._error, SinkError):
                self._error.dropped_nodes += self._discarded_nodes
                self._error.dropped_edges += self._discarded_edges
        raise self._error

    def _run(self) -> None:
        failed = False
        while True:
            item = self._queue.get()
            try:
                if item is _STOP:
                    break
                if failed:
                    if isinstance(item, Node):
                        self._discarded_nodes += 1
                    elif isinstance(item, Edge):
                        self._discarded_edges += 1
                    continue
                if isinstance(item, Node):
                    self._batching.persist_node(item)
                elif isinstance(item, Edge):
                    self._batching.persist_edge(item)
            except Exception as e:  # pylint: disable=broad-exception-caught
                self._fail(e)
                failed = True
            finally:
                self._queue.task_done()

        try:
            try:
                if not failed:
                    self._batching.flush()
            finally:
                self._batching.close()
        except Exception as e:  # pylint: disable=broad-exception-caught
            self._fail(e)

    def _fail(self, error: Exception) -> None:
        logger.error("Background sink worker failed: %s", error)
        if self._error is None:
            self._error = error

    def close(self) -> None:
        """Flush what is queued, stop the worker and close the backend.

        Raises:
            SinkError: If the worker failed and the failure was not yet
                reported; dropped counts include every discarded item
        """
        if not self._closed:
            self._closed = True
            self._queue.put(_STOP)
            self._worker.join()
        if not self._reported:
            self._raise_failure()

    def __enter__(self) -> BackgroundSink:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if exc_type is None:
            self.close()
            return
        try:
            self.close()
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Background sink close on error exit failed: %s", e)
