"""Streaming persistence for graphs too large to hold in one transaction.

Provides the GraphSink contract, the batching/retrying adapter, the
background writer thread and two concrete backends.

Python 3.13+.
"""

from .background import BackgroundSink
from .base import GraphSink
from .batching import BatchingSink, SinkStats, stream_graph
from .jsonl import JsonLinesGraphSink
from .memory import InMemoryGraphSink

__all__ = [
    "BackgroundSink",
    "BatchingSink",
    "GraphSink",
    "InMemoryGraphSink",
    "JsonLinesGraphSink",
    "SinkStats",
    "stream_graph",
]
