"""Streaming a graph to an external store.

Shows the two sink front ends: BatchingSink for synchronous export of a
populated GraphStore, and BackgroundSink for producers that discover
nodes and edges while scanning sources. Both commit in batches and retry
failed batches with linear backoff.
"""

import logging
import tempfile
from pathlib import Path

from depgraph import GraphStore, Node, SinkConfig
from depgraph.graph import Edge
from depgraph.sink import BackgroundSink, InMemoryGraphSink, JsonLinesGraphSink, stream_graph

logging.basicConfig(level=logging.INFO)

# Example 1: Export a populated store to JSON Lines
print("=" * 50)
print("Example 1: JSON Lines Export")
print("=" * 50)

graph = GraphStore()
for table in ("customer", "address", "phone"):
    graph.add_node(table, "table")
graph.add_edge("address", "customer", "fk")
graph.add_edge("phone", "customer", "fk")

with tempfile.TemporaryDirectory() as tmpdir:
    path = Path(tmpdir) / "schema.jsonl"
    stats = stream_graph(graph, JsonLinesGraphSink(path), SinkConfig(batch_size=2))
    print(stats)
    print(path.read_text(encoding="utf-8"))

# Example 2: Background writer with backpressure
print("=" * 50)
print("Example 2: Background Writer")
print("=" * 50)

target = InMemoryGraphSink()
with BackgroundSink(target, SinkConfig(batch_size=100, queue_size=50)) as background:
    for i in range(1_000):
        background.persist_node(Node(f"method{i}", "method"))
        if i:
            background.persist_edge(Edge(f"method{i}", f"method{i - 1}", "calls"))

print(f"nodes: {target.node_count}, edges: {target.edge_count}")
print(f"callers of method10: {target.sources_of('method10', 'calls')}")
