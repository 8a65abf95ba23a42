"""Quickstart example for depgraph.

This example builds a small bean-injection graph, finds its circular
dependencies, picks the injections to break them, and orders a set of
database tables by their foreign keys.

Note: Examples print reports for brevity. In production, inspect
``report.truncated`` and ``report.warnings`` before trusting that a
selection covers every cycle.
"""

from depgraph import (
    AnalysisConfig,
    CycleError,
    ForeignKey,
    GraphStore,
    UnknownNodePolicy,
    analyze_cycles,
    deletion_order,
    insertion_order,
    order_graph,
)
from depgraph.diagnostics import DiagnosticFormatter

# Example 1: Circular bean dependencies
print("=" * 50)
print("Example 1: Circular Bean Dependencies")
print("=" * 50)

graph = GraphStore()
for bean in ("orderService", "paymentService", "auditService", "mailer", "logger"):
    graph.add_node(bean, "bean")

graph.add_edge("orderService", "paymentService", "field")
graph.add_edge("paymentService", "orderService", "constructor", weight=5.0)
graph.add_edge("auditService", "mailer", "setter")
graph.add_edge("mailer", "auditService", "field")
graph.add_edge("mailer", "logger", "field")

report = analyze_cycles(graph)
print(DiagnosticFormatter().format_report(report))
# Output:
# Found 2 cycle-bearing component(s), 2 elementary cycle(s)
#
# Arcs to remove (2):
#   orderService -> paymentService [field] breaks 1 cycle(s)
#   auditService -> mailer [setter] breaks 1 cycle(s)

# Example 2: Weighting by injection kind
print("\n" + "=" * 50)
print("Example 2: Custom Removal Cost")
print("=" * 50)

# Field injections are cheap to turn into lazy lookups; constructors are not.
costs = {"field": 1.0, "setter": 1.0, "constructor": 10.0}
report = analyze_cycles(graph, weight=lambda edge: costs.get(edge.kind, 1.0))
for arc in report.selection.arcs:
    print(f"remove {arc.source} -> {arc.target} (cost {arc.weight})")

# Example 3: Bounded enumeration
print("\n" + "=" * 50)
print("Example 3: Truncated Enumeration")
print("=" * 50)

report = analyze_cycles(graph, AnalysisConfig(max_cycles=1))
print(f"truncated: {report.truncated}")
for warning in report.warnings:
    print(warning.format())

# Example 4: Placeholder nodes for unresolved references
print("\n" + "=" * 50)
print("Example 4: Placeholder Nodes")
print("=" * 50)

calls = GraphStore(UnknownNodePolicy.AUTO_CREATE_PLACEHOLDER)
calls.add_node("app.main", "method")
calls.add_edge("app.main", "lib.parse", "calls")
calls.add_edge("app.main", "lib.emit", "calls")
print(f"placeholders: {calls.placeholders()}")
print(f"build order: {order_graph(calls)}")

# Example 5: Table ordering from foreign keys
print("\n" + "=" * 50)
print("Example 5: Foreign-Key Table Ordering")
print("=" * 50)

tables = ["phone", "address", "customer"]
foreign_keys = [
    ForeignKey("phone", "customer", "fk_phone_customer"),
    ForeignKey("address", "customer", "fk_address_customer"),
    ForeignKey("customer", "customer", "fk_customer_referrer"),
]
print(f"insert: {insertion_order(tables, foreign_keys)}")
print(f"delete: {deletion_order(tables, foreign_keys)}")

try:
    insertion_order(["a", "b"], [ForeignKey("a", "b"), ForeignKey("b", "a")])
except CycleError as e:
    print(f"cannot order: {e.remaining_nodes}")
