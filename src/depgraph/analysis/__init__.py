"""Graph algorithms over a populated GraphStore.

Provides SCC detection, bounded cycle enumeration, topological ordering,
feedback-arc selection and the combined cycle report. All algorithms are
pure functions of the store; none mutate it.

Python 3.13+.
"""

from .cycles import Cycle, CycleEnumeration, enumerate_all_cycles, enumerate_cycles
from .feedback import FeedbackArc, FeedbackArcSelection, WeightFunction, select_feedback_arcs
from .ordering import order_graph, topological_order
from .report import CycleReport, analyze_cycles, verify_breaks_cycles
from .scc import (
    Condensation,
    StronglyConnectedComponent,
    condensation,
    cycle_bearing_components,
    find_strongly_connected_components,
    strongly_connected,
)
from .tables import ForeignKey, deletion_order, insertion_order

__all__ = [
    "Condensation",
    "Cycle",
    "CycleEnumeration",
    "CycleReport",
    "FeedbackArc",
    "FeedbackArcSelection",
    "ForeignKey",
    "StronglyConnectedComponent",
    "WeightFunction",
    "analyze_cycles",
    "condensation",
    "cycle_bearing_components",
    "deletion_order",
    "enumerate_all_cycles",
    "enumerate_cycles",
    "find_strongly_connected_components",
    "insertion_order",
    "order_graph",
    "select_feedback_arcs",
    "strongly_connected",
    "topological_order",
    "verify_breaks_cycles",
]
