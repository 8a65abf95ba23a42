"""Cycle analysis pipeline: SCC -> bounded cycles -> feedback arcs.

Runs the three stages in the order a circular-dependency tool needs them
and packs the outcome into one serializable report.

Feedback arcs are chosen per component. Cycles never cross components, so
selecting inside each SCC gives the same cover as a global pass while
keeping every pick explainable by the component it came from.

Python 3.13+.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass

from depgraph.config import AnalysisConfig
from depgraph.diagnostics import TruncationWarning
from depgraph.graph import GraphStore

from .cycles import Cycle, enumerate_all_cycles
from .feedback import FeedbackArc, FeedbackArcSelection, WeightFunction, select_feedback_arcs
from .scc import StronglyConnectedComponent, find_strongly_connected_components

__all__ = [
    "CycleReport",
    "analyze_cycles",
    "verify_breaks_cycles",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CycleReport:
    """Outcome of one analysis run.

    Attributes:
        components: Every SCC, reverse topological order
        cycles: Elementary cycles found, grouped by component
        selection: Feedback arcs breaking ``cycles``
        truncated: True if any enumeration bound was hit
        warnings: Truncation records, one per bound hit
    """

    components: tuple[StronglyConnectedComponent, ...]
    cycles: tuple[Cycle, ...]
    selection: FeedbackArcSelection
    truncated: bool
    warnings: tuple[TruncationWarning, ...]

    @property
    def has_cycles(self) -> bool:
        return any(c.cycle_bearing for c in self.components)

    @property
    def cycle_bearing(self) -> tuple[StronglyConnectedComponent, ...]:
        return tuple(c for c in self.components if c.cycle_bearing)

    def as_dict(self) -> dict[str, object]:
        """Plain-value form; stable for a given input."""
        return {
            "components": [c.as_dict() for c in self.components],
            "cycles": [c.as_dict() for c in self.cycles],
            "selection": self.selection.as_dict(),
            "truncated": self.truncated,
            "warnings": [w.as_dict() for w in self.warnings],
        }

    def to_json(self, *, indent: int | None = 2) -> str:
        """Serialize with sorted keys, so identical runs give identical text."""
        return json.dumps(self.as_dict(), indent=indent, sort_keys=True, ensure_ascii=False)


def analyze_cycles(
    graph: GraphStore,
    config: AnalysisConfig | None = None,
    *,
    weight: WeightFunction | None = None,
) -> CycleReport:
    """Find cycles in ``graph`` and the arcs to cut them.

    Args:
        graph: Fully populated graph store
        config: Enumeration bounds and epsilon; defaults if omitted
        weight: Per-edge removal cost; defaults to ``Edge.weight``

    Returns:
        CycleReport. When ``truncated`` is set the selection breaks the
        reported cycles only.
    """
    cfg = config or AnalysisConfig()
    components = find_strongly_connected_components(graph)
    enumeration = enumerate_all_cycles(
        graph,
        components,
        max_cycles=cfg.max_cycles,
        max_cycle_length=cfg.max_cycle_length,
    )

    by_component: dict[int, list[Cycle]] = {}
    for cycle in enumeration.cycles:
        by_component.setdefault(cycle.component, []).append(cycle)

    arcs: list[FeedbackArc] = []
    unbroken: list[Cycle] = []
    for component in components:
        cycles = by_component.get(component.index)
        if not cycles:
            continue
        selection = select_feedback_arcs(
            graph, cycles, weight=weight, epsilon=cfg.weight_epsilon
        )
        arcs.extend(selection.arcs)
        unbroken.extend(selection.unbroken_cycles)

    report = CycleReport(
        components=components,
        cycles=enumeration.cycles,
        selection=FeedbackArcSelection(tuple(arcs), tuple(unbroken)),
        truncated=enumeration.truncated,
        warnings=enumeration.warnings,
    )
    logger.debug(
        "Analysis: %d cycle-bearing SCC(s), %d cycle(s), %d arc(s) selected%s",
        len(report.cycle_bearing),
        len(report.cycles),
        len(arcs),
        " (truncated)" if report.truncated else "",
    )
    return report


def verify_breaks_cycles(graph: GraphStore, selection: FeedbackArcSelection) -> bool:
    """Return True if removing the selected edges leaves ``graph`` acyclic."""
    reduced = graph.without_edges(selection.edge_keys())
    return not any(c.cycle_bearing for c in find_strongly_connected_components(reduced))
