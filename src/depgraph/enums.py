"""Enumerations for depgraph type-safe constants.

Uses StrEnum (Python 3.11+) for automatic string conversion.
StrEnum members are strings themselves, so they serialize into reports
and YAML configuration without boilerplate.

Python 3.13+.
"""

from enum import StrEnum


class UnknownNodePolicy(StrEnum):
    """What the graph store does with an edge whose endpoint was never added.

    StrEnum provides automatic string conversion: str(UnknownNodePolicy.REJECT) == "reject"
    """

    REJECT = "reject"
    """Raise UnknownNodeError (default)."""

    AUTO_CREATE_PLACEHOLDER = "auto_create_placeholder"
    """Create a node tagged with the placeholder category."""


class WeightAggregation(StrEnum):
    """How a re-inserted edge combines its weight with the stored one."""

    REPLACE = "replace"
    """New weight wins (default)."""

    MAX = "max"
    """Keep the larger weight."""

    SUM = "sum"
    """Add the weights (e.g. counting repeated call sites)."""


class TruncationBound(StrEnum):
    """Enumeration bound that caused a partial cycle report."""

    MAX_CYCLES = "max_cycles"
    MAX_CYCLE_LENGTH = "max_cycle_length"


__all__ = [
    "TruncationBound",
    "UnknownNodePolicy",
    "WeightAggregation",
]
