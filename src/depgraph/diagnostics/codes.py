"""Diagnostic codes and data structures.

Defines error codes and diagnostic messages.
Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum, StrEnum
from typing import Literal

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "ErrorCategory",
]


class ErrorCategory(StrEnum):
    """Coarse error categorization for log aggregation.

    Categories:
        GRAPH: Graph store contract violations (unknown nodes, conflicts)
        ANALYSIS: Algorithm outcomes (cycles, truncation, invariants)
        CONFIG: Configuration loading and validation
        SINK: Streaming persistence failures
    """

    GRAPH = "graph"
    ANALYSIS = "analysis"
    CONFIG = "config"
    SINK = "sink"


class DiagnosticCode(Enum):
    """Error codes with unique identifiers.

    Organized by category:
        1000-1999: Graph store errors (population contract)
        2000-2999: Analysis errors and warnings
        3000-3999: Configuration errors
        4000-4999: Sink errors (streaming persistence)
    """

    # Graph store errors (1000-1999)
    UNKNOWN_NODE = 1001
    UNKNOWN_EDGE = 1002
    NODE_CATEGORY_CONFLICT = 1003

    # Analysis errors (2000-2999)
    CYCLE_DETECTED = 2001
    INVARIANT_VIOLATED = 2002
    ENUMERATION_TRUNCATED = 2003

    # Configuration errors (3000-3999)
    CONFIG_INVALID = 3001
    CONFIG_UNKNOWN_KEY = 3002

    # Sink errors (4000-4999)
    SINK_RETRIES_EXHAUSTED = 4001

    @property
    def category(self) -> ErrorCategory:
        """Category derived from the code range."""
        match self.value // 1000:
            case 1:
                return ErrorCategory.GRAPH
            case 2:
                return ErrorCategory.ANALYSIS
            case 3:
                return ErrorCategory.CONFIG
            case _:
                return ErrorCategory.SINK


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    Inspired by Rust compiler diagnostics. Provides rich error information
    for both humans and tools (report printers, CI annotations).

    Attributes:
        code: Unique error code
        message: Human-readable error description
        hint: Suggestion for fixing the error
        severity: Error severity level
        subjects: Node ids or other identifiers the diagnostic is about
    """

    code: DiagnosticCode
    message: str
    hint: str | None = None
    severity: Literal["error", "warning"] = "error"
    subjects: tuple[str, ...] = ()

    def __str__(self) -> str:
        """Return human-readable error description."""
        return self.message

    def format_error(self) -> str:
        """Format diagnostic like Rust compiler.

        Delegates to DiagnosticFormatter for consistent output.

        Example output:
            error[CYCLE_DETECTED]: Cannot order 3 node(s): dependency cycle
              = nodes: a, b, c
              = help: Run cycle analysis on the remaining nodes to locate the cycle

        Returns:
            Formatted error message
        """
        from .formatter import DiagnosticFormatter  # noqa: PLC0415 - circular

        return DiagnosticFormatter().format(self)
