"""Truncation warnings for bounded cycle enumeration.

Truncation is non-fatal but must be visible: a cycle report that silently
omits cycles is the worst failure mode for a correctness-sensitive
analysis. Warnings are carried in results rather than raised or logged.

Python 3.13+.
"""

from dataclasses import dataclass

from depgraph.enums import TruncationBound

from .codes import Diagnostic
from .templates import ErrorTemplate

__all__ = ["TruncationWarning"]


@dataclass(frozen=True, slots=True)
class TruncationWarning:
    """Structured warning: enumeration of one component hit a bound.

    Attributes:
        bound: Which bound was reached
        component: Index of the SCC whose enumeration is partial
        limit: Configured value of the bound
        reported: Cycles reported for the component before stopping
    """

    bound: TruncationBound
    component: int
    limit: int
    reported: int = 0

    @property
    def diagnostic(self) -> Diagnostic:
        """Diagnostic form for formatters."""
        return ErrorTemplate.enumeration_truncated(str(self.bound), self.component, self.limit)

    def format(self) -> str:
        """Format warning as a single human-readable line."""
        return f"[{self.bound}] {self.diagnostic.message} ({self.reported} reported)"

    def as_dict(self) -> dict[str, str | int]:
        """Plain-value form for JSON reports."""
        return {
            "bound": str(self.bound),
            "component": self.component,
            "limit": self.limit,
            "reported": self.reported,
        }
