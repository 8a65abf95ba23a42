"""Diagnostic formatting service.

Centralizes diagnostic output formatting with configurable options.
Python 3.13+. Zero external dependencies.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from .codes import Diagnostic

if TYPE_CHECKING:
    from depgraph.analysis.report import CycleReport

__all__ = [
    "DiagnosticFormatter",
    "OutputFormat",
]


class OutputFormat(StrEnum):
    """Output format options for diagnostic formatting."""

    RUST = "rust"  # Rust compiler-style output (default)
    SIMPLE = "simple"  # Single-line format
    JSON = "json"  # JSON format for tooling integration


@dataclass(frozen=True, slots=True)
class DiagnosticFormatter:
    """Diagnostic formatting service.

    Centralizes formatting of Diagnostic objects into human-readable
    or machine-readable output.

    Attributes:
        output_format: Output style (rust, simple, json)
        sanitize: Truncate long messages (node ids can be very long FQNs)
        color: Enable ANSI color codes (for terminal output)
        max_content_length: Maximum message length when sanitizing

    Example:
        >>> formatter = DiagnosticFormatter()
        >>> diagnostic = ErrorTemplate.unknown_node("com.acme.Foo", "target")
        >>> print(formatter.format(diagnostic))
        error[UNKNOWN_NODE]: Unknown target 'com.acme.Foo': node was never added to the graph
          = nodes: com.acme.Foo
          = help: Add the node before its edges, ...

        >>> formatter = DiagnosticFormatter(output_format=OutputFormat.SIMPLE)
        >>> print(formatter.format(diagnostic))
        UNKNOWN_NODE: Unknown target 'com.acme.Foo': node was never added to the graph
    """

    output_format: OutputFormat = OutputFormat.RUST
    sanitize: bool = False
    color: bool = False
    max_content_length: int = 100

    def format(self, diagnostic: Diagnostic) -> str:
        """Format a single diagnostic.

        Args:
            diagnostic: Diagnostic to format

        Returns:
            Formatted diagnostic string
        """
        match self.output_format:
            case OutputFormat.RUST:
                return self._format_rust(diagnostic)
            case OutputFormat.SIMPLE:
                return self._format_simple(diagnostic)
            case OutputFormat.JSON:
                return self._format_json(diagnostic)

    def format_all(self, diagnostics: Iterable[Diagnostic]) -> str:
        """Format multiple diagnostics separated by blank lines."""
        return "\n\n".join(self.format(d) for d in diagnostics)

    def format_report(self, report: "CycleReport") -> str:
        """Format a CycleReport summary with arcs to cut and warnings.

        Args:
            report: Result of analyze_cycles()

        Returns:
            Multi-line summary
        """
        if not report.has_cycles:
            return "No circular dependencies detected"

        bearing = [c for c in report.components if c.cycle_bearing]
        parts = [
            f"Found {len(bearing)} cycle-bearing component(s), "
            f"{len(report.cycles)} elementary cycle(s)"
        ]

        if report.selection.arcs:
            parts.append(f"\nArcs to remove ({len(report.selection.arcs)}):")
            for arc in report.selection.arcs:
                kinds = ", ".join(edge.kind or "-" for edge in arc.edges)
                parts.append(
                    f"  {self._maybe_sanitize(arc.source)} -> "
                    f"{self._maybe_sanitize(arc.target)} [{kinds}] "
                    f"breaks {arc.cycles_broken} cycle(s)"
                )

        if report.selection.unbroken_cycles:
            parts.append(f"\nUnbroken cycles: {len(report.selection.unbroken_cycles)}")

        if report.warnings:
            parts.append("\nWarnings:")
            for warning in report.warnings:
                parts.append(f"  {warning.format()}")

        return "\n".join(parts)

    def _format_rust(self, diagnostic: Diagnostic) -> str:
        """Format diagnostic in Rust compiler style.

        Example output:
            error[CYCLE_DETECTED]: Cannot order 2 node(s): dependency cycle
              = nodes: a, b
              = help: Run cycle analysis on the remaining nodes to locate the cycle
        """
        severity = diagnostic.severity if diagnostic.severity == "warning" else "error"

        if self.color:
            if severity == "error":
                severity_str = f"\033[1;31m{severity}\033[0m"  # Bold red
            else:
                severity_str = f"\033[1;33m{severity}\033[0m"  # Bold yellow
        else:
            severity_str = severity

        message = self._maybe_sanitize(diagnostic.message)
        parts = [f"{severity_str}[{diagnostic.code.name}]: {message}"]

        if diagnostic.subjects:
            subjects = self._maybe_sanitize(", ".join(diagnostic.subjects))
            parts.append(f"  = nodes: {subjects}")

        if diagnostic.hint:
            parts.append(f"  = help: {self._maybe_sanitize(diagnostic.hint)}")

        return "\n".join(parts)

    def _format_simple(self, diagnostic: Diagnostic) -> str:
        """Format diagnostic in single-line format.

        Example output:
            CYCLE_DETECTED: Cannot order 2 node(s): dependency cycle
        """
        message = self._maybe_sanitize(diagnostic.message)
        return f"{diagnostic.code.name}: {message}"

    def _format_json(self, diagnostic: Diagnostic) -> str:
        """Format diagnostic as JSON.

        Example output:
            {"code": "CYCLE_DETECTED", "message": "...", "severity": "error"}
        """
        import json  # noqa: PLC0415

        data: dict[str, str | int | list[str]] = {
            "code": diagnostic.code.name,
            "code_value": diagnostic.code.value,
            "category": str(diagnostic.code.category),
            "message": self._maybe_sanitize(diagnostic.message),
            "severity": diagnostic.severity,
        }

        if diagnostic.subjects:
            data["subjects"] = list(diagnostic.subjects)

        if diagnostic.hint:
            data["hint"] = self._maybe_sanitize(diagnostic.hint)

        return json.dumps(data, ensure_ascii=False)

    def _maybe_sanitize(self, text: str) -> str:
        """Truncate text if sanitization is enabled.

        Args:
            text: Text to possibly truncate

        Returns:
            Original or truncated text
        """
        if self.sanitize and len(text) > self.max_content_length:
            return text[: self.max_content_length] + "..."
        return text
