"""Diagnostic system for depgraph errors.

Provides structured error diagnostics with codes, hints, and severities.
Inspired by Rust compiler diagnostics and Elm error messages.

Python 3.13+.
"""

from .codes import Diagnostic, DiagnosticCode, ErrorCategory
from .errors import (
    ConfigError,
    CycleError,
    GraphError,
    InvariantViolation,
    NodeConflictError,
    SinkError,
    UnknownEdgeError,
    UnknownNodeError,
)
from .formatter import DiagnosticFormatter, OutputFormat
from .templates import ErrorTemplate
from .truncation import TruncationWarning

__all__ = [
    "ConfigError",
    "CycleError",
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticFormatter",
    "ErrorCategory",
    "ErrorTemplate",
    "GraphError",
    "InvariantViolation",
    "NodeConflictError",
    "OutputFormat",
    "SinkError",
    "TruncationWarning",
    "UnknownEdgeError",
    "UnknownNodeError",
]
