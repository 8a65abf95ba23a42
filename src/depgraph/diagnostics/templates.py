"""Error message templates.

Centralized error message templates for testable, consistent error messages.
Python 3.13+. Zero external dependencies.
"""

from collections.abc import Sequence

from .codes import Diagnostic, DiagnosticCode

# Node ids listed in a single diagnostic before eliding the rest.
_MAX_LISTED_SUBJECTS = 20


def _preview(subjects: Sequence[str]) -> tuple[str, ...]:
    """Return at most _MAX_LISTED_SUBJECTS ids, in input order."""
    return tuple(subjects[:_MAX_LISTED_SUBJECTS])


class ErrorTemplate:
    """Centralized error message templates.

    All error messages are created here. NO f-strings in exception constructors!
    This keeps messages testable and documents every error case in one place.
    """

    @staticmethod
    def unknown_node(node_id: str, role: str = "node") -> Diagnostic:
        """Edge endpoint or query subject was never added.

        Args:
            node_id: The missing node id
            role: Where the id appeared ("source", "target", "node")

        Returns:
            Diagnostic for UNKNOWN_NODE
        """
        msg = f"Unknown {role} '{node_id}': node was never added to the graph"
        return Diagnostic(
            code=DiagnosticCode.UNKNOWN_NODE,
            message=msg,
            hint=(
                "Add the node before its edges, or construct the store with "
                "unknown_node_policy=auto_create_placeholder"
            ),
            subjects=(node_id,),
        )

    @staticmethod
    def unknown_edge(source: str, target: str, kind: str | None = None) -> Diagnostic:
        """No edge connects the requested pair.

        Args:
            source: Source node id
            target: Target node id
            kind: Edge kind, or None when any kind was acceptable

        Returns:
            Diagnostic for UNKNOWN_EDGE
        """
        if kind is None:
            msg = f"No edge '{source}' -> '{target}' in the graph"
        else:
            msg = f"No edge '{source}' -[{kind}]-> '{target}' in the graph"
        return Diagnostic(
            code=DiagnosticCode.UNKNOWN_EDGE,
            message=msg,
            hint="Cycles passed to the selector must come from the same graph",
            subjects=(source, target),
        )

    @staticmethod
    def node_category_conflict(node_id: str, existing: str, requested: str) -> Diagnostic:
        """Node id re-added under a different category.

        Args:
            node_id: The colliding id
            existing: Category already stored
            requested: Category of the rejected insertion

        Returns:
            Diagnostic for NODE_CATEGORY_CONFLICT
        """
        msg = (
            f"Node '{node_id}' already exists with category '{existing}', "
            f"cannot re-add as '{requested}'"
        )
        return Diagnostic(
            code=DiagnosticCode.NODE_CATEGORY_CONFLICT,
            message=msg,
            hint="Node ids must be unique across categories; qualify the id",
            subjects=(node_id,),
        )

    @staticmethod
    def cycle_detected(remaining_nodes: Sequence[str]) -> Diagnostic:
        """Topological order requested on a graph containing a cycle.

        Args:
            remaining_nodes: Nodes that could not be ordered

        Returns:
            Diagnostic for CYCLE_DETECTED
        """
        msg = f"Cannot order {len(remaining_nodes)} node(s): dependency cycle"
        return Diagnostic(
            code=DiagnosticCode.CYCLE_DETECTED,
            message=msg,
            hint="Run cycle analysis on the remaining nodes to locate the cycle",
            subjects=_preview(remaining_nodes),
        )

    @staticmethod
    def invariant_violation(detail: str) -> Diagnostic:
        """Internal consistency check failed.

        Args:
            detail: What was inconsistent

        Returns:
            Diagnostic for INVARIANT_VIOLATED
        """
        msg = f"Internal invariant violated: {detail}"
        return Diagnostic(
            code=DiagnosticCode.INVARIANT_VIOLATED,
            message=msg,
            hint="This is a bug in depgraph; please report it with the input graph",
        )

    @staticmethod
    def enumeration_truncated(bound: str, component: int, limit: int) -> Diagnostic:
        """Cycle enumeration stopped at a bound.

        Args:
            bound: Name of the bound that was hit
            component: Index of the SCC being enumerated
            limit: Configured value of the bound

        Returns:
            Diagnostic for ENUMERATION_TRUNCATED (severity: warning)
        """
        msg = f"Cycle enumeration of component {component} truncated: {bound}={limit} reached"
        return Diagnostic(
            code=DiagnosticCode.ENUMERATION_TRUNCATED,
            message=msg,
            hint=f"Raise {bound} for complete coverage",
            severity="warning",
        )

    @staticmethod
    def config_invalid(source: str, detail: str) -> Diagnostic:
        """Configuration could not be parsed or failed validation.

        Args:
            source: File path or "<mapping>"
            detail: Underlying problem

        Returns:
            Diagnostic for CONFIG_INVALID
        """
        msg = f"Invalid graph configuration in {source}: {detail}"
        return Diagnostic(code=DiagnosticCode.CONFIG_INVALID, message=msg)

    @staticmethod
    def config_unknown_key(key: str, section: str) -> Diagnostic:
        """Configuration contains an unrecognized key.

        Args:
            key: The unknown key
            section: Section in which it appeared

        Returns:
            Diagnostic for CONFIG_UNKNOWN_KEY
        """
        msg = f"Unknown key '{key}' in '{section}' section"
        return Diagnostic(
            code=DiagnosticCode.CONFIG_UNKNOWN_KEY,
            message=msg,
            hint="Check for typos; unknown keys are rejected rather than ignored",
            subjects=(key,),
        )

    @staticmethod
    def sink_retries_exhausted(attempts: int, nodes: int, edges: int, cause: str) -> Diagnostic:
        """Sink failed a batch on every attempt.

        Args:
            attempts: Total attempts made
            nodes: Nodes in the failed batch
            edges: Edges in the failed batch
            cause: Message of the last underlying error

        Returns:
            Diagnostic for SINK_RETRIES_EXHAUSTED
        """
        msg = (
            f"Sink batch of {nodes} node(s) and {edges} edge(s) failed after "
            f"{attempts} attempt(s): {cause}"
        )
        return Diagnostic(
            code=DiagnosticCode.SINK_RETRIES_EXHAUSTED,
            message=msg,
            hint="Check connectivity to the external store; the batch was not persisted",
        )
