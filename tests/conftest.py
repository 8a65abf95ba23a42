"""Pytest configuration for the depgraph test suite.

Hypothesis profiles (selected once per session):
- dev: local runs, 200 examples per property
- ci: CI=true, 50 derandomized examples, failure blobs printed
- verbose: 100 examples with per-example output

HYPOTHESIS_PROFILE overrides the auto-detection.

Graph properties enumerate every cycle of the drawn graph, so run time per
example varies by orders of magnitude between a chain and a dense ring.
Deadlines are therefore disabled for all profiles and the too_slow health
check is suppressed.

Fuzz tests (``@pytest.mark.fuzz``, ``tests/fuzz``) are skipped unless
requested with ``pytest -m fuzz`` or by naming a fuzz path.
"""

import os

import pytest
from hypothesis import HealthCheck, Phase, Verbosity, settings

from depgraph.graph import GraphStore

# =============================================================================
# HYPOTHESIS PROFILES
# =============================================================================

_PHASES = [Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink]
_SLOW = [HealthCheck.too_slow]

settings.register_profile(
    "dev",
    max_examples=200,
    phases=_PHASES,
    deadline=None,
    suppress_health_check=_SLOW,
)
settings.register_profile(
    "ci",
    max_examples=50,
    phases=_PHASES,
    deadline=None,
    suppress_health_check=_SLOW,
    derandomize=True,
    print_blob=True,
)
settings.register_profile(
    "verbose",
    max_examples=100,
    phases=_PHASES,
    deadline=None,
    suppress_health_check=_SLOW,
    verbosity=Verbosity.verbose,
)


def _detect_profile() -> str:
    """HYPOTHESIS_PROFILE if valid, else "ci" under CI=true, else "dev"."""
    explicit = os.environ.get("HYPOTHESIS_PROFILE")
    if explicit in ("dev", "ci", "verbose"):
        return explicit
    if os.environ.get("CI") == "true":
        return "ci"
    return "dev"


settings.load_profile(_detect_profile())


# =============================================================================
# SHARED GRAPHS
# =============================================================================


@pytest.fixture
def triangle() -> GraphStore:
    """A -> B -> C -> A: one SCC, one cycle."""
    graph = GraphStore()
    for node_id in "ABC":
        graph.add_node(node_id)
    for source, target in ("AB", "BC", "CA"):
        graph.add_edge(source, target)
    return graph


@pytest.fixture
def beans() -> GraphStore:
    """Two bean cycles (one mixing injection kinds) plus an acyclic tail."""
    graph = GraphStore()
    for bean in ("orderService", "paymentService", "auditService", "mailer", "logger"):
        graph.add_node(bean, "bean")
    graph.add_edge("orderService", "paymentService", "field")
    graph.add_edge("paymentService", "orderService", "constructor", weight=5.0)
    graph.add_edge("auditService", "mailer", "setter")
    graph.add_edge("mailer", "auditService", "field")
    graph.add_edge("mailer", "logger", "field")
    return graph


# =============================================================================
# FUZZ GATING
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "fuzz: Intensive property tests for fuzzing (excluded from normal test runs)",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip fuzz-marked items unless ``-m`` or a path argument mentions fuzz."""
    if "fuzz" in str(config.getoption("-m", default="")):
        return
    if any("fuzz" in str(arg) for arg in config.invocation_params.args):
        return

    skip_fuzz = pytest.mark.skip(reason="Fuzzing test - run with: pytest -m fuzz")
    for item in items:
        if "fuzz" in item.keywords:
            item.add_marker(skip_fuzz)
