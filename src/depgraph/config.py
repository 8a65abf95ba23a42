"""Run configuration: enumeration bounds and sink sizing.

Frozen dataclasses validated at construction, plus a loader for the
``graph:`` section of a YAML file:

    graph:
      batch_size: 500
      max_retries: 5
      retry_backoff: 0.1
      queue_size: 1000
      analysis:
        max_cycles: 2000
        max_cycle_length: 12
        unknown_node_policy: auto_create_placeholder

Sink keys sit directly under ``graph:`` (``batch_size`` keeps the name
used by existing ``graph.yml`` files); analysis keys live in a nested
``analysis:`` mapping.

Python 3.13+.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml

from depgraph.constants import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_MAX_CYCLES,
    DEFAULT_MAX_RETRIES,
    DEFAULT_QUEUE_SIZE,
    DEFAULT_RETRY_BACKOFF,
    WEIGHT_EPSILON,
)
from depgraph.diagnostics import ConfigError, ErrorTemplate
from depgraph.enums import UnknownNodePolicy

__all__ = [
    "AnalysisConfig",
    "GraphConfig",
    "SinkConfig",
    "config_from_mapping",
    "load_config",
]

logger = logging.getLogger(__name__)

_SECTION = "graph"
_ANALYSIS = "analysis"


@dataclass(frozen=True, slots=True)
class AnalysisConfig:
    """Bounds and knobs for cycle analysis.

    Attributes:
        max_cycles: Cycles reported per run before truncating (default: 10000)
        max_cycle_length: Longest cycle explored, in distinct nodes; None = SCC size
        unknown_node_policy: Policy for stores built from this config (default: reject)
        weight_epsilon: Floor applied to arc weights in feedback scoring (default: 1e-9)

    Example:
        >>> AnalysisConfig(max_cycles=50).max_cycles
        50
    """

    max_cycles: int = DEFAULT_MAX_CYCLES
    max_cycle_length: int | None = None
    unknown_node_policy: UnknownNodePolicy = UnknownNodePolicy.REJECT
    weight_epsilon: float = WEIGHT_EPSILON

    def __post_init__(self) -> None:
        """Validate configuration values at construction time.

        Raises:
            ValueError: If a bound or epsilon is not positive, or the policy is unknown
        """
        if self.max_cycles <= 0:
            msg = "max_cycles must be positive"
            raise ValueError(msg)
        if self.max_cycle_length is not None and self.max_cycle_length <= 0:
            msg = "max_cycle_length must be positive"
            raise ValueError(msg)
        if not self.weight_epsilon > 0:
            msg = "weight_epsilon must be positive"
            raise ValueError(msg)
        object.__setattr__(self, "unknown_node_policy", UnknownNodePolicy(self.unknown_node_policy))


@dataclass(frozen=True, slots=True)
class SinkConfig:
    """Batching and retry settings for streaming sinks.

    Attributes:
        batch_size: Entities (nodes + edges) per committed batch (default: 1000)
        max_retries: Retries after the first failed attempt (default: 3)
        retry_backoff: Seconds; retry N sleeps ``retry_backoff * N`` (default: 0.5)
        queue_size: Bounded hand-off queue for BackgroundSink (default: 10000)
    """

    batch_size: int = DEFAULT_BATCH_SIZE
    max_retries: int = DEFAULT_MAX_RETRIES
    retry_backoff: float = DEFAULT_RETRY_BACKOFF
    queue_size: int = DEFAULT_QUEUE_SIZE

    def __post_init__(self) -> None:
        """Validate configuration values at construction time.

        Raises:
            ValueError: If a size is not positive or a retry setting is negative
        """
        if self.batch_size <= 0:
            msg = "batch_size must be positive"
            raise ValueError(msg)
        if self.max_retries < 0:
            msg = "max_retries must be non-negative"
            raise ValueError(msg)
        if math.isnan(self.retry_backoff) or self.retry_backoff < 0:
            msg = "retry_backoff must be non-negative"
            raise ValueError(msg)
        if self.queue_size <= 0:
            msg = "queue_size must be positive"
            raise ValueError(msg)


@dataclass(frozen=True, slots=True)
class GraphConfig:
    """Complete configuration for one run."""

    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    sink: SinkConfig = field(default_factory=SinkConfig)


def _check_keys(data: Mapping[str, Any], allowed: set[str], section: str) -> None:
    for key in data:
        if key not in allowed:
            raise ConfigError(ErrorTemplate.config_unknown_key(str(key), section))


def _mapping(value: object, section: str, source: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        detail = f"'{section}' must be a mapping, got {type(value).__name__}"
        raise ConfigError(ErrorTemplate.config_invalid(source, detail))
    return value


def config_from_mapping(
    data: Mapping[str, Any] | None, *, source: str = "<mapping>"
) -> GraphConfig:
    """Build a GraphConfig from already-parsed data.

    Args:
        data: Whole document; only its ``graph`` entry is read
        source: Name used in error messages

    Returns:
        GraphConfig; defaults when the ``graph`` section is absent

    Raises:
        ConfigError: On unknown keys, wrong shapes or invalid values
    """
    document = _mapping(data, "document", source)
    section = _mapping(document.get(_SECTION), _SECTION, source)

    sink_keys = {f.name for f in fields(SinkConfig)}
    analysis_keys = {f.name for f in fields(AnalysisConfig)}
    _check_keys(section, sink_keys | {_ANALYSIS}, _SECTION)

    analysis_data = _mapping(section.get(_ANALYSIS), f"{_SECTION}.{_ANALYSIS}", source)
    _check_keys(analysis_data, analysis_keys, f"{_SECTION}.{_ANALYSIS}")

    sink_data = {k: v for k, v in section.items() if k != _ANALYSIS}
    try:
        config = GraphConfig(
            analysis=AnalysisConfig(**analysis_data),
            sink=SinkConfig(**sink_data),
        )
    except (TypeError, ValueError) as e:
        raise ConfigError(ErrorTemplate.config_invalid(source, str(e))) from e

    logger.debug("Loaded graph configuration from %s: %s", source, config)
    return config


def load_config(path: str | Path) -> GraphConfig:
    """Read the ``graph`` section of a YAML file.

    Args:
        path: YAML file (e.g. ``graph.yml``)

    Returns:
        GraphConfig

    Raises:
        ConfigError: If the file is not valid YAML or fails validation
        OSError: If the file cannot be read
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(ErrorTemplate.config_invalid(str(path), str(e))) from e
    return config_from_mapping(data, source=str(path))
