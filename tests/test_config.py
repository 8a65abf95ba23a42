"""Tests for config.py: frozen configuration objects and YAML loading.

Python 3.13+.
"""

from __future__ import annotations

from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest

from depgraph.config import (
    AnalysisConfig,
    GraphConfig,
    SinkConfig,
    config_from_mapping,
    load_config,
)
from depgraph.constants import DEFAULT_BATCH_SIZE, DEFAULT_MAX_CYCLES
from depgraph.diagnostics import ConfigError, DiagnosticCode
from depgraph.enums import UnknownNodePolicy

FULL_YAML = """\
graph:
  batch_size: 500
  max_retries: 5
  retry_backoff: 0.1
  queue_size: 1000
  analysis:
    max_cycles: 2000
    max_cycle_length: 12
    unknown_node_policy: auto_create_placeholder
other_tool:
  anything: goes
"""


class TestAnalysisConfig:
    """AnalysisConfig validation."""

    def test_defaults(self) -> None:
        """Defaults match the documented constants."""
        config = AnalysisConfig()
        assert config.max_cycles == DEFAULT_MAX_CYCLES
        assert config.max_cycle_length is None
        assert config.unknown_node_policy is UnknownNodePolicy.REJECT

    def test_policy_string_coerced(self) -> None:
        """A policy given as text becomes the enum member."""
        config = AnalysisConfig(unknown_node_policy="auto_create_placeholder")  # type: ignore[arg-type]
        assert config.unknown_node_policy is UnknownNodePolicy.AUTO_CREATE_PLACEHOLDER

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_cycles": 0},
            {"max_cycle_length": 0},
            {"weight_epsilon": 0.0},
            {"unknown_node_policy": "ignore"},
        ],
    )
    def test_invalid_values(self, kwargs: dict[str, object]) -> None:
        """Invalid values raise ValueError at construction."""
        with pytest.raises(ValueError):  # noqa: PT011 - messages vary per field
            AnalysisConfig(**kwargs)  # type: ignore[arg-type]

    def test_frozen(self) -> None:
        """Configs are immutable."""
        config = AnalysisConfig()
        with pytest.raises(FrozenInstanceError):
            config.max_cycles = 1  # type: ignore[misc]


class TestSinkConfig:
    """SinkConfig validation."""

    def test_defaults(self) -> None:
        """batch_size defaults to 1000."""
        assert SinkConfig().batch_size == DEFAULT_BATCH_SIZE == 1000

    @pytest.mark.parametrize(
        ("field", "value", "message"),
        [
            ("batch_size", 0, "batch_size"),
            ("max_retries", -1, "max_retries"),
            ("retry_backoff", -0.5, "retry_backoff"),
            ("queue_size", 0, "queue_size"),
        ],
    )
    def test_invalid_values(self, field: str, value: object, message: str) -> None:
        """Invalid values raise ValueError naming the field."""
        with pytest.raises(ValueError, match=message):
            SinkConfig(**{field: value})  # type: ignore[arg-type]

    def test_zero_retries_allowed(self) -> None:
        """max_retries=0 means one attempt."""
        assert SinkConfig(max_retries=0).max_retries == 0


class TestConfigFromMapping:
    """config_from_mapping parsing."""

    def test_missing_section_gives_defaults(self) -> None:
        """No graph section: defaults."""
        assert config_from_mapping({"other": {}}) == GraphConfig()
        assert config_from_mapping(None) == GraphConfig()

    def test_empty_section_gives_defaults(self) -> None:
        """graph: with no keys yields defaults."""
        assert config_from_mapping({"graph": None}) == GraphConfig()

    def test_unknown_top_level_key(self) -> None:
        """Unknown keys in graph: are rejected."""
        with pytest.raises(ConfigError) as exc_info:
            config_from_mapping({"graph": {"batchsize": 10}})
        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code is DiagnosticCode.CONFIG_UNKNOWN_KEY
        assert "batchsize" in str(exc_info.value)

    def test_unknown_analysis_key(self) -> None:
        """Unknown keys in graph.analysis: are rejected."""
        with pytest.raises(ConfigError, match="graph.analysis"):
            config_from_mapping({"graph": {"analysis": {"max_cycle": 3}}})

    def test_invalid_value(self) -> None:
        """Validation errors become ConfigError."""
        with pytest.raises(ConfigError) as exc_info:
            config_from_mapping({"graph": {"batch_size": -5}})
        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code is DiagnosticCode.CONFIG_INVALID
        assert isinstance(exc_info.value.__cause__, ValueError)

    def test_wrong_type(self) -> None:
        """Type errors become ConfigError."""
        with pytest.raises(ConfigError):
            config_from_mapping({"graph": {"batch_size": "many"}})

    def test_section_not_a_mapping(self) -> None:
        """graph: must be a mapping."""
        with pytest.raises(ConfigError, match="must be a mapping"):
            config_from_mapping({"graph": [1, 2]})


class TestLoadConfig:
    """load_config reading YAML files."""

    def test_full_file(self, tmp_path: Path) -> None:
        """All keys are read; unrelated sections are ignored."""
        path = tmp_path / "graph.yml"
        path.write_text(FULL_YAML, encoding="utf-8")
        config = load_config(path)
        assert config.sink == SinkConfig(
            batch_size=500, max_retries=5, retry_backoff=0.1, queue_size=1000
        )
        assert config.analysis == AnalysisConfig(
            max_cycles=2000,
            max_cycle_length=12,
            unknown_node_policy=UnknownNodePolicy.AUTO_CREATE_PLACEHOLDER,
        )

    def test_empty_file(self, tmp_path: Path) -> None:
        """An empty file gives defaults."""
        path = tmp_path / "graph.yml"
        path.write_text("", encoding="utf-8")
        assert load_config(str(path)) == GraphConfig()

    def test_malformed_yaml(self, tmp_path: Path) -> None:
        """YAML syntax errors become ConfigError naming the file."""
        path = tmp_path / "graph.yml"
        path.write_text("graph: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="graph.yml"):
            load_config(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing file propagates the OS error."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "absent.yml")
