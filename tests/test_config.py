"""Tests for configuration loading and validation."""

import tempfile
from pathlib import Path

import pydantic
import pytest
import yaml

from llm_log_inspector.core.config import (
    DEFAULT_PRICING,
    SNAPSHOT_ENV_VAR,
    InspectorConfig,
    PricingRuleConfig,
    load_config,
)
from llm_log_inspector.services.pricing import DEFAULT_PRICING_RULES


class TestInspectorConfig:
    """Tests for InspectorConfig."""

    def test_defaults(self):
        config = InspectorConfig()
        assert config.duration_mode == "wall_clock"
        assert config.bottleneck_threshold == 0.1
        assert config.event_name_prefixes == ["event:"]
        assert config.usd_to_inr_rate == 85.0
        assert [r.pattern for r in config.pricing] == ["4o-mini", "4o", "gemini"]

    def test_default_pricing_matches_rules(self):
        assert [r.pattern for r in DEFAULT_PRICING] == [r.pattern for r in DEFAULT_PRICING_RULES]

    def test_empty_pattern_fails(self):
        with pytest.raises(pydantic.ValidationError, match="cannot be empty"):
            PricingRuleConfig(pattern=" ", input_per_million=1.0, output_per_million=1.0)

    def test_negative_rate_fails(self):
        with pytest.raises(pydantic.ValidationError):
            PricingRuleConfig(pattern="m", input_per_million=-1.0, output_per_million=1.0)

    @pytest.mark.parametrize("threshold", [0, -0.5, 1.5])
    def test_threshold_bounds(self, threshold):
        with pytest.raises(pydantic.ValidationError):
            InspectorConfig(bottleneck_threshold=threshold)

    def test_unknown_duration_mode_fails(self):
        with pytest.raises(pydantic.ValidationError):
            InspectorConfig(duration_mode="average")

    def test_empty_prefixes_dropped(self):
        config = InspectorConfig(event_name_prefixes=["", "llm:"])
        assert config.event_name_prefixes == ["llm:"]

    def test_snapshot_path_from_env(self, monkeypatch):
        monkeypatch.setenv(SNAPSHOT_ENV_VAR, "/tmp/env-summary.json")
        config = InspectorConfig(snapshot_path="config-summary.json")
        assert config.get_snapshot_path() == Path("/tmp/env-summary.json")

    def test_snapshot_path_from_config(self, monkeypatch):
        monkeypatch.delenv(SNAPSHOT_ENV_VAR, raising=False)
        assert InspectorConfig().get_snapshot_path() is None
        config = InspectorConfig(snapshot_path="runs/summary.json")
        assert config.get_snapshot_path() == Path("runs/summary.json")


class TestLoadConfig:
    """Tests for config file loading."""

    def test_load_valid_yaml(self):
        config_data = {
            "duration_mode": "sum",
            "bottleneck_threshold": 0.25,
            "pricing": [
                {"pattern": "llama", "input_per_million": 0.2, "output_per_million": 0.2},
            ],
        }
        with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
            yaml.dump(config_data, f)
            f.flush()
            config = load_config(f.name)

        assert config.duration_mode == "sum"
        assert config.bottleneck_threshold == 0.25
        assert [r.pattern for r in config.pricing] == ["llama"]
        Path(f.name).unlink()

    def test_empty_yaml_gives_defaults(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.yaml"
            path.write_text("", encoding="utf-8")
            assert load_config(path) == InspectorConfig()

    def test_load_missing_file(self):
        with pytest.raises(FileNotFoundError):
            load_config("/nonexistent/config.yaml")

    def test_load_invalid_yaml(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.yaml"
            path.write_text("pricing:\n  - pattern: ''\n", encoding="utf-8")
            with pytest.raises(pydantic.ValidationError):
                load_config(path)
