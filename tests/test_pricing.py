"""Tests for the pricing table and cost estimation."""

import math

import pytest

from llm_log_inspector.core.config import InspectorConfig, PricingRuleConfig
from llm_log_inspector.core.errors import InvalidPricingRuleError
from llm_log_inspector.services.pricing import (
    DEFAULT_PRICING_RULES,
    PricingRule,
    PricingTable,
    estimate_cost,
)


class TestPricingRule:
    """Tests for PricingRule."""

    def test_compute_cost_separate_rates(self) -> None:
        """Test prompt and completion tokens are priced separately."""
        rule = PricingRule(pattern="m", input_per_million=2.0, output_per_million=8.0)
        # 500k * 2 / 1M + 250k * 8 / 1M = 1.0 + 2.0
        assert rule.compute_cost(500_000, 250_000) == pytest.approx(3.0)

    def test_compute_cost_combined_volume(self) -> None:
        """Test combined-volume rules apply both rates to all tokens."""
        rule = PricingRule(
            pattern="m", input_per_million=0.1, output_per_million=0.4, combined_volume=True
        )
        # (600k + 400k) * (0.1 + 0.4) / 1M
        assert rule.compute_cost(600_000, 400_000) == pytest.approx(0.5)

    def test_compute_cost_zero_tokens(self) -> None:
        rule = PricingRule(pattern="m", input_per_million=2.0, output_per_million=8.0)
        assert rule.compute_cost(0, 0) == 0.0

    def test_matches_substring(self) -> None:
        rule = PricingRule(pattern="4o", input_per_million=1.0, output_per_million=1.0)
        assert rule.matches("openai/gpt-4o-2024-08-06")
        assert not rule.matches("claude-3-5-sonnet")

    def test_rejects_empty_pattern(self) -> None:
        with pytest.raises(InvalidPricingRuleError):
            PricingRule(pattern="", input_per_million=1.0, output_per_million=1.0)

    def test_rejects_negative_rates(self) -> None:
        with pytest.raises(InvalidPricingRuleError):
            PricingRule(pattern="m", input_per_million=-1.0, output_per_million=1.0)


class TestPricingTable:
    """Tests for rule precedence and record costs."""

    def test_gpt_4o_fixture(self, make_record) -> None:
        """Test 1M/1M tokens on gpt-4o cost the sum of both published rates."""
        record = make_record(
            model="gpt-4o", prompt_tokens=1_000_000, completion_tokens=1_000_000
        )
        assert estimate_cost([record]) == pytest.approx(2.50 + 10.00)

    @pytest.mark.parametrize(
        ("prompt_tokens", "completion_tokens"),
        [(1, 0), (0, 1), (1_000_000, 1_000_000), (12_345, 678)],
    )
    def test_mini_never_uses_base_rule(self, make_record, prompt_tokens, completion_tokens):
        """Test gpt-4o-mini is priced by the mini rule for any token counts."""
        record = make_record(
            model="gpt-4o-mini",
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
        )
        expected = (prompt_tokens * 0.15 + completion_tokens * 0.60) / 1_000_000
        assert estimate_cost([record]) == pytest.approx(expected)

    def test_first_match_wins(self) -> None:
        table = PricingTable(DEFAULT_PRICING_RULES)
        assert table.match("gpt-4o-mini").pattern == "4o-mini"
        assert table.match("gpt-4o").pattern == "4o"
        assert table.match("gemini-2.0-flash").pattern == "gemini"

    def test_order_defines_precedence(self) -> None:
        """Test a general rule listed first shadows the specific one."""
        general = PricingRule(pattern="4o", input_per_million=1.0, output_per_million=1.0)
        specific = PricingRule(pattern="4o-mini", input_per_million=2.0, output_per_million=2.0)
        assert PricingTable([general, specific]).match("gpt-4o-mini") is general

    def test_gemini_combined_volume(self, make_record) -> None:
        record = make_record(
            model="gemini-2.0-flash", prompt_tokens=1_000_000, completion_tokens=1_000_000
        )
        assert estimate_cost([record]) == pytest.approx(2_000_000 * 0.5 / 1_000_000)

    def test_unknown_model_costs_nothing(self, make_record) -> None:
        record = make_record(model="claude-3-opus", prompt_tokens=10, completion_tokens=10)
        assert estimate_cost([record]) == 0.0

    def test_empty_set(self) -> None:
        assert estimate_cost([]) == 0.0

    def test_nan_tokens_excluded(self, make_record) -> None:
        """Test undecodable token counts contribute nothing instead of NaN."""
        bad = make_record(model="gpt-4o", prompt_tokens=math.nan, completion_tokens=10)
        good = make_record(model="gpt-4o", prompt_tokens=0, completion_tokens=1_000_000)
        total = estimate_cost([bad, good])
        assert not math.isnan(total)
        assert total == pytest.approx(10.0)

    def test_order_independent(self, make_record) -> None:
        records = [
            make_record(model="gpt-4o", prompt_tokens=100, completion_tokens=200),
            make_record(model="gpt-4o-mini", prompt_tokens=300, completion_tokens=400),
            make_record(model="gemini-pro", prompt_tokens=500, completion_tokens=600),
        ]
        assert estimate_cost(records) == pytest.approx(estimate_cost(list(reversed(records))))
        assert estimate_cost(records) >= 0

    def test_from_config(self, make_record) -> None:
        config = InspectorConfig(
            pricing=[
                PricingRuleConfig(pattern="llama", input_per_million=1.0, output_per_million=1.0)
            ]
        )
        table = PricingTable.from_config(config)
        record = make_record(model="llama-3", prompt_tokens=1_000_000, completion_tokens=0)
        assert table.estimate_cost([record]) == pytest.approx(1.0)
        assert table.match("gpt-4o") is None
