"""Per-model cost estimation from a fixed, ordered pricing table."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from llm_log_inspector.core.config import DEFAULT_PRICING
from llm_log_inspector.core.errors import InvalidPricingRuleError
from llm_log_inspector.models import LogRecord

if TYPE_CHECKING:
    from llm_log_inspector.core.config import InspectorConfig

logger = structlog.get_logger()

TOKENS_PER_MILLION = 1_000_000


@dataclass(frozen=True)
class PricingRule:
    """Pricing for every model whose identifier contains ``pattern``."""

    pattern: str
    input_per_million: float  # USD per 1M prompt tokens
    output_per_million: float  # USD per 1M completion tokens
    combined_volume: bool = False

    def __post_init__(self) -> None:
        if not self.pattern:
            raise InvalidPricingRuleError(self.pattern, "pattern is empty")
        if self.input_per_million < 0 or self.output_per_million < 0:
            raise InvalidPricingRuleError(self.pattern, "rates must be non-negative")

    def matches(self, model: str) -> bool:
        return self.pattern in model

    def compute_cost(self, prompt_tokens: int, completion_tokens: int) -> float:
        """Compute total cost for a request.

        Args:
            prompt_tokens: Number of input tokens.
            completion_tokens: Number of output tokens.

        Returns:
            Total cost in USD.
        """
        if self.combined_volume:
            volume = prompt_tokens + completion_tokens
            rate = self.input_per_million + self.output_per_million
            return volume * rate / TOKENS_PER_MILLION
        return (
            prompt_tokens * self.input_per_million + completion_tokens * self.output_per_million
        ) / TOKENS_PER_MILLION


DEFAULT_PRICING_RULES: tuple[PricingRule, ...] = tuple(
    PricingRule(**entry.model_dump()) for entry in DEFAULT_PRICING
)


class PricingTable:
    """Ordered pricing rules, evaluated top to bottom; the first match wins.

    Usage:
        table = PricingTable.from_config(config)
        cost = table.estimate_cost(records)
    """

    def __init__(self, rules: Sequence[PricingRule] = DEFAULT_PRICING_RULES) -> None:
        self.rules = tuple(rules)

    @classmethod
    def from_config(cls, config: InspectorConfig) -> PricingTable:
        return cls(PricingRule(**entry.model_dump()) for entry in config.pricing)

    def match(self, model: str) -> PricingRule | None:
        """Get the first rule whose pattern occurs in ``model``."""
        for rule in self.rules:
            if rule.matches(model):
                return rule
        return None

    def record_cost(self, record: LogRecord) -> float:
        """Cost of one record in USD; 0.0 for unknown models or undecodable tokens."""
        if not record.has_valid_tokens:
            logger.warning(
                "cost_skipped_invalid_tokens",
                record_id=record.id,
                model=record.model,
            )
            return 0.0
        rule = self.match(record.model)
        if rule is None:
            logger.debug("pricing_unknown", model=record.model)
            return 0.0
        return rule.compute_cost(int(record.prompt_tokens), int(record.completion_tokens))

    def estimate_cost(self, records: Iterable[LogRecord]) -> float:
        """Sum of per-record costs in USD."""
        return sum((self.record_cost(record) for record in records), 0.0)


def estimate_cost(
    records: Iterable[LogRecord],
    rules: Sequence[PricingRule] | None = None,
) -> float:
    """Estimate the total USD cost of a record set.

    Args:
        records: Parsed log records.
        rules: Ordered pricing rules. Defaults to the built-in table.

    Returns:
        Non-negative cost in USD; 0.0 for an empty set.
    """
    table = PricingTable(rules) if rules is not None else PricingTable()
    return table.estimate_cost(records)
