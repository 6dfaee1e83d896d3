"""Configuration schemas and loading for the log inspector."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

SNAPSHOT_ENV_VAR = "LLM_LOG_INSPECTOR_SNAPSHOT"
DEFAULT_EVENT_NAME_PREFIXES = ["event:"]


class PricingRuleConfig(BaseModel):
    """One entry of the ordered pricing table.

    Attributes:
        pattern: Substring matched against the record's model identifier.
        input_per_million: USD per million prompt tokens.
        output_per_million: USD per million completion tokens.
        combined_volume: Apply both rates to prompt + completion tokens.
    """

    model_config = ConfigDict(frozen=True)

    pattern: str
    input_per_million: float = Field(ge=0)
    output_per_million: float = Field(ge=0)
    combined_volume: bool = False

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        if not v or not v.strip():
            msg = "Pricing pattern cannot be empty"
            raise ValueError(msg)
        return v


# Most specific patterns first: "4o-mini" must win over "4o".
DEFAULT_PRICING = [
    PricingRuleConfig(pattern="4o-mini", input_per_million=0.15, output_per_million=0.60),
    PricingRuleConfig(pattern="4o", input_per_million=2.50, output_per_million=10.00),
    # Billed on the combined prompt + completion volume at both rates.
    PricingRuleConfig(
        pattern="gemini",
        input_per_million=0.10,
        output_per_million=0.40,
        combined_volume=True,
    ),
]


class InspectorConfig(BaseModel):
    """Complete inspector configuration.

    Attributes:
        pricing: Pricing rules, checked top to bottom, first match wins.
        duration_mode: "wall_clock" collapses concurrent work, "sum" adds
            every record's duration.
        bottleneck_threshold: Fraction of the total duration a record must
            exceed to be considered a bottleneck.
        event_name_prefixes: Literal prefixes stripped from event names.
        usd_to_inr_rate: Conversion rate for the secondary currency figure.
        snapshot_path: Where the summary snapshot is written, if anywhere.
    """

    pricing: list[PricingRuleConfig] = Field(default_factory=lambda: list(DEFAULT_PRICING))
    duration_mode: Literal["wall_clock", "sum"] = "wall_clock"
    bottleneck_threshold: float = Field(default=0.1, gt=0, le=1)
    event_name_prefixes: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EVENT_NAME_PREFIXES)
    )
    usd_to_inr_rate: float = Field(default=85.0, gt=0)
    snapshot_path: str | None = None

    @field_validator("event_name_prefixes")
    @classmethod
    def validate_prefixes(cls, v: list[str]) -> list[str]:
        """Drop empty prefixes; they would match every name."""
        return [prefix for prefix in v if prefix]

    def get_snapshot_path(self) -> Path | None:
        """Get snapshot path from environment or config."""
        value = os.environ.get(SNAPSHOT_ENV_VAR) or self.snapshot_path
        return Path(value) if value else None


def load_config(path: str | Path) -> InspectorConfig:
    """Load and validate configuration from YAML file.

    Args:
        path: Path to YAML configuration file.

    Returns:
        Validated InspectorConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValidationError: If config is invalid.
    """
    config_path = Path(path)
    if not config_path.exists():
        msg = f"Configuration file not found: {config_path}"
        raise FileNotFoundError(msg)

    with config_path.open() as f:
        data = yaml.safe_load(f)

    return InspectorConfig.model_validate(data or {})
