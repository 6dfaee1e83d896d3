"""Core configuration and errors for the log inspector."""

from llm_log_inspector.core.config import (
    InspectorConfig,
    PricingRuleConfig,
    load_config,
)
from llm_log_inspector.core.errors import (
    AcquisitionError,
    ConfigurationError,
    InspectorInputError,
    InvalidInputError,
    InvalidPricingRuleError,
    LineDecodeError,
)

__all__ = [
    "InspectorConfig",
    "PricingRuleConfig",
    "load_config",
    "AcquisitionError",
    "ConfigurationError",
    "InspectorInputError",
    "InvalidInputError",
    "InvalidPricingRuleError",
    "LineDecodeError",
]
