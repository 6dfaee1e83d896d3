"""Custom exceptions for configuration, input and decoding errors."""

from __future__ import annotations


class ConfigurationError(Exception):
    """Base exception for configuration errors with optional suggestions."""

    def __init__(self, message: str, suggestion: str | None = None) -> None:
        self.message = message
        self.suggestion = suggestion
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = f"[Configuration Error] {self.message}"
        if self.suggestion:
            msg += f"\n[Suggestion] {self.suggestion}"
        return msg


class InvalidPricingRuleError(ConfigurationError):
    """Error when a pricing rule cannot be used."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(
            f"Invalid pricing rule '{pattern}': {reason}",
            "Use a non-empty model pattern and non-negative per-million rates.",
        )


class InspectorInputError(Exception):
    """Base exception for problems with the raw log text."""


class InvalidInputError(InspectorInputError):
    """The input was obtained but is not a usable log batch."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Invalid data format: {reason}")


class AcquisitionError(InspectorInputError):
    """The raw input could not be obtained from its source."""

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"Failed to read input from {source}: {reason}")


class LineDecodeError(ValueError):
    """A single log line could not be decoded into a record."""
