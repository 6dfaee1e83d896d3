"""Aggregate view over a parsed batch of records."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .record import LogRecord


class AggregateSummary(BaseModel):
    """Records of one batch plus the totals derived from them.

    Instances are immutable; a new summary is built whenever the record set
    changes.
    """

    model_config = ConfigDict(frozen=True)

    records: list[LogRecord] = Field(default_factory=list)
    total_cost_usd: float = 0.0
    total_duration_s: float = 0.0

    @classmethod
    def empty(cls) -> AggregateSummary:
        return cls()

    @property
    def is_empty(self) -> bool:
        return not self.records

    def sorted_records(self) -> list[LogRecord]:
        """Records ordered by start time, input order breaking ties."""
        return sorted(self.records, key=lambda r: r.timestamp)

    def get_record(self, record_id: str) -> LogRecord | None:
        for record in self.records:
            if record.id == record_id:
                return record
        return None

    def invalid_numeric_ids(self) -> list[str]:
        """IDs of records with a token or duration field that failed to decode."""
        return [r.id for r in self.records if not r.has_valid_numbers]
