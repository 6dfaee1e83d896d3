"""Pipeline orchestration: parse, price, time, project, detect."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

import structlog

from llm_log_inspector.core.config import InspectorConfig
from llm_log_inspector.core.errors import InvalidInputError
from llm_log_inspector.models import AggregateSummary, LogRecord, TimelineEvent
from llm_log_inspector.services.bottlenecks import detect_bottlenecks
from llm_log_inspector.services.duration import aggregate_duration
from llm_log_inspector.services.parser import parse_batch
from llm_log_inspector.services.pricing import PricingTable
from llm_log_inspector.services.timeline import project_events

logger = structlog.get_logger()


def build_summary(
    records: Sequence[LogRecord], config: InspectorConfig | None = None
) -> AggregateSummary:
    """Derive the aggregate summary of a record set."""
    config = config or InspectorConfig()
    return AggregateSummary(
        records=list(records),
        total_cost_usd=PricingTable.from_config(config).estimate_cost(records),
        total_duration_s=aggregate_duration(records, config.duration_mode),
    )


@dataclass(frozen=True)
class Inspection:
    """Everything derived from one batch; rebuilt whenever the batch changes."""

    summary: AggregateSummary
    events: list[TimelineEvent] = field(default_factory=list)
    bottleneck_ids: frozenset[str] = frozenset()

    @classmethod
    def empty(cls) -> Inspection:
        return cls(summary=AggregateSummary.empty())

    def is_bottleneck(self, record_id: str) -> bool:
        return record_id in self.bottleneck_ids


def inspect_summary(
    summary: AggregateSummary, config: InspectorConfig | None = None
) -> Inspection:
    """Project events and detect bottlenecks for an existing summary."""
    config = config or InspectorConfig()
    bottlenecks = detect_bottlenecks(
        summary.records, summary.total_duration_s, config.bottleneck_threshold
    )
    return Inspection(
        summary=summary,
        events=project_events(summary.records),
        bottleneck_ids=frozenset(bottlenecks),
    )


def inspect_records(
    records: Sequence[LogRecord], config: InspectorConfig | None = None
) -> Inspection:
    """Run the metric, projection and detection stages over parsed records."""
    config = config or InspectorConfig()
    return inspect_summary(build_summary(records, config), config)


def inspect_text(text: str, config: InspectorConfig | None = None) -> Inspection:
    """Run the full pipeline over raw log text."""
    config = config or InspectorConfig()
    inspection = inspect_records(parse_batch(text, config), config)
    logger.info(
        "inspection_complete",
        records=len(inspection.summary.records),
        total_cost_usd=round(inspection.summary.total_cost_usd, 6),
        total_duration_s=inspection.summary.total_duration_s,
        bottlenecks=len(inspection.bottleneck_ids),
        invalid_numeric=len(inspection.summary.invalid_numeric_ids()),
    )
    return inspection


class InspectionSession:
    """Holds the current inspection and the selected record.

    Loading a batch either replaces the whole state or, on failure, leaves
    it untouched. Selection is by record id only.
    """

    def __init__(self, config: InspectorConfig | None = None) -> None:
        self.config = config or InspectorConfig()
        self.inspection = Inspection.empty()
        self.selected_id: str | None = None

    @property
    def summary(self) -> AggregateSummary:
        return self.inspection.summary

    @property
    def selected(self) -> LogRecord | None:
        if self.selected_id is None:
            return None
        return self.summary.get_record(self.selected_id)

    def load_text(self, text: str) -> Inspection:
        """Replace the current batch with one parsed from ``text``.

        Raises:
            InvalidInputError: If the text is blank or holds no valid record.
        """
        if not isinstance(text, str) or not text.strip():
            raise InvalidInputError("input is empty")

        inspection = inspect_text(text, self.config)
        if inspection.summary.is_empty:
            raise InvalidInputError("no valid log lines found")
        self._replace(inspection)
        return inspection

    def load_summary(self, summary: AggregateSummary) -> Inspection:
        """Restore a previously saved summary as is, recomputing its projections."""
        inspection = inspect_summary(summary, self.config)
        self._replace(inspection)
        return inspection

    def _replace(self, inspection: Inspection) -> None:
        self.inspection = inspection
        if self.selected is None:
            ordered = inspection.summary.sorted_records()
            self.selected_id = ordered[0].id if ordered else None

    def select(self, record_id: str) -> LogRecord:
        """Select a record by id.

        Raises:
            KeyError: If no record in the current batch has this id.
        """
        record = self.summary.get_record(record_id)
        if record is None:
            raise KeyError(record_id)
        self.selected_id = record_id
        return record
