"""Projection of log records onto timeline events."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from llm_log_inspector.models import LogRecord, TimelineEvent


def project_event(record: LogRecord) -> TimelineEvent:
    """Build the timeline event for one record."""
    metadata = {
        "prompt_tokens": record.prompt_tokens,
        "completion_tokens": record.completion_tokens,
        "error": record.error,
        "turn_count": len(record.turns),
        "size_limited": record.is_size_limited,
    }
    if not record.has_valid_duration:
        metadata["invalid_duration"] = True

    return TimelineEvent(
        id=record.id,
        name=record.associated_event_name,
        start_time=record.timestamp,
        end_time=record.end_time,
        duration_ms=record.duration_ms,
        category=record.model,
        metadata=metadata,
    )


def project_events(records: Iterable[LogRecord]) -> list[TimelineEvent]:
    """One event per record, in record order."""
    return [project_event(record) for record in records]


def index_records(records: Iterable[LogRecord]) -> dict[str, LogRecord]:
    """Map record id to record."""
    return {record.id: record for record in records}


def resolve_event(event: TimelineEvent, records: Sequence[LogRecord]) -> LogRecord | None:
    """Find the record an event was projected from, by id."""
    return index_records(records).get(event.id)
