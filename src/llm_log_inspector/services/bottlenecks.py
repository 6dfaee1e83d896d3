"""Bottleneck detection over a record set.

A bottleneck is a long record that runs on its own: its duration exceeds a
fraction of the total and no earlier-starting record overlaps it. When two
records overlap, the overlap is charged to the one that started later (input
order breaks ties), so of a long step and work running alongside it only the
step that was already running can be flagged.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog

from llm_log_inspector.models import LogRecord

logger = structlog.get_logger()

DEFAULT_THRESHOLD = 0.1


def intervals_overlap(a: LogRecord, b: LogRecord) -> bool:
    """Half-open ``[start, end)`` overlap test."""
    return a.timestamp < b.end_time and b.timestamp < a.end_time


def _is_overlapped(
    index: int, record: LogRecord, timed: Sequence[tuple[int, LogRecord]]
) -> bool:
    # ``timed`` holds (input position, record) pairs.
    for other_index, other in timed:
        if other_index == index:
            continue
        starts_first = (other.timestamp, other_index) < (record.timestamp, index)
        if starts_first and intervals_overlap(record, other):
            return True
    return False


def detect_bottlenecks(
    records: Sequence[LogRecord],
    total_duration_s: float,
    threshold: float = DEFAULT_THRESHOLD,
) -> set[str]:
    """Find bottleneck records.

    Pairwise O(n^2) check; batches are pasted by hand and stay small.

    Args:
        records: The full filtered record set.
        total_duration_s: Aggregate duration of ``records`` in seconds.
        threshold: Fraction of the total a record's duration must exceed.

    Returns:
        IDs of the bottleneck records.
    """
    timed = [(i, r) for i, r in enumerate(records) if r.has_valid_duration]
    limit_ms = threshold * total_duration_s * 1000

    flagged = {
        record.id
        for index, record in timed
        if record.duration_ms > limit_ms and not _is_overlapped(index, record, timed)
    }
    logger.debug(
        "bottlenecks_detected",
        records=len(records),
        flagged=len(flagged),
        limit_ms=limit_ms,
    )
    return flagged


def is_bottleneck(
    record: LogRecord,
    records: Sequence[LogRecord],
    total_duration_s: float,
    threshold: float = DEFAULT_THRESHOLD,
) -> bool:
    """Whether ``record`` is a bottleneck within ``records``."""
    return record.id in detect_bottlenecks(records, total_duration_s, threshold)
