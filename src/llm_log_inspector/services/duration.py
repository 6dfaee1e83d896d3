"""Total elapsed time of a record set."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Literal

from llm_log_inspector.models import LogRecord

DurationMode = Literal["wall_clock", "sum"]


def aggregate_duration(records: Sequence[LogRecord], mode: DurationMode = "wall_clock") -> float:
    """Compute the time covered by a record set, in seconds.

    Args:
        records: Parsed log records. Records whose duration failed to decode
            are left out.
        mode: ``"wall_clock"`` measures from the earliest start to the latest
            end, so concurrent work is counted once. ``"sum"`` adds up the
            individual durations.

    Returns:
        Duration in seconds; 0.0 when no record has a usable duration.
    """
    timed = [r for r in records if r.has_valid_duration]
    if not timed:
        return 0.0

    if mode == "sum":
        return sum(r.duration_ms for r in timed) / 1000

    start = min(r.timestamp for r in timed)
    end = max(r.end_time for r in timed)
    return (end - start).total_seconds()
