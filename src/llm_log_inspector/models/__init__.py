from .record import LogRecord, PromptEntry, PromptMarker, Turn, is_json, is_nan
from .summary import AggregateSummary
from .timeline import TimelineEvent

__all__ = [
    "AggregateSummary",
    "LogRecord",
    "PromptEntry",
    "PromptMarker",
    "TimelineEvent",
    "Turn",
    "is_json",
    "is_nan",
]
