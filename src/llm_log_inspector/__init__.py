"""LLM Log Inspector.

Parse pasted, tab-separated LLM interaction logs and derive cost,
duration, a timeline and bottleneck records.
"""

from llm_log_inspector.pipeline import (
    Inspection,
    InspectionSession,
    build_summary,
    inspect_text,
)
from llm_log_inspector.services.bottlenecks import detect_bottlenecks
from llm_log_inspector.services.duration import aggregate_duration
from llm_log_inspector.services.parser import parse_batch
from llm_log_inspector.services.pricing import estimate_cost
from llm_log_inspector.services.timeline import project_events

__version__ = "0.1.0"
__all__ = [
    "Inspection",
    "InspectionSession",
    "__version__",
    "aggregate_duration",
    "build_summary",
    "detect_bottlenecks",
    "estimate_cost",
    "inspect_text",
    "parse_batch",
    "project_events",
]
