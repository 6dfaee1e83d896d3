"""Markdown report generation for an inspection."""

from __future__ import annotations

from tabulate import tabulate

from llm_log_inspector.models import LogRecord, is_nan
from llm_log_inspector.pipeline import Inspection

EVENT_HEADERS = ("Start", "Event", "Model", "Duration (ms)", "Tokens in/out", "Bottleneck")


def format_number(value: int | float) -> str:
    """Render a decoded numeric field, showing NaN explicitly."""
    return "NaN" if is_nan(value) else str(value)


def build_event_rows(inspection: Inspection) -> list[tuple[str, ...]]:
    """Table rows for every record, ordered by start time."""
    rows = []
    for record in inspection.summary.sorted_records():
        rows.append(
            (
                record.timestamp.isoformat(),
                record.associated_event_name,
                record.model,
                format_number(record.duration_ms),
                f"{format_number(record.prompt_tokens)}/"
                f"{format_number(record.completion_tokens)}",
                "yes" if inspection.is_bottleneck(record.id) else "",
            )
        )
    return rows


def _anomaly_line(record: LogRecord) -> str:
    fields = [
        name
        for name in ("prompt_tokens", "completion_tokens", "duration_ms")
        if is_nan(getattr(record, name))
    ]
    return f"- {record.associated_event_name} ({record.id}): {', '.join(fields)}"


def generate_markdown_report(inspection: Inspection, usd_to_inr_rate: float = 85.0) -> str:
    """Generate a markdown report of the batch.

    Args:
        inspection: Result of running the pipeline.
        usd_to_inr_rate: Rate for the secondary currency figure.

    Returns:
        Markdown report content.
    """
    summary = inspection.summary
    lines = [
        "# LLM Log Report",
        "",
        f"- Records: {len(summary.records)}",
        f"- Total cost: ${summary.total_cost_usd:.3f} / "
        f"INR {round(summary.total_cost_usd * usd_to_inr_rate)}",
        f"- Total duration: {summary.total_duration_s:.3f} seconds",
        f"- Bottlenecks: {len(inspection.bottleneck_ids)}",
        "",
        "## Events",
        "",
        tabulate(build_event_rows(inspection), headers=EVENT_HEADERS, tablefmt="github"),
    ]

    anomalies = [r for r in summary.records if not r.has_valid_numbers]
    if anomalies:
        lines.extend(["", "## Undecodable numeric fields", ""])
        lines.extend(_anomaly_line(record) for record in anomalies)

    return "\n".join(lines)
