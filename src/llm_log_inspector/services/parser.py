"""Tab-separated log line parsing.

Each line carries one interaction in a fixed field order::

    prompt-json, response, duration_ms, event_name, timestamp, model,
    provider, trace_id, prompt_tokens, completion_tokens, error

Lines that cannot be decoded are dropped; a bad line never aborts the batch.
"""

from __future__ import annotations

import json
import math
import re
from collections.abc import Sequence
from datetime import UTC, datetime, timedelta
from typing import Any

import structlog

from llm_log_inspector.core.config import DEFAULT_EVENT_NAME_PREFIXES, InspectorConfig
from llm_log_inspector.core.errors import InvalidInputError, LineDecodeError
from llm_log_inspector.models import LogRecord, PromptEntry, PromptMarker, Turn

logger = structlog.get_logger()

FIELD_SEPARATOR = "\t"

PROMPT_FIELD = 0
RESPONSE_FIELD = 1
DURATION_FIELD = 2
EVENT_NAME_FIELD = 3
TIMESTAMP_FIELD = 4
MODEL_FIELD = 5
# 6 (provider) and 7 (trace id) are not used
PROMPT_TOKENS_FIELD = 8
COMPLETION_TOKENS_FIELD = 9
ERROR_FIELD = 10
REQUIRED_FIELD_COUNT = 11

_LEADING_INT_RE = re.compile(r"\s*\+?(\d+)")


def _parse_prompt_entry(item: Any, index: int) -> PromptEntry:
    if item == PromptMarker.SIZE_LIMITED.value:
        return PromptMarker.SIZE_LIMITED
    if isinstance(item, dict):
        role = item.get("role")
        content = item.get("content")
        if isinstance(role, str) and isinstance(content, str):
            return Turn(role=role, content=content)
    msg = f"unexpected prompt entry at index {index}: {type(item).__name__}"
    raise LineDecodeError(msg)


def parse_prompt(raw: str) -> list[PromptEntry]:
    """Decode the JSON prompt field.

    Args:
        raw: JSON array of ``{"role", "content"}`` objects, any of which may be
            replaced by the size-limit sentinel. A bare sentinel stands for a
            prompt elided as a whole.

    Returns:
        Ordered prompt entries.

    Raises:
        LineDecodeError: If the field is not valid JSON or has another shape.
    """
    if raw.strip() == PromptMarker.SIZE_LIMITED.value:
        return [PromptMarker.SIZE_LIMITED]
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as e:
        msg = f"prompt is not valid JSON: {e.msg}"
        raise LineDecodeError(msg) from e

    if value == PromptMarker.SIZE_LIMITED.value:
        return [PromptMarker.SIZE_LIMITED]
    if not isinstance(value, list):
        msg = f"prompt must be a JSON array, got {type(value).__name__}"
        raise LineDecodeError(msg)
    return [_parse_prompt_entry(item, i) for i, item in enumerate(value)]


def parse_int_field(raw: str) -> int | float:
    """Decode a non-negative integer field.

    Leading digits are used and trailing characters ignored ("120ms" -> 120).

    Returns:
        The integer, or ``math.nan`` when no digits lead the value.
    """
    match = _LEADING_INT_RE.match(raw)
    if match is None:
        return math.nan
    return int(match.group(1))


def parse_timestamp(raw: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    value = raw.strip()
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError as e:
        msg = f"invalid timestamp: {raw!r}"
        raise LineDecodeError(msg) from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def checked_duration(timestamp: datetime, duration_ms: int | float) -> int | float:
    """Return the duration, or NaN when start plus duration is not a valid datetime."""
    if math.isnan(duration_ms):
        return duration_ms
    try:
        timestamp + timedelta(milliseconds=duration_ms)
    except OverflowError:
        logger.debug("duration_out_of_range", duration_ms=duration_ms)
        return math.nan
    return duration_ms


def normalize_event_name(name: str, prefixes: Sequence[str] = DEFAULT_EVENT_NAME_PREFIXES) -> str:
    """Strip whitespace and the first matching known prefix."""
    value = name.strip()
    for prefix in prefixes:
        if prefix and value.startswith(prefix):
            return value[len(prefix) :].strip()
    return value


def decode_line(line: str, config: InspectorConfig | None = None) -> LogRecord:
    """Decode one log line.

    Args:
        line: A single tab-separated log line.
        config: Inspector configuration (event-name prefixes).

    Returns:
        The decoded record with a freshly generated id.

    Raises:
        LineDecodeError: If the line is missing fields, has no model, or its
            prompt or timestamp cannot be decoded.
    """
    config = config or InspectorConfig()
    fields = line.rstrip("\r").split(FIELD_SEPARATOR)
    if len(fields) < REQUIRED_FIELD_COUNT:
        msg = f"expected {REQUIRED_FIELD_COUNT} fields, got {len(fields)}"
        raise LineDecodeError(msg)

    model = fields[MODEL_FIELD].strip()
    if not model:
        raise LineDecodeError("model is empty")

    timestamp = parse_timestamp(fields[TIMESTAMP_FIELD])
    duration_ms = checked_duration(timestamp, parse_int_field(fields[DURATION_FIELD]))
    return LogRecord(
        associated_event_name=normalize_event_name(
            fields[EVENT_NAME_FIELD], config.event_name_prefixes
        ),
        timestamp=timestamp,
        model=model,
        prompt=parse_prompt(fields[PROMPT_FIELD]),
        response=fields[RESPONSE_FIELD],
        prompt_tokens=parse_int_field(fields[PROMPT_TOKENS_FIELD]),
        completion_tokens=parse_int_field(fields[COMPLETION_TOKENS_FIELD]),
        duration_ms=duration_ms,
        error=fields[ERROR_FIELD].strip(),
    )


def parse_line(line: str, config: InspectorConfig | None = None) -> LogRecord | None:
    """Decode one log line, returning None when the line is invalid."""
    try:
        return decode_line(line, config)
    except LineDecodeError as e:
        if line.strip():
            logger.debug("log_line_invalid", reason=str(e))
        return None
    except (ValueError, TypeError) as e:
        logger.debug("log_line_invalid", reason=str(e), error_type=type(e).__name__)
        return None


def parse_batch(text: str, config: InspectorConfig | None = None) -> list[LogRecord]:
    """Parse a pasted batch of log lines.

    Lines are parsed independently and invalid ones dropped. Valid records
    keep their input order (they are not sorted by time).

    Args:
        text: Raw multi-line text.
        config: Inspector configuration.

    Returns:
        Valid records in line order.

    Raises:
        InvalidInputError: If ``text`` is not a string.
    """
    if not isinstance(text, str):
        raise InvalidInputError(f"expected text, got {type(text).__name__}")

    config = config or InspectorConfig()
    lines = text.split("\n")
    records = [record for line in lines if (record := parse_line(line, config)) is not None]

    logger.info(
        "batch_parsed",
        lines=len(lines),
        records=len(records),
        dropped=sum(1 for line in lines if line.strip()) - len(records),
    )
    return records
