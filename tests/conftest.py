"""Shared fixtures for log inspector tests."""

from __future__ import annotations

import json
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from llm_log_inspector.models import LogRecord

BASE_TIME = datetime(2025, 1, 15, 10, 0, 0, tzinfo=UTC)


def build_line(
    *,
    prompt: Any = None,
    response: str = "ok",
    duration_ms: str = "1000",
    event_name: str = "summarize",
    timestamp: str = "2025-01-15T10:00:00Z",
    model: str = "gpt-4o",
    provider: str = "openai",
    trace_id: str = "trace-1",
    prompt_tokens: str = "100",
    completion_tokens: str = "50",
    error: str = "",
) -> str:
    """Build one tab-separated log line in the expected field order."""
    if prompt is None:
        prompt = [{"role": "user", "content": "hello"}]
    prompt_field = prompt if isinstance(prompt, str) else json.dumps(prompt)
    return "\t".join(
        [
            prompt_field,
            response,
            duration_ms,
            event_name,
            timestamp,
            model,
            provider,
            trace_id,
            prompt_tokens,
            completion_tokens,
            error,
        ]
    )


def build_record(
    start_s: float = 0.0,
    duration_ms: int | float = 1000,
    *,
    name: str = "step",
    model: str = "gpt-4o",
    prompt_tokens: int | float = 0,
    completion_tokens: int | float = 0,
) -> LogRecord:
    """Build a record starting ``start_s`` seconds after BASE_TIME."""
    return LogRecord(
        associated_event_name=name,
        timestamp=BASE_TIME + timedelta(seconds=start_s),
        model=model,
        prompt=[],
        response="",
        prompt_tokens=prompt_tokens,
        completion_tokens=completion_tokens,
        duration_ms=duration_ms,
    )


@pytest.fixture
def make_line() -> Callable[..., str]:
    return build_line


@pytest.fixture
def make_record() -> Callable[..., LogRecord]:
    return build_record
