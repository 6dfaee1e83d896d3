"""JSON snapshot storage for an aggregate summary."""

from __future__ import annotations

import asyncio
import json
from datetime import datetime
from pathlib import Path
from typing import Any

import pydantic
import structlog

from llm_log_inspector.core.errors import InvalidInputError
from llm_log_inspector.models import AggregateSummary

logger = structlog.get_logger()


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    msg = f"Object of type {type(value).__name__} is not JSON serializable"
    raise TypeError(msg)


def dump_summary(summary: AggregateSummary) -> str:
    """Serialize a summary to JSON.

    Undecodable numeric fields are written as ``NaN`` so they survive a
    round trip instead of turning into null or zero.
    """
    return json.dumps(summary.model_dump(), default=_json_default, indent=2)


def load_summary(text: str) -> AggregateSummary:
    """Parse a summary written by :func:`dump_summary`."""
    try:
        return AggregateSummary.model_validate(json.loads(text))
    except (json.JSONDecodeError, pydantic.ValidationError) as e:
        raise InvalidInputError(f"unreadable summary snapshot: {e}") from e


class SummaryStore:
    """Saves and restores the caller's summary at a fixed path.

    Usage:
        store = SummaryStore(Path("runs/summary.json"))
        await store.save(summary)
        restored = await store.load()
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    async def save(self, summary: AggregateSummary) -> Path:
        """Write the summary, replacing any previous snapshot."""

        def _save() -> Path:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp_path.write_text(dump_summary(summary), encoding="utf-8")
            tmp_path.replace(self.path)
            logger.debug("saved_summary", path=str(self.path), records=len(summary.records))
            return self.path

        return await asyncio.to_thread(_save)

    async def load(self) -> AggregateSummary | None:
        """Read the snapshot; None when nothing has been saved yet."""

        def _load() -> str | None:
            if not self.path.exists():
                return None
            return self.path.read_text(encoding="utf-8")

        text = await asyncio.to_thread(_load)
        if text is None:
            return None
        return load_summary(text)
