"""Timeline projection of log records."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class TimelineEvent(BaseModel):
    """A record placed on the timeline; ``id`` is the source record's id."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    start_time: datetime
    end_time: datetime
    duration_ms: int | float
    category: str  # model identifier
    metadata: dict[str, Any] = Field(default_factory=dict)
