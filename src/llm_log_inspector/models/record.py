"""Parsed LLM interaction log records."""

from __future__ import annotations

import json
import math
import uuid
from datetime import datetime, timedelta
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


def is_json(text: str) -> bool:
    """Check whether a string is a complete JSON document."""
    try:
        json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return False
    return True


def is_nan(value: int | float) -> bool:
    """True for the not-a-number marker left by a failed numeric decode."""
    return isinstance(value, float) and math.isnan(value)


class PromptMarker(str, Enum):
    """Placeholder values that replace prompt content."""

    SIZE_LIMITED = "REDUCED_DUE_TO_SIZE_LIMIT"


class Turn(BaseModel):
    """One role-tagged message within a prompt."""

    model_config = ConfigDict(frozen=True)

    role: str
    content: str

    @property
    def is_json(self) -> bool:
        return is_json(self.content)


PromptEntry = Turn | PromptMarker


class LogRecord(BaseModel):
    """A single decoded model interaction.

    Numeric fields hold ``math.nan`` when the source value could not be
    decoded; use the ``has_valid_*`` properties before aggregating them.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    associated_event_name: str
    timestamp: datetime
    model: str = Field(min_length=1)
    prompt: list[PromptEntry] = Field(default_factory=list)
    response: str = ""
    prompt_tokens: int | float
    completion_tokens: int | float
    duration_ms: int | float
    error: str = ""

    @property
    def has_valid_tokens(self) -> bool:
        return not (is_nan(self.prompt_tokens) or is_nan(self.completion_tokens))

    @property
    def has_valid_duration(self) -> bool:
        return not is_nan(self.duration_ms)

    @property
    def has_valid_numbers(self) -> bool:
        return self.has_valid_tokens and self.has_valid_duration

    @property
    def has_error(self) -> bool:
        return bool(self.error)

    @property
    def end_time(self) -> datetime:
        """Start time plus duration; equals the start when the duration is invalid."""
        if not self.has_valid_duration:
            return self.timestamp
        return self.timestamp + timedelta(milliseconds=self.duration_ms)

    @property
    def last_turn(self) -> PromptEntry | None:
        """Final prompt entry, usually the latest user turn."""
        return self.prompt[-1] if self.prompt else None

    @property
    def is_size_limited(self) -> bool:
        return any(entry is PromptMarker.SIZE_LIMITED for entry in self.prompt)

    @property
    def turns(self) -> list[Turn]:
        return [entry for entry in self.prompt if isinstance(entry, Turn)]

    @property
    def response_is_json(self) -> bool:
        return is_json(self.response)
