"""Time window model."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, model_validator

from pystarline.models._base import parse_unix_timestamp


class TimeWindow(BaseModel):
    """Half-open interval ``[start, end)`` in unix seconds."""

    model_config = ConfigDict(frozen=True)

    start: int
    end: int
    label: str

    @model_validator(mode="after")
    def _check_bounds(self) -> TimeWindow:
        if self.end <= self.start:
            raise ValueError(f"window end {self.end} must be after start {self.start}")
        return self

    @property
    def duration(self) -> int:
        return self.end - self.start

    @property
    def start_at(self) -> datetime | None:
        return parse_unix_timestamp(self.start)

    def contains(self, timestamp: int) -> bool:
        return self.start <= timestamp < self.end
