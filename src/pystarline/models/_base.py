"""Base model and shared field types for StarLine API responses.

Every response model inherits from :class:`StarlineBaseModel` which
provides:

* ``extra="ignore"`` so fields added by newer firmware are tolerated.
* A ``model_validator(mode="before")`` that drops ``None`` and empty
  string values so the field default is used.
* A ``raw`` dict that captures the original payload.

Every response body also carries the backend's own ``code`` /
``codestring`` pair, modelled by :class:`ApplicationStatus`.  It is data
to display, never an exception.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from pystarline._constants import APP_STATUS_OK
from pystarline.normalize import safe_int

# Threshold to distinguish seconds from milliseconds.
_MS_THRESHOLD = 1_000_000_000_000


def parse_unix_timestamp(value: Any) -> datetime | None:
    """Convert a StarLine epoch timestamp (seconds or milliseconds) to a UTC datetime.

    Returns ``None`` for missing, zero, or non-numeric values.
    """
    ts = safe_int(value)
    if ts is None or ts <= 0:
        return None
    if ts >= _MS_THRESHOLD:
        ts = ts // 1000
    return datetime.fromtimestamp(ts, tz=UTC)


class StarlineBaseModel(BaseModel):
    """Base for StarLine API response models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict, repr=False)
    """Original API response dict."""

    @model_validator(mode="before")
    @classmethod
    def _clean_values(cls, values: Any) -> Any:
        """Drop empty values and stash the raw payload."""
        if not isinstance(values, dict):
            return values
        cleaned = {key: value for key, value in values.items() if value is not None and value != ""}
        # Keep the caller's raw= when constructing from kwargs.
        if "raw" not in values:
            cleaned["raw"] = dict(values)
        return cleaned


class ApplicationStatus(BaseModel):
    """Backend-reported ``code`` / ``codestring`` pair.

    A non-success code is surfaced verbatim for display; it is distinct
    from a transport failure.
    """

    model_config = ConfigDict(frozen=True)

    code: int | None = None
    codestring: str = ""

    @field_validator("code", mode="before")
    @classmethod
    def _coerce_code(cls, value: Any) -> int | None:
        return safe_int(value)

    @field_validator("codestring", mode="before")
    @classmethod
    def _coerce_codestring(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @classmethod
    def from_body(cls, body: dict[str, Any]) -> ApplicationStatus:
        return cls(code=body.get("code"), codestring=body.get("codestring"))

    @property
    def ok(self) -> bool:
        return self.code == APP_STATUS_OK

    def __str__(self) -> str:
        code = "-" if self.code is None else str(self.code)
        return f"{code} | {self.codestring}" if self.codestring else code
