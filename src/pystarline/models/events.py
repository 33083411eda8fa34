"""Event catalog and device event models."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from enum import StrEnum
from types import MappingProxyType
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from pystarline.models._base import ApplicationStatus, StarlineBaseModel, parse_unix_timestamp
from pystarline.normalize import safe_int


class Severity(StrEnum):
    """Display severity of an event group."""

    HIGH = "high"
    MEDIUM = "medium"
    NEUTRAL = "neutral"


SEVERITY_BY_GROUP: Mapping[int, Severity] = MappingProxyType(
    {
        0: Severity.HIGH,
        2: Severity.HIGH,
        3: Severity.MEDIUM,
        4: Severity.MEDIUM,
    }
)
"""Display severity per catalog group.  Unlisted groups are neutral."""


def severity_for_group(group_id: int | None) -> Severity:
    if group_id is None:
        return Severity.NEUTRAL
    return SEVERITY_BY_GROUP.get(group_id, Severity.NEUTRAL)


class EventTypeDescriptor(StarlineBaseModel):
    """One entry of the ``/library/events`` catalog.

    Parameters
    ----------
    code : int
        Event code, unique within the catalog.
    description : str
        Human-readable text (``desc`` in the payload).
    group_id : int or None
        Severity group (``group_id`` in the payload).
    """

    code: int
    description: str = Field(default="", validation_alias=AliasChoices("desc", "description"))
    group_id: int | None = Field(default=None, validation_alias=AliasChoices("group_id", "groupId"))


class RawEvent(StarlineBaseModel):
    """An event as returned by ``/device/{id}/events``.

    The payload calls the event code ``type``.
    """

    code: int = Field(validation_alias=AliasChoices("type", "code"))
    group_id: int | None = Field(default=None, validation_alias=AliasChoices("groupId", "group_id"))
    timestamp: int = 0

    @field_validator("group_id", "timestamp", mode="before")
    @classmethod
    def _coerce_ints(cls, value: Any) -> int | None:
        return safe_int(value)

    @property
    def occurred_at(self) -> datetime | None:
        return parse_unix_timestamp(self.timestamp)


class EnrichedEvent(BaseModel):
    """A raw event joined against the catalog, ready for display."""

    model_config = ConfigDict(frozen=True)

    code: int
    group_id: int | None
    description: str
    timestamp: int
    known: bool = True

    @property
    def occurred_at(self) -> datetime | None:
        return parse_unix_timestamp(self.timestamp)

    @property
    def severity(self) -> Severity:
        return severity_for_group(self.group_id)


class DeviceEvents(BaseModel):
    """Result of one events-in-range read."""

    model_config = ConfigDict(frozen=True)

    status: ApplicationStatus = Field(default_factory=ApplicationStatus)
    events: tuple[RawEvent, ...] = ()


class EventCatalogResponse(BaseModel):
    """Body of ``/library/events``."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    descriptors: tuple[EventTypeDescriptor, ...] = Field(
        default=(),
        validation_alias=AliasChoices("eventDescriptions", "descriptors"),
    )

    @field_validator("descriptors", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return () if value is None else value
