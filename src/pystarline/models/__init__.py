"""Data models for StarLine API responses and dashboard snapshots."""

from pystarline.models._base import ApplicationStatus, StarlineBaseModel, parse_unix_timestamp
from pystarline.models.device import (
    AlarmStateBlock,
    BalanceEntry,
    CommonBlock,
    DeviceSnapshot,
    LatestEvent,
    ObdBlock,
    PositionBlock,
    StateBlock,
)
from pystarline.models.events import (
    DeviceEvents,
    EnrichedEvent,
    EventCatalogResponse,
    EventTypeDescriptor,
    RawEvent,
    Severity,
)
from pystarline.models.snapshot import RefreshSnapshot, WindowEvents
from pystarline.models.window import TimeWindow

__all__ = [
    "AlarmStateBlock",
    "ApplicationStatus",
    "BalanceEntry",
    "CommonBlock",
    "DeviceEvents",
    "DeviceSnapshot",
    "EnrichedEvent",
    "EventCatalogResponse",
    "EventTypeDescriptor",
    "LatestEvent",
    "ObdBlock",
    "PositionBlock",
    "RawEvent",
    "RefreshSnapshot",
    "Severity",
    "StarlineBaseModel",
    "StateBlock",
    "TimeWindow",
    "WindowEvents",
    "parse_unix_timestamp",
]
