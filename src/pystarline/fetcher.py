"""Stateless remote reads against the StarLine backend."""

from __future__ import annotations

from pystarline._api.catalog import fetch_event_catalog
from pystarline._api.device import fetch_device_data
from pystarline._api.events import fetch_device_events
from pystarline._transport import FetchClient
from pystarline.config import StarlineConfig
from pystarline.models._base import ApplicationStatus
from pystarline.models.device import DeviceSnapshot
from pystarline.models.events import DeviceEvents, EventTypeDescriptor
from pystarline.models.window import TimeWindow


class TelemetryFetcher:
    """Request/response reads through a :class:`FetchClient`.

    Nothing here retries: a failed read raises
    :class:`~pystarline.exceptions.StarlineTransportError` or
    :class:`~pystarline.exceptions.StarlineDecodeError` and the refresh
    loop decides what to do.  A non-success application status is
    returned as part of the result.
    """

    def __init__(self, config: StarlineConfig, transport: FetchClient) -> None:
        self._config = config
        self._transport = transport

    @property
    def config(self) -> StarlineConfig:
        return self._config

    async def fetch_catalog(self) -> tuple[ApplicationStatus, list[EventTypeDescriptor]]:
        return await fetch_event_catalog(self._config, self._transport)

    async def fetch_events(self, device_id: str, window: TimeWindow) -> DeviceEvents:
        return await fetch_device_events(self._config, self._transport, device_id, window)

    async def fetch_snapshot(self, device_id: str) -> DeviceSnapshot:
        return await fetch_device_data(self._config, self._transport, device_id)
