"""Device events endpoint.

Endpoint:
  - POST /json/v2/device/{device_id}/events  ``{"period_start", "period_end"}``
"""

from __future__ import annotations

import logging
from typing import Any

from pystarline._api._common import build_url, decode_json_body, validate_model
from pystarline._constants import EVENTS_ENDPOINT
from pystarline._transport import FetchClient
from pystarline.config import StarlineConfig
from pystarline.models._base import ApplicationStatus
from pystarline.models.events import DeviceEvents
from pystarline.models.window import TimeWindow

_logger = logging.getLogger(__name__)


def build_events_request(window: TimeWindow) -> dict[str, int]:
    """Request body for a window.  The backend treats ``period_end`` as exclusive."""
    return {"period_start": window.start, "period_end": window.end}


async def fetch_device_events(
    config: StarlineConfig,
    transport: FetchClient,
    device_id: str,
    window: TimeWindow,
) -> DeviceEvents:
    """Fetch raw events reported by ``device_id`` inside ``window``."""
    url = build_url(config.base_url, EVENTS_ENDPOINT, device_id=device_id)
    body, http_status = await transport.post(url, config.slnet_token, build_events_request(window))
    decoded = decode_json_body(endpoint=EVENTS_ENDPOINT, body=body, http_status=http_status)

    status = ApplicationStatus.from_body(decoded)
    events: Any = decoded.get("events")
    if events is None:
        events = []
    result = validate_model(DeviceEvents, {"status": status, "events": events}, endpoint=EVENTS_ENDPOINT)
    if not status.ok:
        _logger.warning("Events for %s (%s) returned status %s", device_id, window.label, status)
    _logger.debug("Events for %s (%s): %d", device_id, window.label, len(result.events))
    return result
