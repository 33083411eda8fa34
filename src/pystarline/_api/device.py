"""Device data endpoint.

Endpoint:
  - GET /json/v3/device/{device_id}/data
"""

from __future__ import annotations

import logging

from pystarline._api._common import build_url, decode_json_body, validate_model
from pystarline._constants import DEVICE_DATA_ENDPOINT
from pystarline._transport import FetchClient
from pystarline.config import StarlineConfig
from pystarline.models.device import DeviceSnapshot

_logger = logging.getLogger(__name__)


async def fetch_device_data(
    config: StarlineConfig,
    transport: FetchClient,
    device_id: str,
) -> DeviceSnapshot:
    """Fetch the current device state."""
    url = build_url(config.base_url, DEVICE_DATA_ENDPOINT, device_id=device_id)
    body, http_status = await transport.get(url, config.slnet_token)
    decoded = decode_json_body(endpoint=DEVICE_DATA_ENDPOINT, body=body, http_status=http_status)

    if not isinstance(decoded.get("data"), dict):
        # Error bodies carry only code/codestring; keep them for display.
        decoded = {**decoded, "data": {}}
    snapshot = validate_model(DeviceSnapshot, decoded, endpoint=DEVICE_DATA_ENDPOINT)
    if not snapshot.status.ok:
        _logger.warning("Device data for %s returned status %s", device_id, snapshot.status)
    return snapshot
