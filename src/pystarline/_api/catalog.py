"""Event catalog endpoint.

Endpoint:
  - GET /json/v3/library/events
"""

from __future__ import annotations

import logging

from pystarline._api._common import build_url, decode_json_body, validate_model
from pystarline._constants import CATALOG_ENDPOINT
from pystarline._transport import FetchClient
from pystarline.config import StarlineConfig
from pystarline.models._base import ApplicationStatus
from pystarline.models.events import EventCatalogResponse, EventTypeDescriptor

_logger = logging.getLogger(__name__)


async def fetch_event_catalog(
    config: StarlineConfig,
    transport: FetchClient,
) -> tuple[ApplicationStatus, list[EventTypeDescriptor]]:
    """Fetch the event code catalog.

    The catalog is public but the session cookie is sent anyway.
    """
    url = build_url(config.base_url, CATALOG_ENDPOINT)
    body, http_status = await transport.get(url, config.slnet_token)
    decoded = decode_json_body(endpoint=CATALOG_ENDPOINT, body=body, http_status=http_status)

    status = ApplicationStatus.from_body(decoded)
    response = validate_model(EventCatalogResponse, decoded, endpoint=CATALOG_ENDPOINT)
    _logger.debug("Event catalog: status=%s descriptors=%d", status, len(response.descriptors))
    return status, list(response.descriptors)
