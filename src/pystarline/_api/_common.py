"""Shared helpers for StarLine endpoint modules.

This module centralizes the most repeated patterns:
- building absolute endpoint URLs
- turning a ``(body, http_status)`` pair into a JSON object
- wrapping pydantic validation failures

It is internal to pystarline and may change at any time.
"""

from __future__ import annotations

import json
import logging
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from pystarline._redact import redact_for_log
from pystarline.exceptions import StarlineDecodeError, StarlineTransportError

_logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def build_url(base_url: str, endpoint: str, **params: str) -> str:
    return f"{base_url.rstrip('/')}{endpoint.format(**params)}"


def decode_json_body(*, endpoint: str, body: bytes, http_status: int) -> dict[str, Any]:
    """Decode a response body into a JSON object.

    A non-2xx HTTP status is only a transport failure when the body cannot
    be read as JSON; a JSON body carries its own ``code`` / ``codestring``
    which the caller surfaces as data.
    """
    is_success = 200 <= http_status < 300
    text = body.decode("utf-8", errors="replace").strip()
    try:
        decoded = json.loads(text)
    except json.JSONDecodeError as exc:
        if not is_success:
            raise StarlineTransportError(
                f"HTTP {http_status} from {endpoint}: {text[:200]}",
                status_code=http_status,
                endpoint=endpoint,
            ) from exc
        raise StarlineDecodeError(f"Invalid JSON from {endpoint}: {text[:200]}", endpoint=endpoint) from exc

    if not isinstance(decoded, dict):
        if not is_success:
            raise StarlineTransportError(
                f"HTTP {http_status} from {endpoint}",
                status_code=http_status,
                endpoint=endpoint,
            )
        raise StarlineDecodeError(
            f"Expected a JSON object from {endpoint}, got {type(decoded).__name__}",
            endpoint=endpoint,
        )

    if not is_success:
        _logger.warning("HTTP %d from %s, surfacing body status", http_status, endpoint)
    _logger.debug("%s -> %s", endpoint, redact_for_log(decoded))
    return decoded


def validate_model(model: type[M], data: Any, *, endpoint: str) -> M:
    """``model.model_validate`` with validation failures mapped to :class:`StarlineDecodeError`."""
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise StarlineDecodeError(
            f"Unexpected {model.__name__} shape from {endpoint}: {exc.error_count()} error(s)",
            endpoint=endpoint,
        ) from exc
