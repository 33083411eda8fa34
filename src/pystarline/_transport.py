"""HTTP transport carrying the StarLine ``slnet`` session cookie."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from pystarline._constants import SESSION_COOKIE, USER_AGENT
from pystarline.exceptions import StarlineTransportError

_logger = logging.getLogger(__name__)


class FetchClient(Protocol):
    """Structural transport interface used by the endpoint modules.

    Both calls return the raw body and the HTTP status code.  Interpreting
    the body is the caller's job; only connection-level failures raise.
    """

    async def get(self, url: str, cookie: str) -> tuple[bytes, int]:
        ...

    async def post(self, url: str, cookie: str, json_body: Mapping[str, Any]) -> tuple[bytes, int]:
        ...


class AiohttpFetchClient:
    """:class:`FetchClient` backed by an :class:`aiohttp.ClientSession`.

    Usage::

        async with AiohttpFetchClient() as client:
            body, status = await client.get(url, token)
    """

    def __init__(
        self,
        http_session: aiohttp.ClientSession | None = None,
        *,
        timeout: float = 30.0,
    ) -> None:
        self._external_session = http_session is not None
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    async def __aenter__(self) -> AiohttpFetchClient:
        if self._http is None:
            self._http = aiohttp.ClientSession(headers={"user-agent": USER_AGENT})
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http is not None:
            await self._http.close()
            self._http = None

    def _require_session(self) -> aiohttp.ClientSession:
        if self._http is None:
            raise RuntimeError("Fetch client not initialized. Use 'async with AiohttpFetchClient() as client:'")
        return self._http

    @staticmethod
    def _headers(cookie: str) -> dict[str, str]:
        return {
            "accept": "application/json",
            "cookie": f"{SESSION_COOKIE}={cookie}",
        }

    async def get(self, url: str, cookie: str) -> tuple[bytes, int]:
        _logger.debug("GET %s", url)
        return await self._request("GET", url, cookie)

    async def post(self, url: str, cookie: str, json_body: Mapping[str, Any]) -> tuple[bytes, int]:
        _logger.debug("POST %s body=%s", url, dict(json_body))
        return await self._request("POST", url, cookie, json_body=json_body)

    async def _request(
        self,
        method: str,
        url: str,
        cookie: str,
        *,
        json_body: Mapping[str, Any] | None = None,
    ) -> tuple[bytes, int]:
        http = self._require_session()
        try:
            async with http.request(
                method,
                url,
                json=dict(json_body) if json_body is not None else None,
                headers=self._headers(cookie),
                timeout=self._timeout,
            ) as resp:
                body = await resp.read()
                _logger.debug("%s %s -> HTTP %d (%d bytes)", method, url, resp.status, len(body))
                return body, resp.status
        except aiohttp.ClientError as exc:
            raise StarlineTransportError(f"{method} {url} failed: {exc}", endpoint=url) from exc
        except asyncio.TimeoutError as exc:
            raise StarlineTransportError(f"{method} {url} timed out", endpoint=url) from exc
