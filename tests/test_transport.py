from __future__ import annotations

from typing import Any

import pytest
from aiohttp import test_utils, web

from pystarline._transport import AiohttpFetchClient
from pystarline.exceptions import StarlineTransportError


def _app(seen: dict[str, Any]) -> web.Application:
    async def events(request: web.Request) -> web.Response:
        seen["cookie"] = request.cookies.get("slnet")
        seen["json"] = await request.json()
        return web.json_response({"code": 200, "codestring": "OK", "events": []})

    async def broken(request: web.Request) -> web.Response:
        return web.Response(status=502, text="Bad Gateway")

    app = web.Application()
    app.router.add_post("/json/v2/device/1/events", events)
    app.router.add_get("/broken", broken)
    return app


@pytest.mark.asyncio
async def test_post_sends_cookie_and_json() -> None:
    seen: dict[str, Any] = {}
    async with test_utils.TestServer(_app(seen)) as server:
        async with AiohttpFetchClient(timeout=5) as client:
            body, status = await client.post(
                str(server.make_url("/json/v2/device/1/events")),
                "tok",
                {"period_start": 1, "period_end": 2},
            )

    assert status == 200
    assert b'"code": 200' in body
    assert seen == {"cookie": "tok", "json": {"period_start": 1, "period_end": 2}}


@pytest.mark.asyncio
async def test_http_error_returned_as_status() -> None:
    async with test_utils.TestServer(_app({})) as server:
        async with AiohttpFetchClient(timeout=5) as client:
            body, status = await client.get(str(server.make_url("/broken")), "tok")

    assert status == 502
    assert body == b"Bad Gateway"


@pytest.mark.asyncio
async def test_connection_failure_raises_transport_error() -> None:
    async with AiohttpFetchClient(timeout=5) as client:
        with pytest.raises(StarlineTransportError):
            await client.get("http://127.0.0.1:1/json/v3/library/events", "tok")


@pytest.mark.asyncio
async def test_client_requires_context_manager() -> None:
    with pytest.raises(RuntimeError):
        await AiohttpFetchClient().get("http://127.0.0.1:1/", "tok")
