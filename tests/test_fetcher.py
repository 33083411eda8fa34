from __future__ import annotations

import json
from datetime import datetime

import pytest
from fakes import DEVICE_ID, TOKEN, FakeStarlineBackend, events_body

from pystarline.config import StarlineConfig
from pystarline.exceptions import StarlineDecodeError, StarlineTransportError
from pystarline.fetcher import TelemetryFetcher
from pystarline.windows import current_windows


@pytest.mark.asyncio
async def test_fetch_events_posts_window_bounds(
    config: StarlineConfig,
    backend: FakeStarlineBackend,
    now: datetime,
) -> None:
    today = current_windows(now, 1)[0]
    backend.events[today.start] = events_body((1, 0, today.start + 10), (2, 3, today.start + 20))

    result = await TelemetryFetcher(config, backend).fetch_events(DEVICE_ID, today)

    assert [e.code for e in result.events] == [1, 2]
    assert [e.group_id for e in result.events] == [0, 3]
    assert result.status.ok
    kind, url, body = backend.calls[0]
    assert kind == "events"
    assert url == f"https://developer.starline.ru/json/v2/device/{DEVICE_ID}/events"
    assert body == {"period_start": today.start, "period_end": today.end}
    assert backend.cookies == [TOKEN]


@pytest.mark.asyncio
async def test_application_error_is_surfaced_not_raised(
    config: StarlineConfig,
    backend: FakeStarlineBackend,
    now: datetime,
) -> None:
    today = current_windows(now, 1)[0]
    backend.events[today.start] = {"code": 401, "codestring": "Authorization required"}

    result = await TelemetryFetcher(config, backend).fetch_events(DEVICE_ID, today)

    assert result.events == ()
    assert result.status.code == 401
    assert not result.status.ok
    assert str(result.status) == "401 | Authorization required"


@pytest.mark.asyncio
async def test_json_body_on_http_error_is_surfaced(config: StarlineConfig, backend: FakeStarlineBackend) -> None:
    backend.raw_bodies["device"] = (json.dumps({"code": 403, "codestring": "Forbidden"}).encode(), 403)

    snapshot = await TelemetryFetcher(config, backend).fetch_snapshot(DEVICE_ID)

    assert snapshot.status.code == 403
    assert snapshot.position is None


@pytest.mark.asyncio
async def test_non_json_http_error_is_transport_failure(config: StarlineConfig, backend: FakeStarlineBackend) -> None:
    backend.raw_bodies["device"] = (b"<html>Bad Gateway</html>", 502)

    with pytest.raises(StarlineTransportError) as excinfo:
        await TelemetryFetcher(config, backend).fetch_snapshot(DEVICE_ID)

    assert excinfo.value.status_code == 502


@pytest.mark.asyncio
async def test_invalid_json_is_decode_error(config: StarlineConfig, backend: FakeStarlineBackend) -> None:
    backend.raw_bodies["device"] = (b"{not json", 200)

    with pytest.raises(StarlineDecodeError):
        await TelemetryFetcher(config, backend).fetch_snapshot(DEVICE_ID)


@pytest.mark.asyncio
async def test_unexpected_shape_is_decode_error(
    config: StarlineConfig,
    backend: FakeStarlineBackend,
    now: datetime,
) -> None:
    today = current_windows(now, 1)[0]
    backend.events[today.start] = {"code": 200, "codestring": "OK", "events": [{"type": "ignition"}]}

    with pytest.raises(StarlineDecodeError):
        await TelemetryFetcher(config, backend).fetch_events(DEVICE_ID, today)


@pytest.mark.asyncio
async def test_json_array_body_is_decode_error(config: StarlineConfig, backend: FakeStarlineBackend) -> None:
    backend.raw_bodies["catalog"] = (b"[]", 200)

    with pytest.raises(StarlineDecodeError):
        await TelemetryFetcher(config, backend).fetch_catalog()


@pytest.mark.asyncio
async def test_fetch_snapshot_does_not_retry(config: StarlineConfig, backend: FakeStarlineBackend) -> None:
    backend.fail.add("device")

    with pytest.raises(StarlineTransportError):
        await TelemetryFetcher(config, backend).fetch_snapshot(DEVICE_ID)

    assert backend.count("device") == 1


@pytest.mark.asyncio
async def test_base_url_trailing_slash(backend: FakeStarlineBackend) -> None:
    config = StarlineConfig(device_id=DEVICE_ID, slnet_token=TOKEN, base_url="https://example.test/")

    await TelemetryFetcher(config, backend).fetch_snapshot(DEVICE_ID)

    assert backend.calls[0][1] == f"https://example.test/json/v3/device/{DEVICE_ID}/data"
