"""Fake StarLine backend and canned payloads shared by the tests."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import timedelta, timezone
from typing import Any

from pystarline.exceptions import StarlineTransportError

DEVICE_ID = "38406090"
TOKEN = "slnet-token-123"
MSK = timezone(timedelta(hours=3))

CATALOG_BODY: dict[str, Any] = {
    "code": 200,
    "codestring": "OK",
    "eventDescriptions": [
        {"code": 1, "desc": "Ignition On", "group_id": 0},
        {"code": 2, "desc": "Door opened", "group_id": 3},
        {"code": 3, "desc": "Arm", "group_id": 1},
    ],
}

DEVICE_BODY: dict[str, Any] = {
    "code": 200,
    "codestring": "OK",
    "data": {
        "alias": "My car",
        "device_id": DEVICE_ID,
        "type": "A93",
        "typename": "StarLine ",
        "firmware_version": "2.18.0",
        "telephone": "+70000000000",
        "status": 1,
        "activity_ts": 1710000000,
        "common": {
            "ts": 1710000001,
            "etemp": 40,
            "ctemp": 21,
            "battery": 12.6,
            "gsm_lvl": 25,
            "gps_lvl": 10,
            "reg_date": 1600000000,
            "mayak_temp": 0,
        },
        "event": {"type": 2, "timestamp": 1710000002},
        "obd": {"ts": 1710000003, "fuel_litres": 31, "fuel_percent": 55, "mileage": 123456},
        "position": {"ts": 1710000004, "x": 37.6173, "y": 55.7558, "is_move": False, "dir": 90, "sat_qty": 12},
        "balance": [
            {"key": "active", "currency": "RUB", "operator": "MTS", "value": 150, "state": 0, "ts": 1710000005},
        ],
    },
}


def events_body(*events: tuple[int, int, int], code: int = 200, codestring: str = "OK") -> dict[str, Any]:
    return {
        "code": code,
        "codestring": codestring,
        "events": [{"type": c, "groupId": g, "timestamp": ts} for c, g, ts in events],
    }


@dataclass
class FakeStarlineBackend:
    """In-memory :class:`FetchClient` keyed on endpoint suffix."""

    catalog: dict[str, Any] = field(default_factory=lambda: dict(CATALOG_BODY))
    device: dict[str, Any] = field(default_factory=lambda: dict(DEVICE_BODY))
    events: dict[int, dict[str, Any]] = field(default_factory=dict)
    fail: set[str] = field(default_factory=set)
    raw_bodies: dict[str, tuple[bytes, int]] = field(default_factory=dict)
    calls: list[tuple[str, str, Any]] = field(default_factory=list)
    cookies: list[str] = field(default_factory=list)

    async def __aenter__(self) -> FakeStarlineBackend:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        return None

    def count(self, kind: str) -> int:
        return sum(1 for call in self.calls if call[0] == kind)

    def event_windows(self) -> list[tuple[int, int]]:
        return [(body["period_start"], body["period_end"]) for kind, _url, body in self.calls if kind == "events"]

    def _kind(self, url: str) -> str:
        if url.endswith("/library/events"):
            return "catalog"
        if url.endswith("/events"):
            return "events"
        if url.endswith("/data"):
            return "device"
        raise AssertionError(f"Unexpected URL in fake backend: {url}")

    def _respond(self, kind: str, body: Any) -> tuple[bytes, int]:
        if kind in self.fail:
            raise StarlineTransportError(f"{kind} unreachable", endpoint=kind)
        if kind in self.raw_bodies:
            return self.raw_bodies[kind]
        return json.dumps(body).encode(), 200

    async def get(self, url: str, cookie: str) -> tuple[bytes, int]:
        kind = self._kind(url)
        self.calls.append((kind, url, None))
        self.cookies.append(cookie)
        return self._respond(kind, self.catalog if kind == "catalog" else self.device)

    async def post(self, url: str, cookie: str, json_body: Mapping[str, Any]) -> tuple[bytes, int]:
        kind = self._kind(url)
        self.calls.append((kind, url, dict(json_body)))
        self.cookies.append(cookie)
        body = self.events.get(json_body["period_start"], events_body())
        return self._respond(kind, body)
