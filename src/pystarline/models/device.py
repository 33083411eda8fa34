"""Device data model (``/json/v3/device/{id}/data``).

Firmware revisions add and drop whole blocks (``alarm_state`` and
``state`` come and go), so every block is optional and each block only
declares the fields the dashboard reads.  Anything else stays in
``raw``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field, field_validator, model_validator

from pystarline.models._base import ApplicationStatus, StarlineBaseModel, parse_unix_timestamp
from pystarline.normalize import safe_bool, safe_float, safe_int


class _TimestampedBlock(StarlineBaseModel):
    ts: int | None = None

    @field_validator("ts", mode="before")
    @classmethod
    def _coerce_ts(cls, value: Any) -> int | None:
        return safe_int(value)

    @property
    def updated_at(self) -> datetime | None:
        return parse_unix_timestamp(self.ts)


class CommonBlock(_TimestampedBlock):
    """Environment and battery readings."""

    reg_date: int | None = None
    etemp: int | None = None
    ctemp: int | None = None
    mayak_temp: int | None = None
    battery: float | None = None
    gsm_lvl: float | None = None
    gps_lvl: float | None = None

    @field_validator("reg_date", "etemp", "ctemp", "mayak_temp", mode="before")
    @classmethod
    def _coerce_ints(cls, value: Any) -> int | None:
        return safe_int(value)

    @field_validator("battery", "gsm_lvl", "gps_lvl", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> float | None:
        return safe_float(value)


class LatestEvent(StarlineBaseModel):
    """The most recent event embedded in the device payload."""

    code: int | None = None
    timestamp: int | None = None

    @model_validator(mode="before")
    @classmethod
    def _rename_type(cls, values: Any) -> Any:
        if isinstance(values, dict) and "type" in values and "code" not in values:
            values = dict(values)
            values["code"] = values["type"]
        return values

    @field_validator("code", "timestamp", mode="before")
    @classmethod
    def _coerce_ints(cls, value: Any) -> int | None:
        return safe_int(value)


class ObdBlock(_TimestampedBlock):
    """Fuel and mileage readings."""

    fuel_litres: int | None = None
    fuel_percent: int | None = None
    mileage: int | None = None

    @field_validator("fuel_litres", "fuel_percent", "mileage", mode="before")
    @classmethod
    def _coerce_ints(cls, value: Any) -> int | None:
        return safe_int(value)


class PositionBlock(_TimestampedBlock):
    """GPS fix.  StarLine sends longitude as ``x`` and latitude as ``y``."""

    x: float | None = None
    y: float | None = None
    is_move: bool = False
    dir: int | None = None
    s: int | None = None
    r: int | None = None
    sat_qty: int | None = None

    @field_validator("x", "y", mode="before")
    @classmethod
    def _coerce_floats(cls, value: Any) -> float | None:
        return safe_float(value)

    @field_validator("dir", "s", "r", "sat_qty", mode="before")
    @classmethod
    def _coerce_ints(cls, value: Any) -> int | None:
        return safe_int(value)

    @field_validator("is_move", mode="before")
    @classmethod
    def _coerce_move(cls, value: Any) -> bool:
        return bool(safe_bool(value))

    @property
    def latitude(self) -> float | None:
        return self.y

    @property
    def longitude(self) -> float | None:
        return self.x


class AlarmStateBlock(_TimestampedBlock):
    """Alarm zone triggers (only sent by some firmware)."""

    add_h: bool = False
    add_l: bool = False
    door: bool = False
    hbrake: bool = False
    hijack: bool = False
    hood: bool = False
    ign: bool = False
    pbrake: bool = False
    shock_h: bool = False
    shock_l: bool = False
    tilt: bool = False
    trunk: bool = False

    def active_zones(self) -> list[str]:
        flags = self.model_dump(exclude={"raw", "ts"})
        return [name for name, active in flags.items() if active]


class StateBlock(_TimestampedBlock):
    """Security and engine state flags (only sent by some firmware)."""

    alarm: bool = False
    arm: bool = False
    door: bool = False
    hood: bool = False
    trunk: bool = False
    ign: bool = False
    run: bool = False
    hijack: bool = False
    valet: bool = False
    r_start: bool = False
    r_start_timer: int | None = None
    webasto: bool = False
    webasto_timer: int | None = None

    @field_validator("r_start_timer", "webasto_timer", mode="before")
    @classmethod
    def _coerce_ints(cls, value: Any) -> int | None:
        return safe_int(value)


class BalanceEntry(StarlineBaseModel):
    """SIM card balance reading."""

    key: str = ""
    currency: str = ""
    operator: str = ""
    value: float | None = None
    state: int | None = None
    ts: int | None = None

    @field_validator("value", mode="before")
    @classmethod
    def _coerce_value(cls, value: Any) -> float | None:
        return safe_float(value)

    @field_validator("state", "ts", mode="before")
    @classmethod
    def _coerce_ints(cls, value: Any) -> int | None:
        return safe_int(value)

    @property
    def updated_at(self) -> datetime | None:
        return parse_unix_timestamp(self.ts)


class DeviceSnapshot(StarlineBaseModel):
    """Point-in-time device state.

    ``status`` holds the response envelope's ``code`` / ``codestring``;
    every other field comes from the ``data`` object.
    """

    status: ApplicationStatus = Field(default_factory=ApplicationStatus)

    device_id: str = ""
    alias: str = ""
    type: str = ""
    typename: str = ""
    firmware_version: str = ""
    telephone: str = ""
    sn: str = ""
    device_status: int | None = None
    activity_ts: int | None = None

    common: CommonBlock | None = None
    event: LatestEvent | None = None
    obd: ObdBlock | None = None
    position: PositionBlock | None = None
    alarm_state: AlarmStateBlock | None = None
    state: StateBlock | None = None
    balance: tuple[BalanceEntry, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _unwrap_envelope(cls, values: Any) -> Any:
        """Accept either the full response body or the bare ``data`` object.

        ``data.status`` is the device's own status and is renamed to
        ``device_status``; ``status`` holds the envelope code.
        """
        if not isinstance(values, dict):
            return values
        data = values.get("data")
        if isinstance(data, dict):
            merged = dict(data)
            if "status" in merged:
                merged["device_status"] = merged.pop("status")
            merged["status"] = ApplicationStatus.from_body(values)
            merged["raw"] = values.get("raw", values)
            return merged
        status = values.get("status")
        if status is not None and not isinstance(status, (dict, ApplicationStatus)):
            values = dict(values)
            values["device_status"] = values.pop("status")
        return values

    @field_validator("device_id", "alias", "type", "typename", "firmware_version", "telephone", "sn", mode="before")
    @classmethod
    def _coerce_strings(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("device_status", "activity_ts", mode="before")
    @classmethod
    def _coerce_ints(cls, value: Any) -> int | None:
        return safe_int(value)

    @field_validator("balance", mode="before")
    @classmethod
    def _coerce_balance(cls, value: Any) -> Any:
        if value is None:
            return ()
        if isinstance(value, dict):
            return tuple(value.values())
        return value

    @property
    def activity_at(self) -> datetime | None:
        return parse_unix_timestamp(self.activity_ts)

    @property
    def title(self) -> str:
        parts = [f"{self.typename}{self.type}".strip(), self.alias, self.firmware_version]
        return " ".join(part for part in parts if part)
