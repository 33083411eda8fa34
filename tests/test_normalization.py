from __future__ import annotations

import pytest

from pystarline.models.device import CommonBlock, PositionBlock
from pystarline.normalize import safe_bool, safe_float, safe_int


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("12.6", 12.6),
        (3, 3.0),
        ("", None),
        (None, None),
        ("n/a", None),
        (float("nan"), None),
        (float("inf"), None),
        ("-Infinity", None),
        ("1e999", None),
        (True, None),
    ],
)
def test_safe_float(value: object, expected: float | None) -> None:
    assert safe_float(value) == expected


def test_safe_int_truncates_floats() -> None:
    assert safe_int("55.9") == 55
    assert safe_int("x") is None
    assert safe_int(float("inf")) is None


def test_safe_bool() -> None:
    assert safe_bool("1") is True
    assert safe_bool(0) is False
    assert safe_bool("") is None


def test_blocks_tolerate_string_numbers() -> None:
    common = CommonBlock.model_validate({"battery": "12.45", "etemp": "40", "gsm_lvl": "", "ts": "1710000000"})
    position = PositionBlock.model_validate({"x": "37.6", "y": "55.7", "is_move": 1, "sat_qty": None})

    assert common.battery == pytest.approx(12.45)
    assert common.etemp == 40
    assert common.gsm_lvl is None
    assert common.updated_at is not None
    assert position.latitude == pytest.approx(55.7)
    assert position.is_move is True
    assert position.sat_qty is None


def test_blocks_drop_non_finite_numbers() -> None:
    common = CommonBlock.model_validate({"battery": float("inf"), "etemp": 1e999, "ts": float("-inf")})

    assert common.battery is None
    assert common.etemp is None
    assert common.ts is None
