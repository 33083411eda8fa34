from __future__ import annotations

import time
from collections.abc import Iterator
from datetime import UTC, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from pystarline.windows import WindowScheduler, current_windows, local_midnight, window_label

MSK = timezone(timedelta(hours=3))


def _ts(*args: int) -> int:
    return int(datetime(*args, tzinfo=MSK).timestamp())


def test_midnight_scenario() -> None:
    now = datetime(2024, 3, 10, 0, 0, 0, tzinfo=MSK)

    windows = current_windows(now, 2)

    assert [(w.start, w.end) for w in windows] == [
        (_ts(2024, 3, 10), _ts(2024, 3, 11)),
        (_ts(2024, 3, 9), _ts(2024, 3, 10)),
    ]


def test_windows_are_contiguous_24h_and_non_overlapping(now: datetime) -> None:
    windows = current_windows(now, 5)

    assert len(windows) == 5
    for window in windows:
        assert window.duration == 24 * 3600
    for newer, older in zip(windows, windows[1:]):
        assert older.end == newer.start


def test_today_window_contains_now(now: datetime) -> None:
    today = current_windows(now, 1)[0]

    assert today.contains(int(now.timestamp()))
    assert today.start == _ts(2024, 3, 10)
    assert not today.contains(today.end)


def test_same_now_gives_identical_windows(now: datetime) -> None:
    assert current_windows(now, 3) == current_windows(now, 3)


def test_labels() -> None:
    assert [window_label(i) for i in range(4)] == ["Today", "Yesterday", "48 hours ago", "72 hours ago"]


def test_last_second_of_day_stays_on_same_day() -> None:
    now = datetime(2024, 3, 10, 23, 59, 59, tzinfo=MSK)

    assert current_windows(now, 1)[0].start == _ts(2024, 3, 10)


def test_windows_roll_over_with_now() -> None:
    before = current_windows(datetime(2024, 3, 10, 23, 59, tzinfo=MSK), 2)
    after = current_windows(datetime(2024, 3, 11, 0, 1, tzinfo=MSK), 2)

    assert after[1].start == before[0].start
    assert after[0].start == before[0].end


def test_midnight_uses_now_timezone() -> None:
    utc_now = datetime(2024, 3, 9, 22, 30, tzinfo=timezone.utc)
    local_now = utc_now.astimezone(MSK)

    assert local_midnight(local_now) == datetime(2024, 3, 10, tzinfo=MSK)
    assert local_midnight(utc_now) == datetime(2024, 3, 9, tzinfo=timezone.utc)


def test_naive_now_is_local_time() -> None:
    naive = datetime(2024, 3, 10, 12, 0)

    today = current_windows(naive, 1)[0]

    assert today.start == int(datetime(2024, 3, 10).timestamp())


def test_count_must_be_positive(now: datetime) -> None:
    with pytest.raises(ValueError):
        current_windows(now, 0)
    with pytest.raises(ValueError):
        WindowScheduler(0)


def test_scheduler_splits_today_and_history(now: datetime) -> None:
    scheduler = WindowScheduler(3)

    assert scheduler.today(now) == scheduler.windows(now)[0]
    assert scheduler.history(now) == scheduler.windows(now)[1:]
    assert [w.label for w in scheduler.history(now)] == ["Yesterday", "48 hours ago"]
    assert scheduler.windows(now)[2].start == _ts(2024, 3, 8)


BERLIN = ZoneInfo("Europe/Berlin")

# Local midnight in Berlin on the spring-forward and fall-back days.
DST_DAYS = [
    (datetime(2024, 3, 31, 12, 0), datetime(2024, 3, 30, 23, 0, tzinfo=UTC)),
    (datetime(2024, 10, 27, 12, 0), datetime(2024, 10, 26, 22, 0, tzinfo=UTC)),
]


@pytest.fixture
def berlin_system_tz(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")
    monkeypatch.setenv("TZ", "Europe/Berlin")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


@pytest.mark.parametrize(("wall_clock", "midnight"), DST_DAYS)
def test_today_starts_at_zone_midnight_on_dst_days(wall_clock: datetime, midnight: datetime) -> None:
    now = wall_clock.replace(tzinfo=BERLIN)

    today = current_windows(now, 1)[0]

    assert today.start == int(midnight.timestamp())
    assert today.contains(int(now.timestamp()))


@pytest.mark.parametrize(("wall_clock", "midnight"), DST_DAYS)
def test_today_starts_at_system_midnight_on_dst_days(
    berlin_system_tz: None,
    wall_clock: datetime,
    midnight: datetime,
) -> None:
    aware_now = wall_clock.astimezone()

    assert current_windows(aware_now, 1)[0].start == int(midnight.timestamp())
    assert current_windows(wall_clock, 1)[0].start == int(midnight.timestamp())


def test_windows_stay_24h_across_dst_change() -> None:
    windows = current_windows(datetime(2024, 4, 1, 9, 0, tzinfo=BERLIN), 3)

    assert windows[0].start == int(datetime(2024, 3, 31, 22, 0, tzinfo=UTC).timestamp())
    assert windows[1].start == windows[0].start - 24 * 3600
    assert all(window.duration == 24 * 3600 for window in windows)
