"""Rolling 24-hour event windows.

Windows are a pure function of a ``now`` the caller captured once per
refresh cycle, so every window of a cycle agrees on which day it is and a
process running past midnight rolls over on its own.
"""

from __future__ import annotations

from datetime import datetime, time, timezone

from pystarline._constants import DAY_SECONDS, DEFAULT_WINDOW_COUNT
from pystarline.models.window import TimeWindow


def window_label(index: int) -> str:
    if index == 0:
        return "Today"
    if index == 1:
        return "Yesterday"
    return f"{index * 24} hours ago"


def local_midnight(now: datetime) -> datetime:
    """Start of the local day containing ``now``.

    The UTC offset is the one in force at midnight, which differs from the
    offset of ``now`` on a DST change day.  A naive ``now`` and a
    fixed-offset ``now`` matching the system offset (what
    ``datetime.now().astimezone()`` returns) are resolved in the system
    zone.  Any other fixed offset is kept as is.
    """
    if now.tzinfo is None:
        return datetime.combine(now.date(), time.min).astimezone()
    if isinstance(now.tzinfo, timezone):
        local = now.astimezone()
        if local.utcoffset() == now.utcoffset():
            return datetime.combine(local.date(), time.min).astimezone()
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def current_windows(now: datetime, count: int) -> tuple[TimeWindow, ...]:
    """Return ``count`` contiguous 24-hour windows, today first.

    Window ``i`` is ``[midnight - i*24h, midnight - (i-1)*24h)``.  Offsets
    are whole multiples of 86400 seconds, so every window is exactly 24
    hours wide even across a DST change.
    """
    if count < 1:
        raise ValueError(f"count must be >= 1, got {count}")
    today_start = int(local_midnight(now).timestamp())
    windows = []
    for index in range(count):
        start = today_start - index * DAY_SECONDS
        windows.append(TimeWindow(start=start, end=start + DAY_SECONDS, label=window_label(index)))
    return tuple(windows)


class WindowScheduler:
    """Fixed number of windows recomputed from each cycle's ``now``."""

    def __init__(self, count: int = DEFAULT_WINDOW_COUNT) -> None:
        if count < 1:
            raise ValueError(f"count must be >= 1, got {count}")
        self._count = count

    @property
    def count(self) -> int:
        return self._count

    def windows(self, now: datetime) -> tuple[TimeWindow, ...]:
        return current_windows(now, self._count)

    def today(self, now: datetime) -> TimeWindow:
        return current_windows(now, 1)[0]

    def history(self, now: datetime) -> tuple[TimeWindow, ...]:
        return self.windows(now)[1:]
