"""Published dashboard snapshot."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from pystarline.models._base import ApplicationStatus
from pystarline.models.device import DeviceSnapshot
from pystarline.models.events import EnrichedEvent
from pystarline.models.window import TimeWindow


class WindowEvents(BaseModel):
    """Correlated events of one time window."""

    model_config = ConfigDict(frozen=True)

    window: TimeWindow
    status: ApplicationStatus = Field(default_factory=ApplicationStatus)
    events: tuple[EnrichedEvent, ...] = ()


class RefreshSnapshot(BaseModel):
    """Everything one refresh cycle produced.

    Built whole at the end of a cycle and never mutated; the dashboard
    only ever sees complete snapshots.

    Parameters
    ----------
    device : DeviceSnapshot
        Device state fetched this cycle.
    device_event : EnrichedEvent or None
        The device's latest event, resolved through the catalog.
    windows : tuple of WindowEvents
        Today first, then history, newest to oldest.
    captured_at : datetime
        The ``now`` captured at the start of the cycle.
    cycle : int
        1-based number of the cycle that produced this snapshot.
    degraded : bool
        Set when the cycles preceding this one kept failing.
    failed_cycles : int
        Consecutive failed cycles immediately before this snapshot.
    """

    model_config = ConfigDict(frozen=True)

    device: DeviceSnapshot
    device_event: EnrichedEvent | None = None
    windows: tuple[WindowEvents, ...] = ()
    captured_at: datetime
    cycle: int = 1
    degraded: bool = False
    failed_cycles: int = 0

    @property
    def today(self) -> WindowEvents | None:
        return self.windows[0] if self.windows else None

    @property
    def history(self) -> tuple[WindowEvents, ...]:
        return self.windows[1:]
