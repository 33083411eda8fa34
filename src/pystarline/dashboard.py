"""Terminal dashboard.

All presentation state lives in :class:`Dashboard` and is only touched
from the thread that calls :meth:`Dashboard.run`.  Snapshots arrive
through a :class:`SnapshotQueue` and are applied in arrival order.
"""

from __future__ import annotations

import logging
from datetime import datetime

from rich import box
from rich.console import Console, Group, RenderableType
from rich.layout import Layout
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from pystarline.models.device import DeviceSnapshot
from pystarline.models.events import EnrichedEvent, Severity
from pystarline.models.snapshot import RefreshSnapshot, WindowEvents
from pystarline.publisher import PollerStopped, QueueItem, SnapshotQueue

_logger = logging.getLogger(__name__)

SEVERITY_STYLES: dict[Severity, str] = {
    Severity.HIGH: "bold red",
    Severity.MEDIUM: "yellow",
    Severity.NEUTRAL: "",
}

TIME_FORMAT = "%H:%M:%S"
EVENT_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def _format_ts(ts: int | None, fmt: str = TIME_FORMAT) -> str:
    if not ts:
        return "—"
    return datetime.fromtimestamp(ts).strftime(fmt)


def _format_number(value: float | int | None, digits: int = 1, unit: str = "") -> str:
    if value is None:
        return "—"
    if isinstance(value, int):
        return f"{value}{unit}"
    return f"{value:.{digits}f}{unit}"


def format_event(event: EnrichedEvent) -> Text:
    style = SEVERITY_STYLES[event.severity]
    return Text(f"{_format_ts(event.timestamp, EVENT_TIME_FORMAT)} > {event.description}", style=style)


def build_device_panel(snapshot: RefreshSnapshot) -> Panel:
    device: DeviceSnapshot = snapshot.device
    table = Table.grid(padding=(0, 1))
    table.add_column(justify="right", style="bold cyan", no_wrap=True)
    table.add_column(overflow="fold")

    table.add_row("Device", Text(device.title or device.device_id or "—", style="blue"))
    table.add_row("Request status", f"{device.status} @{_format_ts(device.activity_ts)}")

    position = device.position
    if position is not None:
        moving = "Moving" if position.is_move else "Stopped"
        table.add_row(
            "Position",
            f"{_format_number(position.latitude, 6)}, {_format_number(position.longitude, 6)} "
            f"{moving} @{_format_ts(position.ts)}",
        )

    obd = device.obd
    if obd is not None:
        table.add_row(
            "OBD",
            f"{_format_number(obd.fuel_litres, unit=' litres')}, {_format_number(obd.mileage, unit=' km')} "
            f"@{_format_ts(obd.ts)}",
        )

    common = device.common
    if common is not None:
        table.add_row(
            "Common",
            f"Auto: {_format_number(common.ctemp, unit='°C')}, Engine: {_format_number(common.etemp, unit='°C')}, "
            f"{_format_number(common.battery, 2, 'V')}, GPS: {_format_number(common.gps_lvl, 0)}, "
            f"GSM: {_format_number(common.gsm_lvl, 0)} @{_format_ts(common.ts)}",
        )

    if snapshot.device_event is not None:
        table.add_row("State", format_event(snapshot.device_event))

    if device.alarm_state is not None:
        zones = device.alarm_state.active_zones()
        table.add_row("Alarm zones", Text(", ".join(zones), style="bold red") if zones else "none")

    for entry in device.balance:
        table.add_row(
            f"Balance {entry.key}".strip(),
            f"{_format_number(entry.value, 2)} {entry.currency} {entry.operator} @{_format_ts(entry.ts)}".strip(),
        )

    title = f"Data @{snapshot.captured_at:%Y-%m-%d %H:%M:%S} (cycle {snapshot.cycle})"
    renderables: list[RenderableType] = [table]
    if snapshot.degraded:
        renderables.insert(
            0,
            Text(f"Degraded: {snapshot.failed_cycles} refresh cycles failed before this one", style="bold red"),
        )
    return Panel(Group(*renderables), title=title, border_style="cyan", box=box.ROUNDED)


def build_window_panel(window_events: WindowEvents, *, show_status: bool = False) -> Panel:
    lines: list[Text] = []
    if show_status or not window_events.status.ok:
        lines.append(Text(str(window_events.status), style="dim"))
    lines.extend(format_event(event) for event in window_events.events)
    if not window_events.events:
        lines.append(Text("no events", style="dim"))
    title = f"Events {window_events.window.label} ({len(window_events.events)})"
    return Panel(Group(*lines), title=title, box=box.ROUNDED)


def render_dashboard(snapshot: RefreshSnapshot | None, *, message: str | None = None) -> Layout:
    root = Layout(name="root")
    if snapshot is None:
        root.update(Panel(Text(message or "Waiting for first refresh…", style="dim"), title="pystarline"))
        return root

    root.split_column(
        Layout(name="data", ratio=1, minimum_size=8),
        Layout(name="events", ratio=5),
    )
    root["data"].update(build_device_panel(snapshot))
    columns = [
        Layout(build_window_panel(window_events, show_status=index == 0), name=f"window_{index}")
        for index, window_events in enumerate(snapshot.windows)
    ]
    root["events"].split_row(*columns)
    return root


class Dashboard:
    """Presentation loop draining a :class:`SnapshotQueue`."""

    def __init__(
        self,
        snapshots: SnapshotQueue,
        *,
        console: Console | None = None,
        screen: bool = True,
        poll_interval: float = 0.25,
    ) -> None:
        self._snapshots = snapshots
        self._console = console or Console()
        self._screen = screen
        self._poll_interval = poll_interval
        self._snapshot: RefreshSnapshot | None = None
        self._received = 0
        self._stopped: PollerStopped | None = None

    @property
    def snapshot(self) -> RefreshSnapshot | None:
        return self._snapshot

    @property
    def received(self) -> int:
        return self._received

    @property
    def stopped(self) -> PollerStopped | None:
        return self._stopped

    def apply(self, item: QueueItem) -> bool:
        """Apply one queue item; return ``False`` once the poller has stopped."""
        if isinstance(item, PollerStopped):
            self._stopped = item
            return False
        self._snapshot = item
        self._received += 1
        return True

    def render(self) -> Layout:
        return render_dashboard(self._snapshot)

    def run(self) -> PollerStopped | None:
        """Draw until the poller stops.  Blocks the calling thread."""
        with Live(self.render(), console=self._console, screen=self._screen, refresh_per_second=4) as live:
            while self._stopped is None:
                item = self._snapshots.get(timeout=self._poll_interval)
                if item is None:
                    continue
                self.apply(item)
                live.update(self.render())
        _logger.debug("Dashboard loop finished after %d snapshot(s)", self._received)
        return self._stopped
