"""Periodic refresh loop.

One cycle captures ``now`` once, fetches the device snapshot and the
today window (plus history on the first successful cycle), correlates
the events and publishes a single immutable :class:`RefreshSnapshot`.

States::

    IDLE -> FETCHING -> CORRELATING -> PUBLISHING -> IDLE
    any tick boundary after stop() -> CANCELLED
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable
from datetime import datetime
from enum import StrEnum

from pystarline._constants import DEGRADED_AFTER_FAILURES, REFRESH_PERIOD_SECONDS
from pystarline.catalog import EventCatalog
from pystarline.correlator import correlate, correlate_latest
from pystarline.exceptions import StarlineDecodeError, StarlineStartupError, StarlineTransportError
from pystarline.fetcher import TelemetryFetcher
from pystarline.models.device import DeviceSnapshot
from pystarline.models.events import DeviceEvents
from pystarline.models.snapshot import RefreshSnapshot, WindowEvents
from pystarline.models.window import TimeWindow
from pystarline.publisher import Publisher
from pystarline.windows import WindowScheduler

_logger = logging.getLogger(__name__)

CycleError = (StarlineTransportError, StarlineDecodeError)


class LoopState(StrEnum):
    IDLE = "idle"
    FETCHING = "fetching"
    CORRELATING = "correlating"
    PUBLISHING = "publishing"
    CANCELLED = "cancelled"


def _local_now() -> datetime:
    return datetime.now().astimezone()


class RefreshLoop:
    """Single periodic scheduler feeding a :class:`Publisher`.

    Usage::

        loop = RefreshLoop(fetcher, catalog, publisher, device_id="123")
        await loop.run()          # until loop.stop() is called

    Parameters
    ----------
    fetcher : TelemetryFetcher
        Remote reads.  Never retried here within a cycle.
    catalog : EventCatalog
        Loaded once before the loop starts.
    publisher : Publisher
        Receives each completed snapshot exactly once.
    device_id : str
        Device to poll.
    scheduler : WindowScheduler, optional
        Window layout.  Defaults to today plus two days of history.
    period : float
        Seconds between tick starts.
    clock : callable
        Returns the current local time; read once per cycle.
    refetch_history_on_rollover : bool
        Re-fetch history when the today window moved since history was
        fetched.  Off by default, so history goes stale past midnight.
    """

    def __init__(
        self,
        fetcher: TelemetryFetcher,
        catalog: EventCatalog,
        publisher: Publisher,
        *,
        device_id: str,
        scheduler: WindowScheduler | None = None,
        period: float = REFRESH_PERIOD_SECONDS,
        clock: Callable[[], datetime] = _local_now,
        refetch_history_on_rollover: bool = False,
    ) -> None:
        if period <= 0:
            raise ValueError(f"period must be positive, got {period}")
        self._fetcher = fetcher
        self._catalog = catalog
        self._publisher = publisher
        self._device_id = device_id
        self._scheduler = scheduler or WindowScheduler()
        self._period = period
        self._clock = clock
        self._refetch_history_on_rollover = refetch_history_on_rollover

        self._state = LoopState.IDLE
        self._cycle = 0
        self._consecutive_failures = 0
        self._last_snapshot: RefreshSnapshot | None = None
        self._history: tuple[WindowEvents, ...] | None = None
        self._history_day_start: int | None = None

        self._stop_requested = threading.Event()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._wakeup: asyncio.Event | None = None

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def state(self) -> LoopState:
        return self._state

    @property
    def cycle(self) -> int:
        return self._cycle

    @property
    def consecutive_failures(self) -> int:
        return self._consecutive_failures

    @property
    def last_snapshot(self) -> RefreshSnapshot | None:
        return self._last_snapshot

    @property
    def stop_requested(self) -> bool:
        return self._stop_requested.is_set()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def stop(self) -> None:
        """Request cancellation.  Safe to call from any thread.

        Takes effect at the next tick boundary.  A cycle already fetching is
        allowed to finish, but its snapshot is discarded.
        """
        self._stop_requested.set()
        loop, wakeup = self._loop, self._wakeup
        if loop is None or wakeup is None or loop.is_closed():
            return
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is loop:
            wakeup.set()
        else:
            loop.call_soon_threadsafe(wakeup.set)

    async def run(self) -> None:
        """Prime, then refresh every ``period`` seconds until stopped.

        Raises
        ------
        StarlineStartupError
            If the first device snapshot cannot be fetched.
        """
        if self._stop_requested.is_set():
            self._state = LoopState.CANCELLED
            return
        self._loop = asyncio.get_running_loop()
        self._wakeup = asyncio.Event()
        try:
            started = self._loop.time()
            await self.prime()
            next_tick = started + self._period
            while not await self._wait_until(next_tick):
                next_tick = self._advance(next_tick)
                await self.run_cycle()
        finally:
            self._state = LoopState.CANCELLED
            self._wakeup = None
            self._loop = None
            _logger.info("Refresh loop stopped after %d cycle(s)", self._cycle)

    async def prime(self) -> RefreshSnapshot | None:
        """Run the startup cycle.

        A failed device snapshot is fatal here.  A failed events read is
        not: the cycle is dropped and history is retried next tick.
        """
        return await self._run_cycle(startup=True)

    async def run_cycle(self) -> RefreshSnapshot | None:
        """Run one cycle; return the published snapshot or ``None``."""
        return await self._run_cycle(startup=False)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _advance(self, next_tick: float) -> float:
        """Next tick deadline, skipping ticks missed while a cycle ran long."""
        assert self._loop is not None  # noqa: S101
        now = self._loop.time()
        next_tick += self._period
        skipped = 0
        while next_tick <= now:
            next_tick += self._period
            skipped += 1
        if skipped:
            _logger.debug("Skipped %d tick(s) after a slow cycle", skipped)
        return next_tick

    async def _wait_until(self, deadline: float) -> bool:
        """Sleep until ``deadline``; return ``True`` if stop was requested."""
        assert self._loop is not None and self._wakeup is not None  # noqa: S101
        if self._stop_requested.is_set():
            return True
        timeout = max(0.0, deadline - self._loop.time())
        try:
            await asyncio.wait_for(self._wakeup.wait(), timeout=timeout)
        except TimeoutError:
            pass
        return self._stop_requested.is_set()

    def _needs_history(self, today: TimeWindow) -> bool:
        if self._history is None:
            return True
        return self._refetch_history_on_rollover and self._history_day_start != today.start

    async def _run_cycle(self, *, startup: bool) -> RefreshSnapshot | None:
        if self._state is LoopState.CANCELLED:
            return None
        self._cycle += 1
        cycle = self._cycle
        now = self._clock()
        windows = self._scheduler.windows(now)
        today, history_windows = windows[0], windows[1:]

        try:
            self._state = LoopState.FETCHING
            device = await self._fetch_device(startup=startup)
            today_events = await self._fetcher.fetch_events(self._device_id, today)
            history_events: list[tuple[TimeWindow, DeviceEvents]] | None = None
            if self._needs_history(today):
                history_events = []
                for window in history_windows:
                    history_events.append((window, await self._fetcher.fetch_events(self._device_id, window)))
        except CycleError as exc:
            self._state = LoopState.IDLE
            self._record_failure(cycle, exc)
            return None

        self._state = LoopState.CORRELATING
        today_result = WindowEvents(
            window=today,
            status=today_events.status,
            events=correlate(self._catalog, today_events.events),
        )
        if history_events is not None:
            history = tuple(
                WindowEvents(window=window, status=result.status, events=correlate(self._catalog, result.events))
                for window, result in history_events
            )
        else:
            assert self._history is not None  # noqa: S101
            history = self._history

        self._state = LoopState.PUBLISHING
        if self._stop_requested.is_set():
            _logger.debug("Cycle %d finished after stop was requested; discarding", cycle)
            self._state = LoopState.IDLE
            return None

        failed_cycles = self._consecutive_failures
        snapshot = RefreshSnapshot(
            device=device,
            device_event=correlate_latest(self._catalog, device.event),
            windows=(today_result, *history),
            captured_at=now,
            cycle=cycle,
            degraded=failed_cycles >= DEGRADED_AFTER_FAILURES,
            failed_cycles=failed_cycles,
        )
        if history_events is not None:
            self._history = history
            self._history_day_start = today.start
        self._publisher.on_snapshot(snapshot)
        self._last_snapshot = snapshot
        self._consecutive_failures = 0
        self._state = LoopState.IDLE
        _logger.debug(
            "Cycle %d published: today=%d events, history=%s",
            cycle,
            len(today_result.events),
            "fetched" if history_events is not None else "reused",
        )
        return snapshot

    async def _fetch_device(self, *, startup: bool) -> DeviceSnapshot:
        try:
            return await self._fetcher.fetch_snapshot(self._device_id)
        except CycleError as exc:
            if startup:
                self._state = LoopState.CANCELLED
                raise StarlineStartupError(f"Initial device snapshot for {self._device_id} failed: {exc}") from exc
            raise

    def _record_failure(self, cycle: int, exc: Exception) -> None:
        self._consecutive_failures += 1
        _logger.warning(
            "Refresh cycle %d aborted (%d consecutive): %s",
            cycle,
            self._consecutive_failures,
            exc,
        )
        if self._consecutive_failures == DEGRADED_AFTER_FAILURES:
            _logger.error("%d consecutive refresh cycles failed; marking dashboard degraded", DEGRADED_AFTER_FAILURES)
