"""Handoff of refresh snapshots into the presentation layer.

The refresh loop never touches presentation state.  It hands each
finished :class:`RefreshSnapshot` to a :class:`Publisher`, and the
publishers here marshal it onto the consumer's own thread or event loop.
"""

from __future__ import annotations

import asyncio
import logging
import queue
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from pystarline.models.snapshot import RefreshSnapshot

_logger = logging.getLogger(__name__)


class Publisher(Protocol):
    """Receives one complete snapshot per successful refresh cycle."""

    def on_snapshot(self, snapshot: RefreshSnapshot) -> None:
        ...


@dataclass(frozen=True)
class PollerStopped:
    """Final queue message: the poller will publish nothing more."""

    error: BaseException | None = None


QueueItem = RefreshSnapshot | PollerStopped


class SnapshotQueue:
    """Thread-safe FIFO between the poller thread and the dashboard thread.

    Unbounded, so a slow consumer never blocks or drops a cycle; snapshots
    come out in the order they were published.
    """

    def __init__(self) -> None:
        self._queue: queue.Queue[QueueItem] = queue.Queue()
        self._closed = False

    def on_snapshot(self, snapshot: RefreshSnapshot) -> None:
        if self._closed:
            _logger.debug("Dropping snapshot for cycle %d: queue closed", snapshot.cycle)
            return
        self._queue.put(snapshot)

    def close(self, error: BaseException | None = None) -> None:
        """Signal the consumer that the poller has finished.  Idempotent."""
        if self._closed:
            return
        self._closed = True
        self._queue.put(PollerStopped(error))

    @property
    def closed(self) -> bool:
        return self._closed

    def get(self, timeout: float | None = None) -> QueueItem | None:
        """Next item, or ``None`` if nothing arrived within ``timeout``."""
        try:
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def drain(self) -> list[QueueItem]:
        """All items currently queued, without blocking."""
        items: list[QueueItem] = []
        while True:
            try:
                items.append(self._queue.get_nowait())
            except queue.Empty:
                return items


class LoopPublisher:
    """Dispatch snapshots to a callback on another asyncio loop.

    For consumers that run their own asyncio loop instead of polling a
    :class:`SnapshotQueue` from a plain thread.

    The callback always runs on ``loop``'s thread, scheduled with
    ``call_soon_threadsafe`` so ordering follows publish order.
    """

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        callback: Callable[[RefreshSnapshot], None],
    ) -> None:
        self._loop = loop
        self._callback = callback

    def on_snapshot(self, snapshot: RefreshSnapshot) -> None:
        self._loop.call_soon_threadsafe(self._callback, snapshot)
