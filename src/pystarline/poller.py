"""Background poller runtime.

Runs the catalog load and the :class:`RefreshLoop` on a private asyncio
loop in a daemon thread, so slow network reads never stall the
dashboard.  The only thing crossing the thread boundary is the
:class:`SnapshotQueue`.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from datetime import datetime
from typing import Any

from pystarline._transport import AiohttpFetchClient, FetchClient
from pystarline.catalog import EventCatalog
from pystarline.config import StarlineConfig
from pystarline.exceptions import StarlineDecodeError, StarlineStartupError, StarlineTransportError
from pystarline.fetcher import TelemetryFetcher
from pystarline.publisher import Publisher, SnapshotQueue
from pystarline.refresh import RefreshLoop
from pystarline.windows import WindowScheduler

_logger = logging.getLogger(__name__)


async def build_refresh_loop(
    config: StarlineConfig,
    transport: FetchClient,
    publisher: Publisher,
    *,
    clock: Callable[[], datetime] | None = None,
    period: float | None = None,
) -> RefreshLoop:
    """Load the event catalog and wire up a :class:`RefreshLoop`.

    Raises
    ------
    StarlineStartupError
        If the catalog cannot be loaded.
    """
    fetcher = TelemetryFetcher(config, transport)
    try:
        catalog = await EventCatalog.load(fetcher)
    except (StarlineTransportError, StarlineDecodeError) as exc:
        raise StarlineStartupError(f"Event catalog could not be loaded: {exc}") from exc

    kwargs: dict[str, Any] = {}
    if clock is not None:
        kwargs["clock"] = clock
    if period is not None:
        kwargs["period"] = period
    return RefreshLoop(
        fetcher,
        catalog,
        publisher,
        device_id=config.device_id,
        scheduler=WindowScheduler(config.window_count),
        refetch_history_on_rollover=config.refetch_history_on_rollover,
        **kwargs,
    )


class PollerThread:
    """Owns the poller's event loop, HTTP session and refresh loop.

    Usage::

        snapshots = SnapshotQueue()
        poller = PollerThread(config, snapshots)
        poller.start()
        ...
        poller.stop()
        poller.join()

    Whatever happens, ``snapshots`` is closed when the thread exits;
    a startup failure is carried in the closing message.
    """

    def __init__(
        self,
        config: StarlineConfig,
        snapshots: SnapshotQueue,
        *,
        transport_factory: Callable[[], AbstractAsyncContextManager[FetchClient]] | None = None,
    ) -> None:
        self._config = config
        self._snapshots = snapshots
        self._transport_factory: Callable[[], AbstractAsyncContextManager[FetchClient]] = transport_factory or (
            lambda: AiohttpFetchClient(timeout=config.request_timeout)
        )
        self._thread = threading.Thread(target=self._main, name="pystarline-poller", daemon=True)
        self._refresh_loop: RefreshLoop | None = None
        self._stop_requested = False

    @property
    def refresh_loop(self) -> RefreshLoop | None:
        return self._refresh_loop

    def start(self) -> None:
        self._thread.start()

    def stop(self) -> None:
        """Stop refreshing at the next tick boundary.  Thread-safe."""
        self._stop_requested = True
        refresh_loop = self._refresh_loop
        if refresh_loop is not None:
            refresh_loop.stop()

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the thread; return ``True`` if it has exited."""
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def is_alive(self) -> bool:
        return self._thread.is_alive()

    def _main(self) -> None:
        error: BaseException | None = None
        try:
            asyncio.run(self._run())
        except StarlineStartupError as exc:
            _logger.error("Startup failed: %s", exc)
            error = exc
        except Exception as exc:
            _logger.exception("Poller crashed")
            error = exc
        finally:
            self._snapshots.close(error)

    async def _run(self) -> None:
        async with self._transport_factory() as transport:
            refresh_loop = await build_refresh_loop(self._config, transport, self._snapshots)
            self._refresh_loop = refresh_loop
            if self._stop_requested:
                refresh_loop.stop()
            await refresh_loop.run()
