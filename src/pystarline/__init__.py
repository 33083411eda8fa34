"""pystarline - Live terminal dashboard and async poller for the StarLine telematics API."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pystarline")
except PackageNotFoundError:
    __version__ = "0+local"

from pystarline._transport import AiohttpFetchClient, FetchClient
from pystarline.catalog import EventCatalog
from pystarline.config import StarlineConfig
from pystarline.correlator import correlate, correlate_event, severity_for_group
from pystarline.exceptions import (
    StarlineConfigError,
    StarlineDecodeError,
    StarlineError,
    StarlineStartupError,
    StarlineTransportError,
)
from pystarline.fetcher import TelemetryFetcher
from pystarline.models import (
    ApplicationStatus,
    DeviceEvents,
    DeviceSnapshot,
    EnrichedEvent,
    EventTypeDescriptor,
    RawEvent,
    RefreshSnapshot,
    Severity,
    TimeWindow,
    WindowEvents,
)
from pystarline.poller import PollerThread, build_refresh_loop
from pystarline.publisher import LoopPublisher, PollerStopped, Publisher, SnapshotQueue
from pystarline.refresh import LoopState, RefreshLoop
from pystarline.windows import WindowScheduler, current_windows

__all__ = [
    "__version__",
    "AiohttpFetchClient",
    "ApplicationStatus",
    "DeviceEvents",
    "DeviceSnapshot",
    "EnrichedEvent",
    "EventCatalog",
    "EventTypeDescriptor",
    "FetchClient",
    "LoopPublisher",
    "LoopState",
    "PollerStopped",
    "PollerThread",
    "Publisher",
    "RawEvent",
    "RefreshLoop",
    "RefreshSnapshot",
    "Severity",
    "SnapshotQueue",
    "StarlineConfig",
    "StarlineConfigError",
    "StarlineDecodeError",
    "StarlineError",
    "StarlineStartupError",
    "StarlineTransportError",
    "TelemetryFetcher",
    "TimeWindow",
    "WindowEvents",
    "WindowScheduler",
    "build_refresh_loop",
    "correlate",
    "correlate_event",
    "current_windows",
    "severity_for_group",
]
