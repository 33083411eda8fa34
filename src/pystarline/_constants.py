"""Internal constants shared across the library."""

BASE_URL = "https://developer.starline.ru"
USER_AGENT = "pystarline/0.1"
SESSION_COOKIE = "slnet"

CATALOG_ENDPOINT = "/json/v3/library/events"
EVENTS_ENDPOINT = "/json/v2/device/{device_id}/events"
DEVICE_DATA_ENDPOINT = "/json/v3/device/{device_id}/data"

#: StarLine reports success as ``code == 200`` inside the response body.
APP_STATUS_OK = 200

UNKNOWN_EVENT_DESCRIPTION = "Unknown event"

REFRESH_PERIOD_SECONDS: float = 60.0
DAY_SECONDS = 24 * 3600

#: Today + yesterday + 48 hours ago.
DEFAULT_WINDOW_COUNT = 3

#: Consecutive failed cycles before the next snapshot is flagged degraded.
DEGRADED_AFTER_FAILURES = 3
