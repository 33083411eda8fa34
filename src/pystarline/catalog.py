"""Event code catalog."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from pystarline._constants import UNKNOWN_EVENT_DESCRIPTION
from pystarline.fetcher import TelemetryFetcher
from pystarline.models._base import ApplicationStatus
from pystarline.models.events import EventTypeDescriptor

_logger = logging.getLogger(__name__)


class EventCatalog:
    """Read-only mapping from event code to :class:`EventTypeDescriptor`.

    Loaded once per process.  A missing code is an expected outcome (new
    firmware introduces codes before the catalog lists them), so
    :meth:`lookup` returns ``None`` instead of raising.
    """

    def __init__(
        self,
        descriptors: dict[int, EventTypeDescriptor],
        *,
        status: ApplicationStatus | None = None,
    ) -> None:
        self._descriptors = dict(descriptors)
        self._status = status or ApplicationStatus()

    @classmethod
    def from_descriptors(
        cls,
        descriptors: Iterable[EventTypeDescriptor],
        *,
        status: ApplicationStatus | None = None,
    ) -> EventCatalog:
        by_code: dict[int, EventTypeDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.code in by_code:
                _logger.debug("Duplicate catalog code %d, keeping the last entry", descriptor.code)
            by_code[descriptor.code] = descriptor
        return cls(by_code, status=status)

    @classmethod
    async def load(cls, fetcher: TelemetryFetcher) -> EventCatalog:
        """Fetch the catalog once.

        Raises
        ------
        StarlineTransportError, StarlineDecodeError
            If the catalog cannot be read.
        """
        status, descriptors = await fetcher.fetch_catalog()
        if not status.ok:
            _logger.warning("Event catalog returned status %s", status)
        catalog = cls.from_descriptors(descriptors, status=status)
        _logger.info("Number of event types: %d", len(catalog))
        return catalog

    @property
    def status(self) -> ApplicationStatus:
        return self._status

    def lookup(self, code: int) -> EventTypeDescriptor | None:
        return self._descriptors.get(code)

    def describe(self, code: int) -> str:
        descriptor = self._descriptors.get(code)
        return descriptor.description if descriptor is not None else UNKNOWN_EVENT_DESCRIPTION

    def __len__(self) -> int:
        return len(self._descriptors)

    def __contains__(self, code: object) -> bool:
        return code in self._descriptors

    def __iter__(self) -> Iterator[EventTypeDescriptor]:
        return iter(self._descriptors.values())
