"""Join raw events against the event catalog.

Everything here is pure: no I/O and no mutation of the catalog.
"""

from __future__ import annotations

from collections.abc import Iterable

from pystarline._constants import UNKNOWN_EVENT_DESCRIPTION
from pystarline.catalog import EventCatalog
from pystarline.models.device import LatestEvent
from pystarline.models.events import SEVERITY_BY_GROUP, EnrichedEvent, RawEvent, severity_for_group

__all__ = [
    "SEVERITY_BY_GROUP",
    "correlate",
    "correlate_event",
    "correlate_latest",
    "severity_for_group",
]


def correlate_event(catalog: EventCatalog, raw_event: RawEvent) -> EnrichedEvent:
    """Resolve one raw event.

    On a catalog miss the description is the unknown-event sentinel and the
    group is the one the device reported.
    """
    descriptor = catalog.lookup(raw_event.code)
    if descriptor is None:
        return EnrichedEvent(
            code=raw_event.code,
            group_id=raw_event.group_id,
            description=UNKNOWN_EVENT_DESCRIPTION,
            timestamp=raw_event.timestamp,
            known=False,
        )
    return EnrichedEvent(
        code=raw_event.code,
        group_id=descriptor.group_id if descriptor.group_id is not None else raw_event.group_id,
        description=descriptor.description,
        timestamp=raw_event.timestamp,
    )


def correlate(catalog: EventCatalog, raw_events: Iterable[RawEvent]) -> tuple[EnrichedEvent, ...]:
    """Enrich ``raw_events`` in order, one output per input."""
    return tuple(correlate_event(catalog, raw_event) for raw_event in raw_events)


def correlate_latest(catalog: EventCatalog, latest: LatestEvent | None) -> EnrichedEvent | None:
    """Resolve the latest event embedded in the device payload."""
    if latest is None or latest.code is None:
        return None
    descriptor = catalog.lookup(latest.code)
    return EnrichedEvent(
        code=latest.code,
        group_id=descriptor.group_id if descriptor is not None else None,
        description=descriptor.description if descriptor is not None else UNKNOWN_EVENT_DESCRIPTION,
        timestamp=latest.timestamp or 0,
        known=descriptor is not None,
    )
