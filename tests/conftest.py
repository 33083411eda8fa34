from __future__ import annotations

from datetime import datetime

import pytest
from fakes import CATALOG_BODY, DEVICE_ID, MSK, TOKEN, FakeStarlineBackend

from pystarline.catalog import EventCatalog
from pystarline.config import StarlineConfig
from pystarline.models.events import EventTypeDescriptor


@pytest.fixture
def config() -> StarlineConfig:
    return StarlineConfig(device_id=DEVICE_ID, slnet_token=TOKEN)


@pytest.fixture
def backend() -> FakeStarlineBackend:
    return FakeStarlineBackend()


@pytest.fixture
def catalog() -> EventCatalog:
    return EventCatalog.from_descriptors(
        EventTypeDescriptor.model_validate(item) for item in CATALOG_BODY["eventDescriptions"]
    )


@pytest.fixture
def now() -> datetime:
    return datetime(2024, 3, 10, 14, 30, tzinfo=MSK)
