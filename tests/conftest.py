"""Shared fixtures for poolfinder tests."""

import os

# Keep test runs from writing log files
os.environ.setdefault("LOG_TO_FILE", "false")

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from poolfinder.models.base import FacilityRecord
from poolfinder.services.coordinator import SaveCoordinator
from poolfinder.services.gateway import PersistenceGateway
from poolfinder.services.history import VersionHistoryStore
from poolfinder.stores.base import FacilityStore
from poolfinder.stores.local import LocalFacilityStore


class TickingClock:
    """Clock that advances one second per call, for ordered timestamps."""

    def __init__(self, start: datetime = datetime(2024, 1, 1, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self) -> datetime:
        self.current = self.current + timedelta(seconds=1)
        return self.current


def make_record(facility_id: str = "pool-1", **overrides) -> FacilityRecord:
    """Build a facility record with sensible defaults."""
    data = {
        "id": facility_id,
        "name": f"Pool {facility_id}",
        "address": "서울특별시 송파구 올림픽로 424",
        "region": "서울",
        "location": {"latitude": 37.5207, "longitude": 127.1215},
        "free_swim_schedule": [
            {"day_class": "weekday", "start_time": "06:00", "end_time": "09:00"},
        ],
        "closed_days": {"kind": "structured", "policy": {"rules": []}},
    }
    data.update(overrides)
    return FacilityRecord.model_validate(data)


def failing_store(name: str = "postgres") -> AsyncMock:
    """Store whose every operation raises a connection error."""
    store = AsyncMock(spec=FacilityStore)
    store.name = name
    error = ConnectionError("connection refused")
    store.read_all.side_effect = error
    store.write.side_effect = error
    store.delete.side_effect = error
    store.append_snapshot.side_effect = error
    store.list_snapshots.side_effect = error
    return store


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def local_store():
    """In-memory local store."""
    return LocalFacilityStore(history_limit=100)


@pytest.fixture
def primary_store():
    """Second in-memory store standing in for the primary backend."""
    store = LocalFacilityStore(history_limit=None)
    store.name = "postgres"
    return store


@pytest.fixture
def gateway(primary_store, local_store):
    return PersistenceGateway(primary_store, local_store)


@pytest.fixture
def history(gateway, clock):
    return VersionHistoryStore(gateway, timeout_seconds=1.0, clock=clock)


@pytest.fixture
def coordinator(gateway, history, clock):
    return SaveCoordinator(gateway, history, clock=clock)
