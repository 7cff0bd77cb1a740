"""Pytest configuration and fixtures for PocketSync tests."""

import logging
import random
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from db.database import TranscriptStore
from device.simulator import BackgroundSyncSimulator
from device.status import DeviceStatusRegistry
from server.commands import CommandFacade

logging.basicConfig(level=logging.INFO)


class FakeClock:
    """Deterministic clock: every call advances one second."""

    def __init__(self, start: datetime | None = None):
        self.current = start or datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


@pytest.fixture
def temp_data_dir():
    """Create temporary directory for test data."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield temp_dir


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(temp_data_dir, clock):
    s = TranscriptStore(Path(temp_data_dir) / "test.db", clock=clock)
    yield s
    s.close()


@pytest.fixture
def registry(clock):
    return DeviceStatusRegistry(clock=clock, rng=random.Random(42))


@pytest.fixture
def simulator(store, registry, clock):
    return BackgroundSyncSimulator(store, registry, interval=0.01,
                                   rng=random.Random(7), clock=clock)


@pytest.fixture
def commands(store, registry):
    return CommandFacade(store, registry)
