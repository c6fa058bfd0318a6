"""Shared test fixtures for echolog."""

import asyncio
import os
import tempfile

import pytest

from echolog.core.storage import BlobStore, MemoryStorage, StorageError
from echolog.journal import CaptureResult, Coordinates


@pytest.fixture
def tmp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as d:
        yield d


@pytest.fixture
def tmp_config_file(tmp_dir):
    """Create a temporary YAML config file pointing all data into tmp_dir."""
    import yaml

    config_data = {
        "paths": {
            "data_dir": os.path.join(tmp_dir, "data"),
        },
        "journal": {
            "default_place": "Unknown place",
            "enrich_location": False,
        },
        "location": {"lat": 43.0, "lng": -79.0},
    }
    config_path = os.path.join(tmp_dir, "config.yaml")
    with open(config_path, "w") as f:
        yaml.dump(config_data, f)
    return config_path


class FailingStorage(BlobStore):
    """Blob store whose reads and/or writes always fail."""

    def __init__(self, fail_get: bool = False, fail_put: bool = True, **config):
        super().__init__(**config)
        self.fail_get = fail_get
        self.fail_put = fail_put
        self.inner = MemoryStorage()
        self.put_attempts = 0

    async def get(self, key):
        if self.fail_get:
            raise StorageError("storage offline")
        return await self.inner.get(key)

    async def put(self, key, data):
        self.put_attempts += 1
        if self.fail_put:
            raise StorageError("disk full")
        await self.inner.put(key, data)


class StubLocation:
    """Location provider returning a scripted sequence of answers.

    Each answer is a Coordinates, None (unavailable) or an exception to raise.
    The last answer repeats once the script runs out.
    """

    def __init__(self, *answers):
        self.answers = list(answers) or [None]
        self.calls = 0

    async def current_position(self):
        answer = self.answers[min(self.calls, len(self.answers) - 1)]
        self.calls += 1
        if isinstance(answer, Exception):
            raise answer
        return answer


class StubRecorder:
    """Audio recorder with configurable permission, start failure and result.

    With ``slow_permission`` the permission prompt yields to the event loop
    once before answering, like a real dialog would.
    """

    def __init__(self, allowed=True, start_error=None, result=None, stop_error=None, slow_permission=False):
        self.allowed = allowed
        self.slow_permission = slow_permission
        self.start_error = start_error
        self.result = result or CaptureResult(uri="file://a.m4a", duration_ms=4200)
        self.stop_error = stop_error
        self.starts = 0
        self.stops = 0

    async def request_permission(self):
        if self.slow_permission:
            await asyncio.sleep(0)
        return self.allowed

    async def start(self):
        self.starts += 1
        if self.start_error:
            raise self.start_error

    async def stop(self):
        self.stops += 1
        if self.stop_error:
            raise self.stop_error
        return self.result


class Clock:
    """Deterministic millisecond clock."""

    def __init__(self, start=1_700_000_000_000, step=1000):
        self.now = start
        self.step = step

    def __call__(self):
        current = self.now
        self.now += self.step
        return current


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def toronto():
    return Coordinates(43.0, -79.0)


@pytest.fixture
def failing_storage():
    """Storage that reads fine but rejects every write."""
    return FailingStorage(fail_put=True)


@pytest.fixture
def offline_storage():
    """Storage that can neither be read nor written."""
    return FailingStorage(fail_get=True, fail_put=True)


@pytest.fixture
def counting_storage():
    """Working storage that counts write attempts."""
    return FailingStorage(fail_put=False)


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def make_location():
    """Factory for scripted location providers."""
    return StubLocation


@pytest.fixture
def make_recorder():
    """Factory for scripted audio recorders."""
    return StubRecorder
