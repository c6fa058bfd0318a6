"""Tests for echolog.journal.capture — providers and CaptureSession."""

import asyncio

import pytest

from echolog.core.exceptions import CaptureStateError
from echolog.journal.capture import (
    AudioRecorder,
    CaptureSession,
    CaptureState,
    FixedLocation,
    LocationProvider,
    NoLocation,
)
from echolog.journal.models import CaptureResult, Coordinates


class TestProviders:
    @pytest.mark.asyncio
    async def test_no_location(self):
        assert await NoLocation().current_position() is None

    @pytest.mark.asyncio
    async def test_fixed_location(self):
        assert await FixedLocation(43.0, -79.0).current_position() == Coordinates(43.0, -79.0)

    def test_protocols(self, make_recorder):
        assert isinstance(NoLocation(), LocationProvider)
        assert isinstance(FixedLocation(1.0, 2.0), LocationProvider)
        assert isinstance(make_recorder(), AudioRecorder)


class TestCaptureSession:
    @pytest.mark.asyncio
    async def test_start_stop_cycle(self, make_recorder):
        recorder = make_recorder()
        session = CaptureSession(recorder)
        assert session.state is CaptureState.IDLE

        assert await session.start()
        assert session.is_recording

        result = await session.stop()
        assert result == CaptureResult(uri="file://a.m4a", duration_ms=4200)
        assert session.state is CaptureState.IDLE

    @pytest.mark.asyncio
    async def test_permission_denied_stays_idle(self, make_recorder):
        recorder = make_recorder(allowed=False)
        session = CaptureSession(recorder)
        assert not await session.start()
        assert session.state is CaptureState.IDLE
        assert recorder.starts == 0

    @pytest.mark.asyncio
    async def test_device_failure_stays_idle(self, make_recorder):
        session = CaptureSession(make_recorder(start_error=OSError("mic busy")))
        assert not await session.start()
        assert session.state is CaptureState.IDLE

    @pytest.mark.asyncio
    async def test_second_start_ignored(self, make_recorder):
        recorder = make_recorder()
        session = CaptureSession(recorder)
        assert await session.start()
        assert not await session.start()
        assert recorder.starts == 1
        assert session.is_recording

    @pytest.mark.asyncio
    async def test_overlapping_starts_open_device_once(self, make_recorder):
        recorder = make_recorder(slow_permission=True)
        session = CaptureSession(recorder)

        results = await asyncio.gather(session.start(), session.start())

        assert sorted(results) == [False, True]
        assert recorder.starts == 1
        assert session.is_recording

    @pytest.mark.asyncio
    async def test_denied_permission_releases_starting_state(self, make_recorder):
        session = CaptureSession(make_recorder(allowed=False, slow_permission=True))
        task = asyncio.ensure_future(session.start())
        await asyncio.sleep(0)
        assert session.state is CaptureState.STARTING
        assert not session.is_recording

        assert not await task
        assert session.state is CaptureState.IDLE

    @pytest.mark.asyncio
    async def test_cancelled_start_returns_to_idle(self, make_recorder):
        session = CaptureSession(make_recorder(slow_permission=True))
        task = asyncio.ensure_future(session.start())
        await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        assert session.state is CaptureState.IDLE

    @pytest.mark.asyncio
    async def test_stop_without_start_raises(self, make_recorder):
        session = CaptureSession(make_recorder())
        with pytest.raises(CaptureStateError):
            await session.stop()

    @pytest.mark.asyncio
    async def test_stop_failure_becomes_failed_result(self, make_recorder):
        session = CaptureSession(make_recorder(stop_error=RuntimeError("unload failed")))
        await session.start()
        result = await session.stop()
        assert not result.ok
        assert result.error == "unload failed"
        assert session.state is CaptureState.IDLE
