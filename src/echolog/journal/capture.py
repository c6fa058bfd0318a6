"""Capture-time collaborators and the recording state machine.

The journal engine never talks to hardware. It depends on two small
protocols instead:

- ``LocationProvider`` answers "where am I?" with coordinates or None.
- ``AudioRecorder`` starts and stops a recording and reports the result.

``CaptureSession`` wraps a recorder with the Idle/Recording state
machine. A session is Starting while it waits on permission and the
device; a start that arrives then, or while recording, is ignored. A
failed start leaves the session idle and a stop always returns to idle.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Protocol, runtime_checkable

from loguru import logger

from ..core.exceptions import CaptureStateError
from .models import CaptureResult, Coordinates


@runtime_checkable
class LocationProvider(Protocol):
    """Source of the device's current position."""

    async def current_position(self) -> Coordinates | None:
        """Return coordinates, or None if permission is denied or the lookup failed."""
        ...


@runtime_checkable
class AudioRecorder(Protocol):
    """Microphone access for voice entries."""

    async def request_permission(self) -> bool:
        """Return True if recording is allowed."""
        ...

    async def start(self) -> None:
        """Begin recording. Raises on device failure."""
        ...

    async def stop(self) -> CaptureResult:
        """Finish recording and report where the audio landed."""
        ...


class NoLocation:
    """Location provider for setups without positioning: always unavailable."""

    async def current_position(self) -> Coordinates | None:
        return None


class FixedLocation:
    """Location provider that always reports the same coordinates."""

    def __init__(self, lat: float, lng: float):
        self.coordinates = Coordinates(lat, lng)

    async def current_position(self) -> Coordinates | None:
        return self.coordinates


class CaptureState(StrEnum):
    IDLE = "idle"
    STARTING = "starting"
    RECORDING = "recording"


class CaptureSession:
    """Idle/Starting/Recording state machine around an ``AudioRecorder``."""

    def __init__(self, recorder: AudioRecorder):
        self.recorder = recorder
        self.state = CaptureState.IDLE

    @property
    def is_recording(self) -> bool:
        return self.state is CaptureState.RECORDING

    async def start(self) -> bool:
        """Start recording.

        Returns:
            True if the session is now recording because of this call.
            False if permission was refused, the device failed, or a
            recording was already starting or in progress (the extra
            start is ignored).
        """
        if self.state is not CaptureState.IDLE:
            logger.warning(f"Ignoring start-capture request: already {self.state}")
            return False

        # Claimed before the first await so an overlapping start sees it
        self.state = CaptureState.STARTING
        started = False
        try:
            started = await self._open_device()
        finally:
            self.state = CaptureState.RECORDING if started else CaptureState.IDLE
        return started

    async def _open_device(self) -> bool:
        try:
            allowed = await self.recorder.request_permission()
        except Exception as e:
            logger.warning(f"Microphone permission request failed: {e}")
            return False
        if not allowed:
            logger.warning("Microphone permission denied")
            return False

        try:
            await self.recorder.start()
        except Exception as e:
            logger.warning(f"Starting audio capture failed: {e}")
            return False
        return True

    async def stop(self) -> CaptureResult:
        """Stop recording and return to idle.

        Device errors come back as a failed ``CaptureResult`` rather than
        an exception.

        Raises:
            CaptureStateError: If no recording is in progress.
        """
        if not self.is_recording:
            raise CaptureStateError("stop requested while not recording")

        try:
            result = await self.recorder.stop()
        except Exception as e:
            logger.warning(f"Stopping audio capture failed: {e}")
            result = CaptureResult(error=str(e) or type(e).__name__)
        finally:
            self.state = CaptureState.IDLE
        return result
