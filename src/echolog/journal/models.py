"""Journal record types.

An entry is either typed (text the user wrote) or recorded (a voice
note). Both share identity, timestamp, place and optional coordinates;
recorded entries additionally carry write-once audio and transcript
blocks. Entries are immutable; edits produce a replacement via
``dataclasses.replace`` which re-runs validation.

The dict form produced by ``to_dict`` is the persisted wire shape:
camelCase keys, optional fields omitted when absent.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from ..core.exceptions import InvalidEntryError

DEFAULT_PLACE = "Unknown place"
NO_TRANSCRIPT_ENGINE = "none"


def normalize_place(place: str | None, default: str = DEFAULT_PLACE) -> str:
    """Trim *place*, falling back to *default* when nothing is left."""
    if place is None:
        return default
    trimmed = str(place).strip()
    return trimmed or default


def _whole_ms(value: Any, field: str) -> int:
    """Coerce a persisted millisecond value to int, rejecting NaN and infinities."""
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError) as e:
        raise InvalidEntryError(f"{field} must be a whole number of milliseconds, got {value!r}") from e


def format_timestamp(ms: int) -> str:
    """Render epoch milliseconds as local ``YYYY-MM-DD HH:MM``."""
    return datetime.fromtimestamp(ms / 1000).strftime("%Y-%m-%d %H:%M")


@dataclass(frozen=True)
class Coordinates:
    """A latitude/longitude pair in decimal degrees."""

    lat: float
    lng: float

    def __post_init__(self):
        for name in ("lat", "lng"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
                raise InvalidEntryError(f"{name} must be a finite number, got {value!r}")


@dataclass(frozen=True)
class CaptureResult:
    """What the audio collaborator hands back when a recording stops.

    Attributes:
        uri: Local resource handle of the recording, None if capture failed.
        duration_ms: Recording length when the device reports it.
        error: Failure reason reported by the device, if any.
    """

    uri: str | None = None
    duration_ms: int | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and bool(self.uri)


@dataclass(frozen=True)
class AudioInfo:
    has_audio: bool = True
    local_path: str | None = None
    duration_ms: int | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"hasAudio": self.has_audio}
        if self.local_path is not None:
            data["localPath"] = self.local_path
        if self.duration_ms is not None:
            data["durationMs"] = self.duration_ms
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AudioInfo:
        duration = data.get("durationMs")
        return cls(
            has_audio=bool(data.get("hasAudio", False)),
            local_path=data.get("localPath"),
            duration_ms=_whole_ms(duration, "durationMs") if duration is not None else None,
        )


@dataclass(frozen=True)
class Transcript:
    """Transcript slot for a recorded entry.

    Nothing in this package fills it in; ``engine`` stays ``"none"``
    until a transcription collaborator exists.
    """

    engine: str = NO_TRANSCRIPT_ENGINE
    text: str | None = None
    confidence: float | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"engine": self.engine}
        if self.text is not None:
            data["text"] = self.text
        if self.confidence is not None:
            data["confidence"] = self.confidence
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Transcript:
        confidence = data.get("confidence")
        return cls(
            engine=data.get("engine") or NO_TRANSCRIPT_ENGINE,
            text=data.get("text"),
            confidence=float(confidence) if confidence is not None else None,
        )


@dataclass(frozen=True)
class Entry:
    """Fields common to every journal entry.

    Attributes:
        id: Unique id, the creation time in epoch ms as a string.
        created_at: Creation time in epoch ms. Never changes.
        place_name: Where the entry was made; never blank.
        content: The entry text.
        lat: Latitude, present only together with ``lng``.
        lng: Longitude, present only together with ``lat``.
    """

    id: str
    created_at: int
    place_name: str = DEFAULT_PLACE
    content: str = ""
    lat: float | None = None
    lng: float | None = None

    def __post_init__(self):
        if not isinstance(self.id, str) or not self.id:
            raise InvalidEntryError("Entry id must be a non-empty string")
        if not isinstance(self.place_name, str) or not self.place_name.strip():
            raise InvalidEntryError("place_name must not be blank")
        if not isinstance(self.content, str):
            raise InvalidEntryError("content must be a string")
        if (self.lat is None) != (self.lng is None):
            raise InvalidEntryError("lat and lng must be both present or both absent")
        if self.lat is not None:
            Coordinates(self.lat, self.lng)

    @property
    def coordinates(self) -> Coordinates | None:
        if self.lat is None:
            return None
        return Coordinates(self.lat, self.lng)

    @property
    def has_audio(self) -> bool:
        return False

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "createdAt": self.created_at,
            "placeName": self.place_name,
            "content": self.content,
        }
        if self.lat is not None:
            data["lat"] = self.lat
            data["lng"] = self.lng
        return data

    def __repr__(self) -> str:
        preview = self.content[:30] + "..." if len(self.content) > 30 else self.content
        return f"{type(self).__name__}(id='{self.id}', place='{self.place_name}', content='{preview}')"


@dataclass(frozen=True, repr=False)
class TypedEntry(Entry):
    """An entry written as text. Content is always non-blank."""

    def __post_init__(self):
        super().__post_init__()
        if not self.content.strip():
            raise InvalidEntryError("A typed entry needs non-empty content")


@dataclass(frozen=True, repr=False)
class RecordedEntry(Entry):
    """A voice entry. Content stays empty until someone edits it."""

    audio: AudioInfo = AudioInfo()
    transcript: Transcript | None = Transcript()

    def __post_init__(self):
        super().__post_init__()
        if not self.content.strip() and not self.audio.has_audio:
            raise InvalidEntryError("An entry without audio needs non-empty content")

    @property
    def has_audio(self) -> bool:
        return self.audio.has_audio

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["audio"] = self.audio.to_dict()
        if self.transcript is not None:
            data["transcript"] = self.transcript.to_dict()
        return data


def entry_from_dict(data: dict[str, Any], default_place: str = DEFAULT_PLACE) -> Entry:
    """Build the right Entry variant from its persisted dict form.

    Tolerates null for any optional field and normalizes a blank place.

    Raises:
        InvalidEntryError: If the record is not an object or breaks an invariant.
    """
    if not isinstance(data, dict):
        raise InvalidEntryError(f"Expected an object, got {type(data).__name__}")

    raw_id = data.get("id")
    if raw_id is None or raw_id == "":
        raise InvalidEntryError("Record has no id")

    if data.get("createdAt") is not None:
        created_at = _whole_ms(data["createdAt"], "createdAt")
    else:
        try:
            created_at = int(str(raw_id))
        except ValueError as e:
            raise InvalidEntryError(f"Record {raw_id!r} has no usable createdAt") from e

    common: dict[str, Any] = {
        "id": str(raw_id),
        "created_at": created_at,
        "place_name": normalize_place(data.get("placeName"), default_place),
        "content": data.get("content") or "",
        "lat": data.get("lat"),
        "lng": data.get("lng"),
    }

    audio = data.get("audio")
    if isinstance(audio, dict):
        transcript = data.get("transcript")
        return RecordedEntry(
            **common,
            audio=AudioInfo.from_dict(audio),
            transcript=Transcript.from_dict(transcript) if isinstance(transcript, dict) else None,
        )
    return TypedEntry(**common)
