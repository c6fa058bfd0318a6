"""Journal entries, their persistence and the engine that manages them.

Provides the entry model (typed and recorded variants), an EntryStore
that keeps the whole journal as one JSON snapshot, a PlaceStore for
remembered place names, the capture collaborators, and JournalEngine.
"""

from .capture import AudioRecorder, CaptureSession, CaptureState, FixedLocation, LocationProvider, NoLocation
from .config import JournalConfig
from .engine import JournalEngine
from .models import (
    DEFAULT_PLACE,
    AudioInfo,
    CaptureResult,
    Coordinates,
    Entry,
    RecordedEntry,
    Transcript,
    TypedEntry,
    entry_from_dict,
    format_timestamp,
    normalize_place,
)
from .places import PlaceStore
from .store import EntryStore

__all__ = [
    "DEFAULT_PLACE",
    "AudioInfo",
    "AudioRecorder",
    "CaptureResult",
    "CaptureSession",
    "CaptureState",
    "Coordinates",
    "Entry",
    "EntryStore",
    "FixedLocation",
    "JournalConfig",
    "JournalEngine",
    "LocationProvider",
    "NoLocation",
    "PlaceStore",
    "RecordedEntry",
    "Transcript",
    "TypedEntry",
    "entry_from_dict",
    "format_timestamp",
    "normalize_place",
]
