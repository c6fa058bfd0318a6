"""Journal engine: owns the entry collection and every change to it.

The engine keeps the journal in memory, newest first by insertion, and
mirrors it to an ``EntryStore`` after every mutation. The mirror is
best effort: a failed save is logged and published as an event, but the
in-memory change stands and the operation still reports success.

All mutations are expected to arrive from one event loop. Operations
await collaborators (location, storage) part-way through, so each one
re-reads the current collection after its awaits instead of working
from a copy taken before them. Two overlapping saves may race at the
storage layer; the later write wins.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import replace

from loguru import logger

from ..core.events import (
    JOURNAL_ENTRY_CREATED,
    JOURNAL_ENTRY_DELETED,
    JOURNAL_ENTRY_UPDATED,
    JOURNAL_LOADED,
    JOURNAL_SAVE_FAILED,
    JOURNAL_SAVED,
    Event,
    EventBus,
)
from ..core.exceptions import CaptureFailedError, EmptyContentError, EntryNotFoundError
from .capture import AudioRecorder, CaptureSession, CaptureState, LocationProvider
from .models import (
    DEFAULT_PLACE,
    AudioInfo,
    CaptureResult,
    Coordinates,
    Entry,
    RecordedEntry,
    Transcript,
    TypedEntry,
    normalize_place,
)
from .places import PlaceStore
from .store import EntryStore


def _now_ms() -> int:
    return int(time.time() * 1000)


class JournalEngine:
    """Create, edit, delete and list journal entries.

    Args:
        store: Where the journal is persisted.
        location: Position source for coordinate enrichment. None means
            coordinates are never available.
        recorder: Microphone for voice capture. None disables recording.
        places: Optional remembered-place map.
        events: Optional bus that receives mutation and save events.
        default_place: Place name used when none is given.
        clock: Returns the current time in epoch ms.
    """

    def __init__(
        self,
        store: EntryStore,
        location: LocationProvider | None = None,
        recorder: AudioRecorder | None = None,
        places: PlaceStore | None = None,
        events: EventBus | None = None,
        default_place: str = DEFAULT_PLACE,
        clock: Callable[[], int] | None = None,
    ):
        self.store = store
        self.location = location
        self.places = places
        self.events = events
        self.default_place = default_place
        self._clock = clock or _now_ms
        self._capture = CaptureSession(recorder) if recorder is not None else None
        self._entries: list[Entry] = []
        self._last_issued = 0

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_entries(self) -> list[Entry]:
        """Return the journal, newest first. The list is a copy."""
        return list(self._entries)

    def get(self, entry_id: str) -> Entry:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        raise EntryNotFoundError(entry_id)

    @property
    def capture_state(self) -> CaptureState:
        if self._capture is None:
            return CaptureState.IDLE
        return self._capture.state

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    async def load_from_disk(self) -> int:
        """Hydrate the journal from storage.

        A non-empty stored journal replaces the in-memory one; an empty
        or unreadable one leaves the in-memory journal untouched.

        Returns:
            Number of entries read from storage.
        """
        stored = await self.store.load()
        if self.places is not None:
            await self.places.load()

        if stored:
            self._entries = stored
            self._last_issued = max(self._last_issued, max(e.created_at for e in stored))
            logger.info(f"Loaded {len(stored)} journal entries")
        else:
            logger.info("No stored journal entries; keeping in-memory journal")

        await self._emit(JOURNAL_LOADED, count=len(stored))
        return len(stored)

    # ------------------------------------------------------------------
    # Capture flows
    # ------------------------------------------------------------------

    async def create_typed(self, place: str | None, content: str, enrich: bool = False) -> TypedEntry:
        """Add a typed entry at the top of the journal.

        Raises:
            EmptyContentError: If *content* is blank. Nothing is stored.
        """
        text = (content or "").strip()
        if not text:
            raise EmptyContentError("Entry content is empty")

        coords = await self._locate(enrich)
        place_name = self._resolve_place(place, coords)

        ts = self._next_timestamp()
        entry = TypedEntry(
            id=str(ts),
            created_at=ts,
            place_name=place_name,
            content=text,
            lat=coords.lat if coords else None,
            lng=coords.lng if coords else None,
        )
        await self._insert(entry)
        await self._remember_place(coords, place_name)
        return entry

    async def create_recorded(self, capture: CaptureResult, enrich: bool = False) -> RecordedEntry:
        """Add a voice entry built from a finished recording.

        Raises:
            CaptureFailedError: If the recording did not produce audio.
        """
        if not capture.ok:
            raise CaptureFailedError(capture.error or "Recording produced no audio")

        coords = await self._locate(enrich)
        place_name = self._resolve_place(None, coords)

        ts = self._next_timestamp()
        entry = RecordedEntry(
            id=str(ts),
            created_at=ts,
            place_name=place_name,
            content="",
            lat=coords.lat if coords else None,
            lng=coords.lng if coords else None,
            audio=AudioInfo(has_audio=True, local_path=capture.uri, duration_ms=capture.duration_ms),
            transcript=Transcript(),
        )
        await self._insert(entry)
        return entry

    async def start_capture(self) -> bool:
        """Begin a voice recording. See ``CaptureSession.start``."""
        if self._capture is None:
            logger.warning("Cannot start capture: no audio recorder configured")
            return False
        return await self._capture.start()

    async def stop_capture(self, enrich: bool = False) -> RecordedEntry | None:
        """Finish the current recording and turn it into an entry.

        Returns:
            The new entry, or None if nothing was recording or the
            capture failed. The journal is unchanged in both cases.
        """
        if self._capture is None or not self._capture.is_recording:
            logger.warning("Ignoring stop-capture request: not recording")
            return None

        result = await self._capture.stop()
        try:
            return await self.create_recorded(result, enrich)
        except CaptureFailedError as e:
            logger.warning(f"Discarding failed recording: {e}")
            return None

    # ------------------------------------------------------------------
    # Edit / delete
    # ------------------------------------------------------------------

    async def edit(self, entry_id: str, place: str | None, content: str, enrich: bool = False) -> Entry:
        """Change an entry's content and place, optionally refreshing coordinates.

        Coordinates are only replaced when a fresh lookup succeeds; a
        failed lookup keeps whatever the entry had. Audio and transcript
        blocks are never touched. The entry keeps its id and position.

        Raises:
            EmptyContentError: If *content* is blank.
            EntryNotFoundError: If no entry has *entry_id*.
        """
        text = (content or "").strip()
        if not text:
            raise EmptyContentError("Entry content is empty")
        self.get(entry_id)

        coords = await self._locate(enrich)

        # Re-resolve after the await: the entry may have been deleted meanwhile.
        index = self._index_of(entry_id)
        if index is None:
            raise EntryNotFoundError(entry_id)
        current = self._entries[index]

        place_name = normalize_place(place, self.default_place)
        if coords is None:
            coords = current.coordinates
        updated = replace(
            current,
            content=text,
            place_name=place_name,
            lat=coords.lat if coords else None,
            lng=coords.lng if coords else None,
        )

        self._entries[index] = updated
        logger.info(f"Updated journal entry {entry_id}")
        await self._emit(JOURNAL_ENTRY_UPDATED, id=entry_id)
        await self._mirror()
        await self._remember_place(coords, place_name)
        return updated

    async def delete(self, entry_id: str) -> None:
        """Remove the entry with *entry_id*; unknown ids are ignored."""
        index = self._index_of(entry_id)
        if index is None:
            logger.debug(f"Delete ignored: no entry {entry_id}")
            return

        del self._entries[index]
        logger.info(f"Deleted journal entry {entry_id}")
        await self._emit(JOURNAL_ENTRY_DELETED, id=entry_id)
        await self._mirror()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _index_of(self, entry_id: str) -> int | None:
        for i, entry in enumerate(self._entries):
            if entry.id == entry_id:
                return i
        return None

    def _next_timestamp(self) -> int:
        ts = max(int(self._clock()), self._last_issued + 1)
        taken = {entry.id for entry in self._entries}
        while str(ts) in taken:
            ts += 1
        self._last_issued = ts
        return ts

    def _resolve_place(self, place: str | None, coords: Coordinates | None) -> str:
        place_name = normalize_place(place, self.default_place)
        if place_name == self.default_place and coords is not None and self.places is not None:
            return self.places.lookup(coords) or place_name
        return place_name

    async def _locate(self, enrich: bool) -> Coordinates | None:
        if not enrich or self.location is None:
            return None
        try:
            coords = await self.location.current_position()
        except Exception as e:
            logger.warning(f"Location lookup failed: {e}")
            return None
        if coords is None:
            logger.info("Location unavailable; continuing without coordinates")
        return coords

    async def _insert(self, entry: Entry) -> None:
        self._entries.insert(0, entry)
        logger.info(f"Created journal entry {entry.id}")
        await self._emit(JOURNAL_ENTRY_CREATED, id=entry.id, recorded=entry.has_audio)
        await self._mirror()

    async def _remember_place(self, coords: Coordinates | None, place_name: str) -> None:
        if self.places is None or coords is None or place_name == self.default_place:
            return
        await self.places.remember(coords, place_name)

    async def _mirror(self) -> bool:
        """Write the current journal to storage. Failures are logged, never raised."""
        snapshot = list(self._entries)
        saved = await self.store.save(snapshot)
        if saved:
            await self._emit(JOURNAL_SAVED, count=len(snapshot))
        else:
            logger.warning("Journal changes are kept in memory but were not saved")
            await self._emit(JOURNAL_SAVE_FAILED, count=len(snapshot))
        return saved

    async def _emit(self, name: str, **payload) -> None:
        if self.events is not None:
            await self.events.emit(Event(name=name, payload=payload, source="journal"))
