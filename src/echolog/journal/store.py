"""Entry store: the whole journal as one JSON array under one key.

Every save is a full snapshot overwrite, every load reads the full
snapshot back. Loading never raises: a missing key, unreadable storage
or a blob that is not a JSON array all come back as an empty journal.
"""

from __future__ import annotations

import json

from loguru import logger

from ..core.storage import BlobStore
from .models import DEFAULT_PLACE, Entry, entry_from_dict


def decode_json(raw: bytes | None, expected: type, label: str):
    """Parse *raw* as JSON of type *expected*, or return None.

    Shared by the entry and place stores: absent, undecodable and
    wrongly-shaped blobs are all "no data".
    """
    if raw is None:
        return None
    try:
        parsed = json.loads(raw.decode("utf-8"))
    except (ValueError, RecursionError) as e:
        logger.warning(f"Ignoring unreadable {label} blob: {e}")
        return None
    if not isinstance(parsed, expected):
        logger.warning(f"Ignoring {label} blob: expected a JSON {expected.__name__}, got {type(parsed).__name__}")
        return None
    return parsed


class EntryStore:
    """Load and save the full entry collection in a ``BlobStore``."""

    def __init__(self, storage: BlobStore, key: str = "ECHOLOG_ENTRIES_V1", default_place: str = DEFAULT_PLACE):
        self.storage = storage
        self.key = key
        self.default_place = default_place

    async def load(self) -> list[Entry]:
        """Return the persisted entries in stored order, or ``[]``."""
        try:
            raw = await self.storage.get(self.key)
        except Exception as e:
            logger.warning(f"Could not read journal from storage key '{self.key}': {e}")
            return []

        records = decode_json(raw, list, "journal")
        if records is None:
            return []

        entries: list[Entry] = []
        seen: set[str] = set()
        for index, record in enumerate(records):
            try:
                entry = entry_from_dict(record, self.default_place)
            except (TypeError, ValueError, ArithmeticError) as e:
                logger.warning(f"Skipping malformed journal record #{index}: {e}")
                continue
            if entry.id in seen:
                logger.warning(f"Skipping duplicate journal record id {entry.id!r}")
                continue
            seen.add(entry.id)
            entries.append(entry)
        return entries

    async def save(self, entries: list[Entry]) -> bool:
        """Overwrite the stored snapshot with *entries*.

        Returns:
            True on success, False if serialization or the write failed.
        """
        try:
            payload = json.dumps([entry.to_dict() for entry in entries], ensure_ascii=False).encode("utf-8")
            await self.storage.put(self.key, payload)
        except Exception as e:
            logger.warning(f"Failed to save journal ({len(entries)} entries): {e}")
            return False
        logger.debug(f"Saved journal: {len(entries)} entries, {len(payload)} bytes")
        return True
