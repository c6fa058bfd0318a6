"""Remembered place names keyed by rounded coordinates.

When the user names a place while coordinates are attached, the name is
kept so the next entry captured at the same spot can be labelled
automatically. The map is one JSON object under one blob-store key.
"""

from __future__ import annotations

import json

from loguru import logger

from ..core.storage import BlobStore
from .models import Coordinates
from .store import decode_json

# 3 decimals is roughly 100 m at the equator
_PRECISION = 3


def coordinate_key(coords: Coordinates) -> str:
    return f"{coords.lat:.{_PRECISION}f},{coords.lng:.{_PRECISION}f}"


class PlaceStore:
    """In-memory place map mirrored to a ``BlobStore``."""

    def __init__(self, storage: BlobStore, key: str = "ECHOLOG_PLACE_MAP_V1"):
        self.storage = storage
        self.key = key
        self._places: dict[str, str] = {}

    @property
    def places(self) -> dict[str, str]:
        return dict(self._places)

    async def load(self) -> dict[str, str]:
        """Replace the in-memory map with the stored one (``{}`` on any problem)."""
        try:
            raw = await self.storage.get(self.key)
        except Exception as e:
            logger.warning(f"Could not read place map from storage key '{self.key}': {e}")
            raw = None

        parsed = decode_json(raw, dict, "place map") or {}
        self._places = {
            str(k): v.strip() for k, v in parsed.items() if isinstance(v, str) and v.strip()
        }
        return self.places

    async def save(self) -> bool:
        try:
            payload = json.dumps(self._places, ensure_ascii=False, sort_keys=True).encode("utf-8")
            await self.storage.put(self.key, payload)
        except Exception as e:
            logger.warning(f"Failed to save place map: {e}")
            return False
        return True

    def lookup(self, coords: Coordinates) -> str | None:
        return self._places.get(coordinate_key(coords))

    async def remember(self, coords: Coordinates, place_name: str) -> bool:
        """Associate *place_name* with *coords*; persists only when something changed."""
        key = coordinate_key(coords)
        if self._places.get(key) == place_name:
            return True
        self._places[key] = place_name
        return await self.save()
