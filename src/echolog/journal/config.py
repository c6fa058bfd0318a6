"""Configuration dataclass for the journal engine and its stores.

A pure data container with sensible defaults. Build it from constructor
args, or from a loaded ``Config`` via ``JournalConfig.from_config``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .models import DEFAULT_PLACE

if TYPE_CHECKING:
    from ..core.config import Config


@dataclass
class JournalConfig:
    """Settings for journal persistence and capture.

    Attributes:
        entries_key: Blob-store key holding the entry array.
        places_key: Blob-store key holding the remembered place map.
        default_place: Place name used when the user gives none.
        enrich_location: Whether front ends request coordinates by default.
    """

    entries_key: str = "ECHOLOG_ENTRIES_V1"
    places_key: str = "ECHOLOG_PLACE_MAP_V1"
    default_place: str = DEFAULT_PLACE
    enrich_location: bool = False

    @classmethod
    def from_config(cls, config: Config) -> JournalConfig:
        section = config.validated().journal
        return cls(
            entries_key=section.entries_key,
            places_key=section.places_key,
            default_place=section.default_place,
            enrich_location=section.enrich_location,
        )
