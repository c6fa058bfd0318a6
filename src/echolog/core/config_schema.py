"""Pydantic models for config validation.

Opt-in schema validation for ``Config.config_data``.  Call
``Config.validated()`` to obtain a typed, validated ``EchologConfig``
instance.  Existing dict-based access continues to work unchanged.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator, model_validator


class PathsConfig(BaseModel):
    """File-system paths used by the application."""

    data_dir: Path
    storage_dir: Path | None = None
    log_dir: Path | None = None

    @field_validator("data_dir", "storage_dir", "log_dir", mode="before")
    @classmethod
    def _expand_user(cls, v: Any) -> Any:
        if isinstance(v, str):
            return Path(v).expanduser()
        if isinstance(v, Path):
            return v.expanduser()
        return v


class JournalSection(BaseModel):
    """Storage keys and capture defaults for the journal."""

    entries_key: str = "ECHOLOG_ENTRIES_V1"
    places_key: str = "ECHOLOG_PLACE_MAP_V1"
    default_place: str = "Unknown place"
    enrich_location: bool = False

    @field_validator("entries_key", "places_key", "default_place")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v.strip()


class LocationConfig(BaseModel):
    """Fixed coordinates reported by the command-line location provider."""

    lat: float | None = None
    lng: float | None = None

    @model_validator(mode="after")
    def _paired(self) -> LocationConfig:
        if (self.lat is None) != (self.lng is None):
            raise ValueError("location.lat and location.lng must be set together")
        if self.lat is not None and not -90.0 <= self.lat <= 90.0:
            raise ValueError(f"location.lat out of range: {self.lat}")
        if self.lng is not None and not -180.0 <= self.lng <= 180.0:
            raise ValueError(f"location.lng out of range: {self.lng}")
        return self


class LoggingConfig(BaseModel):
    """Log level and optional file sink toggle."""

    level: str = "WARNING"
    to_file: bool = False

    @field_validator("level")
    @classmethod
    def _known_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level {v!r}")
        return level


class EchologConfig(BaseModel):
    """Root configuration model.

    Uses ``extra="allow"`` so consumers can bolt on custom sections
    without touching this schema.
    """

    model_config = ConfigDict(extra="allow")

    paths: PathsConfig = PathsConfig(data_dir=Path("~/.echolog-data"))
    journal: JournalSection = JournalSection()
    location: LocationConfig = LocationConfig()
    logging: LoggingConfig = LoggingConfig()
