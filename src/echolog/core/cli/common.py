"""Shared setup logic for CLI commands."""

from __future__ import annotations

import asyncio
import os
from pathlib import Path

import click

from echolog.core.config import Config
from echolog.core.config_schema import EchologConfig
from echolog.core.exceptions import ConfigurationError
from echolog.core.storage import LocalStorage
from echolog.core.utils.logging import setup_logging
from echolog.journal import (
    Entry,
    EntryStore,
    FixedLocation,
    JournalConfig,
    JournalEngine,
    NoLocation,
    PlaceStore,
    format_timestamp,
)

ECHOLOG_DIR = Path.home() / ".echolog"
CONFIG_PATH = ECHOLOG_DIR / "config.yaml"


def load_config(config_file: str | None = None) -> Config:
    """Load config from *config_file* (default ~/.echolog/config.yaml)."""
    try:
        return Config(config_file=config_file or str(CONFIG_PATH))
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e


def validate_config(config: Config) -> EchologConfig:
    try:
        return config.validated()
    except ConfigurationError as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e


def configure_logging(config: Config) -> None:
    settings = validate_config(config)
    log_file = None
    if settings.logging.to_file:
        log_dir = settings.paths.log_dir or settings.paths.data_dir / "logs"
        os.makedirs(log_dir, exist_ok=True)
        log_file = os.path.join(log_dir, "echolog.log")
    setup_logging(level=settings.logging.level, log_file=log_file)


def build_engine(config: Config) -> JournalEngine:
    """Wire a JournalEngine to local storage according to *config*."""
    settings = validate_config(config)

    journal = JournalConfig.from_config(config)
    storage_dir = settings.paths.storage_dir or settings.paths.data_dir / "storage"
    storage = LocalStorage(base_path=str(storage_dir))

    if settings.location.lat is not None:
        location = FixedLocation(settings.location.lat, settings.location.lng)
    else:
        location = NoLocation()

    return JournalEngine(
        EntryStore(storage, key=journal.entries_key, default_place=journal.default_place),
        location=location,
        places=PlaceStore(storage, key=journal.places_key),
        default_place=journal.default_place,
    )


def default_enrich(config: Config) -> bool:
    return JournalConfig.from_config(config).enrich_location


def run(coro):
    """Run a coroutine to completion from a synchronous click command."""
    return asyncio.run(coro)


def format_entry(entry: Entry, show_coords: bool = False) -> str:
    """One listing line: time, place, content, optional coordinates, id."""
    if entry.content:
        text = entry.content.replace("\n", " ")
    elif entry.has_audio:
        duration = getattr(entry.audio, "duration_ms", None)
        text = f"(audio {duration / 1000:.1f}s)" if duration is not None else "(audio)"
    else:
        text = ""

    parts = [format_timestamp(entry.created_at), entry.place_name, text]
    if show_coords:
        coords = entry.coordinates
        parts.append(f"{coords.lat:.4f}, {coords.lng:.4f}" if coords else "-")
    parts.append(f"[{entry.id}]")
    return "  ".join(parts)
