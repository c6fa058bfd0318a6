"""echolog record — register an audio file as a voice entry."""

from __future__ import annotations

from pathlib import Path

import click

from echolog.core.exceptions import CaptureFailedError
from echolog.journal import CaptureResult


@click.command()
@click.argument("audio_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--duration-ms", type=click.IntRange(min=0), default=None, help="Recording length in milliseconds.")
@click.option("--coords/--no-coords", default=None, help="Attach current coordinates.")
@click.pass_obj
def record(config, audio_path: Path, duration_ms: int | None, coords: bool | None) -> None:
    """Add a voice entry for an existing recording."""
    from echolog.core.cli.common import build_engine, default_enrich, format_entry, run

    engine = build_engine(config)
    enrich = default_enrich(config) if coords is None else coords
    capture = CaptureResult(uri=audio_path.resolve().as_uri(), duration_ms=duration_ms)

    async def _record():
        await engine.load_from_disk()
        return await engine.create_recorded(capture, enrich=enrich)

    try:
        entry = run(_record())
    except CaptureFailedError as e:
        raise click.ClickException(f"Recording failed: {e}")

    click.echo(format_entry(entry, show_coords=enrich))
