"""echolog add — write a typed entry."""

from __future__ import annotations

import click

from echolog.core.exceptions import EmptyContentError


@click.command()
@click.argument("content")
@click.option("--place", "-p", default=None, help="Where you are. Defaults to the configured place.")
@click.option("--coords/--no-coords", default=None, help="Attach current coordinates.")
@click.pass_obj
def add(config, content: str, place: str | None, coords: bool | None) -> None:
    """Add a typed entry to the top of the journal."""
    from echolog.core.cli.common import build_engine, default_enrich, format_entry, run

    engine = build_engine(config)
    enrich = default_enrich(config) if coords is None else coords

    async def _add():
        await engine.load_from_disk()
        return await engine.create_typed(place, content, enrich=enrich)

    try:
        entry = run(_add())
    except EmptyContentError:
        raise click.ClickException("Please type something first.")

    click.echo(format_entry(entry, show_coords=enrich))
