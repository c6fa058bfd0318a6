"""echolog edit — change an existing entry."""

from __future__ import annotations

import click

from echolog.core.exceptions import EmptyContentError, EntryNotFoundError


@click.command()
@click.argument("entry_id")
@click.argument("content")
@click.option("--place", "-p", default=None, help="New place name. Defaults to the configured place.")
@click.option("--coords/--no-coords", default=None, help="Refresh coordinates; existing ones are kept if unavailable.")
@click.pass_obj
def edit(config, entry_id: str, content: str, place: str | None, coords: bool | None) -> None:
    """Replace the content and place of ENTRY_ID."""
    from echolog.core.cli.common import build_engine, default_enrich, format_entry, run

    engine = build_engine(config)
    enrich = default_enrich(config) if coords is None else coords

    async def _edit():
        await engine.load_from_disk()
        return await engine.edit(entry_id, place, content, enrich=enrich)

    try:
        entry = run(_edit())
    except EmptyContentError:
        raise click.ClickException("Please type something first.")
    except EntryNotFoundError as e:
        raise click.ClickException(str(e))

    click.echo(format_entry(entry, show_coords=enrich))
