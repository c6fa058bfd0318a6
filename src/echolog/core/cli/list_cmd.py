"""echolog list — show the journal, newest first."""

from __future__ import annotations

import click


@click.command(name="list")
@click.option("--show-coords", is_flag=True, help="Include a coordinates column.")
@click.pass_obj
def list_entries(config, show_coords: bool) -> None:
    """List journal entries, newest first."""
    from echolog.core.cli.common import build_engine, format_entry, run

    engine = build_engine(config)
    run(engine.load_from_disk())

    entries = engine.list_entries()
    if not entries:
        click.echo("No entries yet. Add one with 'echolog add'.")
        return

    click.echo(f"{len(entries)} entries")
    for entry in entries:
        click.echo(format_entry(entry, show_coords=show_coords))
