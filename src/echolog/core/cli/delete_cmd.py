"""echolog delete — remove an entry after confirmation."""

from __future__ import annotations

import click


@click.command()
@click.argument("entry_id")
@click.option("--yes", "-y", is_flag=True, help="Skip the confirmation prompt.")
@click.pass_obj
def delete(config, entry_id: str, yes: bool) -> None:
    """Delete ENTRY_ID from the journal."""
    from echolog.core.cli.common import build_engine, run

    engine = build_engine(config)

    async def _delete():
        await engine.load_from_disk()
        ids = {entry.id for entry in engine.list_entries()}
        if entry_id not in ids:
            return False
        if not yes and not click.confirm("Delete this entry?", default=False):
            return None
        await engine.delete(entry_id)
        return True

    deleted = run(_delete())
    if deleted is None:
        click.echo("Cancelled.")
    elif deleted:
        click.echo(f"Deleted {entry_id}.")
    else:
        click.echo(f"No entry with id {entry_id!r}; nothing to delete.")
