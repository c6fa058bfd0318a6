"""Echolog CLI — entry point for add, record, edit, delete and list commands."""

import click

from echolog import __version__

from .common import CONFIG_PATH, configure_logging, load_config


@click.group()
@click.version_option(version=__version__, package_name="echolog")
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False),
    default=str(CONFIG_PATH),
    show_default=True,
    help="YAML or JSON config file.",
)
@click.pass_context
def main(ctx: click.Context, config_file: str) -> None:
    """Echolog — a place-aware personal journal."""
    config = load_config(config_file)
    configure_logging(config)
    ctx.obj = config


# Register subcommands
from .add_cmd import add
from .delete_cmd import delete
from .edit_cmd import edit
from .list_cmd import list_entries
from .record_cmd import record

main.add_command(add)
main.add_command(record)
main.add_command(edit)
main.add_command(delete)
main.add_command(list_entries)
