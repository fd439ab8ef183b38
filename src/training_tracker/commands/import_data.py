"""Import command."""

import click

from ..models.export import ImportMode
from .base import (
    async_command,
    echo_info,
    echo_success,
    ensure_initialized,
    export_import_service,
    format_table,
)


@click.command(name="import")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--mode",
    "-m",
    type=click.Choice([m.value for m in ImportMode]),
    default=ImportMode.MERGE.value,
    show_default=True,
    help="merge keeps the newer copy of each record; replace wipes existing data first",
)
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation for replace mode")
@click.pass_context
@async_command
async def import_data(ctx, path: str, mode: str, yes: bool):
    """Restore data from a JSON export.

    Nothing is written unless the whole file is valid.

    Example:
        training-tracker import backup.json --mode replace
    """
    ensure_initialized(ctx)

    if mode == ImportMode.REPLACE.value and not yes:
        if not click.confirm("Replace ALL existing data with the contents of this file?"):
            echo_info("Cancelled")
            return

    with open(path, encoding="utf-8") as f:
        text = f.read()

    summary = await export_import_service(ctx).import_json(text, mode)

    counts = summary.to_dict()
    rows = [[name, str(count), str(summary.skipped.get(name, 0))] for name, count in counts.items()]
    click.echo(format_table(["Collection", "Written", "Kept existing"], rows))
    echo_success(f"Imported {summary.total} record(s) ({mode})")
