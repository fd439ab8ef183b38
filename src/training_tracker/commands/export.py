"""Export command."""

import json

import click

from .base import async_command, echo_success, ensure_initialized, export_import_service


@click.command()
@click.option("--program", "-p", "program_id", help="Export only this program")
@click.option("--no-logs", is_flag=True, help="Leave out workout logs (program export only)")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, writable=True),
    help="Write to file instead of stdout",
)
@click.pass_context
@async_command
async def export(ctx, program_id: str | None, no_logs: bool, output: str | None):
    """Export data as a JSON backup.

    By default the whole dataset is exported. The file can be restored
    later with 'training-tracker import'.

    Examples:
        # Full backup to a file
        training-tracker export -o backup.json

        # One program, without its logs
        training-tracker export --program <ID> --no-logs
    """
    ensure_initialized(ctx)
    service = export_import_service(ctx)

    if program_id:
        envelope = await service.export_program(program_id, include_logs=not no_logs)
    else:
        envelope = await service.export_all()

    content = json.dumps(envelope.to_dict(), indent=2)

    if output:
        with open(output, "w", encoding="utf-8") as f:
            f.write(content)
        echo_success(
            f"Exported {len(envelope.programs)} program(s), {len(envelope.levels)} level(s), "
            f"{len(envelope.moves)} move(s) and {len(envelope.logs)} log(s) to {output}"
        )
    else:
        click.echo(content)
