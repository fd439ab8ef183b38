"""Workout log commands."""

import click

from ..services import LogInput
from .base import (
    async_command,
    echo_info,
    echo_success,
    ensure_initialized,
    format_table,
    log_service,
)


@click.group()
@click.pass_context
def logs(ctx):
    """Record and review workouts."""
    ensure_initialized(ctx)


@logs.command(name="list")
@click.option("--program", "program_id", help="Only logs for this program")
@click.option("--level", "level_id", help="Only logs for this level")
@click.pass_context
@async_command
async def list_logs(ctx, program_id: str | None, level_id: str | None):
    """List logged workouts by date."""
    entries = await log_service(ctx).list_logs(program_id=program_id, level_id=level_id)

    if not entries:
        echo_info("No workouts logged")
        return

    rows = [
        [
            log.date[:10],
            log.id,
            "yes" if log.completed else "no",
            str(log.perceived_effort or ""),
            log.notes,
        ]
        for log in entries
    ]
    click.echo(format_table(["Date", "ID", "Done", "RPE", "Notes"], rows))


@logs.command()
@click.argument("program_id")
@click.argument("level_id")
@click.option("--move", "move_id", help="Move the log is for")
@click.option("--date", help="ISO date (default: now)")
@click.option("--sets", "actual_sets", type=int)
@click.option("--reps", "actual_reps")
@click.option("--weight", "actual_weight")
@click.option("--rpe", "perceived_effort", type=click.IntRange(1, 10))
@click.option("--notes")
@click.option("--completed/--not-completed", default=True)
@click.pass_context
@async_command
async def add(ctx, program_id, level_id, **fields):
    """Log a workout for a program level."""
    log = await log_service(ctx).create_log(
        LogInput(program_id=program_id, level_id=level_id, **fields)
    )
    echo_success(f"Workout logged (ID: {log.id})")


@logs.command()
@click.argument("log_id")
@click.pass_context
@async_command
async def delete(ctx, log_id: str):
    """Delete a logged workout."""
    await log_service(ctx).delete_log(log_id)
    echo_success(f"Log {log_id} deleted")
