"""Level management commands."""

import click

from ..services import LevelInput
from .base import (
    async_command,
    authoring_service,
    echo_info,
    echo_success,
    ensure_initialized,
    format_table,
    truncate,
)


@click.group()
@click.pass_context
def levels(ctx):
    """Manage the ordered levels of a program."""
    ensure_initialized(ctx)


@levels.command(name="list")
@click.argument("program_id")
@click.pass_context
@async_command
async def list_levels(ctx, program_id: str):
    """List a program's levels in order."""
    service = authoring_service(ctx)
    await service.get_program(program_id)
    program_levels = await service.list_levels(program_id)

    if not program_levels:
        echo_info("This program has no levels yet")
        return

    rows = [
        [str(lv.order), lv.id, truncate(lv.name), lv.duration, str(lv.rest_days)]
        for lv in program_levels
    ]
    click.echo(format_table(["#", "ID", "Name", "Duration", "Rest days"], rows))


@levels.command()
@click.argument("program_id")
@click.argument("name")
@click.option("--order", "-o", type=int, help="Position (default: last)")
@click.option("--description", "-d")
@click.option("--duration")
@click.option("--rest-days", type=int)
@click.option("--notes")
@click.pass_context
@async_command
async def add(ctx, program_id, name, order, description, duration, rest_days, notes):
    """Add a level to a program."""
    level = await authoring_service(ctx).create_level(program_id, LevelInput(
        name=name,
        order=order,
        description=description,
        duration=duration,
        rest_days=rest_days,
        notes=notes,
    ))
    echo_success(f"Level '{level.name}' added at position {level.order} (ID: {level.id})")


@levels.command()
@click.argument("level_id")
@click.option("--name", "-n")
@click.option("--order", "-o", type=int, help="Move to this position")
@click.option("--description", "-d")
@click.option("--duration")
@click.option("--rest-days", type=int)
@click.option("--notes")
@click.pass_context
@async_command
async def update(ctx, level_id, name, order, description, duration, rest_days, notes):
    """Update a level, optionally moving it to a new position."""
    level = await authoring_service(ctx).update_level(level_id, LevelInput(
        name=name,
        order=order,
        description=description,
        duration=duration,
        rest_days=rest_days,
        notes=notes,
    ))
    echo_success(f"Level '{level.name}' is now at position {level.order}")


@levels.command()
@click.argument("level_id")
@click.pass_context
@async_command
async def delete(ctx, level_id: str):
    """Delete a level with its moves and logs."""
    await authoring_service(ctx).delete_level(level_id)
    echo_success(f"Level {level_id} deleted")


@levels.command()
@click.argument("level_id")
@click.pass_context
@async_command
async def duplicate(ctx, level_id: str):
    """Copy a level and its moves, right after the original."""
    tree = await authoring_service(ctx).duplicate_level(level_id)
    echo_success(f"Created '{tree.level.name}' at position {tree.level.order} (ID: {tree.level.id})")
