"""Move management commands."""

import click

from ..models.program import MoveType
from ..services import MoveInput
from .base import (
    async_command,
    authoring_service,
    echo_info,
    echo_success,
    ensure_initialized,
    format_table,
    truncate,
)

MOVE_TYPES = click.Choice([t.value for t in MoveType])


def _equipment(value: str | None) -> list[str] | None:
    if value is None:
        return None
    return [item.strip() for item in value.split(",") if item.strip()]


def move_options(f):
    """Options shared by 'moves add' and 'moves update'."""
    options = [
        click.option("--order", "-o", type=int, help="Position within the level"),
        click.option("--description", "-d"),
        click.option("--type", "move_type", type=MOVE_TYPES),
        click.option("--sets", "target_sets", type=int),
        click.option("--reps", "target_reps", help="e.g. '8-12'"),
        click.option("--weight", "target_weight"),
        click.option("--time", "target_time"),
        click.option("--rest", "rest_between_sets"),
        click.option("--equipment", help="Comma-separated list"),
        click.option("--notes"),
    ]
    for option in reversed(options):
        f = option(f)
    return f


@click.group()
@click.pass_context
def moves(ctx):
    """Manage the ordered moves of a level."""
    ensure_initialized(ctx)


@moves.command(name="list")
@click.argument("level_id")
@click.pass_context
@async_command
async def list_moves(ctx, level_id: str):
    """List a level's moves in order."""
    level_moves = await authoring_service(ctx).list_moves(level_id)

    if not level_moves:
        echo_info("No moves found for this level")
        return

    rows = [
        [
            str(m.order),
            m.id,
            truncate(m.name),
            m.type.value,
            str(m.target_sets or ""),
            m.target_reps or "",
        ]
        for m in level_moves
    ]
    click.echo(format_table(["#", "ID", "Name", "Type", "Sets", "Reps"], rows))


@moves.command()
@click.argument("level_id")
@click.argument("name")
@move_options
@click.pass_context
@async_command
async def add(ctx, level_id, name, equipment, move_type, **fields):
    """Add a move to a level."""
    move = await authoring_service(ctx).create_move(
        level_id,
        MoveInput(name=name, type=move_type, equipment=_equipment(equipment), **fields),
    )
    echo_success(f"Move '{move.name}' added at position {move.order} (ID: {move.id})")


@moves.command()
@click.argument("move_id")
@click.option("--name", "-n")
@move_options
@click.pass_context
@async_command
async def update(ctx, move_id, name, equipment, move_type, **fields):
    """Update a move, optionally moving it to a new position."""
    move = await authoring_service(ctx).update_move(
        move_id,
        MoveInput(name=name, type=move_type, equipment=_equipment(equipment), **fields),
    )
    echo_success(f"Move '{move.name}' is now at position {move.order}")


@moves.command()
@click.argument("move_id")
@click.pass_context
@async_command
async def delete(ctx, move_id: str):
    """Delete a move. Logs that referenced it are kept."""
    await authoring_service(ctx).delete_move(move_id)
    echo_success(f"Move {move_id} deleted")


@moves.command()
@click.argument("move_id")
@click.pass_context
@async_command
async def duplicate(ctx, move_id: str):
    """Copy a move, right after the original."""
    move = await authoring_service(ctx).duplicate_move(move_id)
    echo_success(f"Created '{move.name}' at position {move.order} (ID: {move.id})")
