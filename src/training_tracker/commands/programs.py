"""Program management commands."""

import click

from ..models.program import Difficulty
from ..services import ProgramInput
from .base import (
    async_command,
    authoring_service,
    echo_info,
    echo_success,
    ensure_initialized,
    format_table,
    truncate,
)

DIFFICULTIES = click.Choice([d.value for d in Difficulty])


def _tags(value: str | None) -> list[str] | None:
    if value is None:
        return None
    return [tag.strip() for tag in value.split(",") if tag.strip()]


@click.group()
@click.pass_context
def programs(ctx):
    """Create, edit and remove training programs."""
    ensure_initialized(ctx)


@programs.command(name="list")
@click.pass_context
@async_command
async def list_programs(ctx):
    """List all programs."""
    all_programs = await authoring_service(ctx).list_programs()

    if not all_programs:
        echo_info("No programs found. Create one with 'training-tracker programs create'")
        return

    rows = [
        [p.id, truncate(p.name), p.difficulty.value, ", ".join(p.tags), p.created_at[:10]]
        for p in all_programs
    ]
    click.echo()
    click.echo(format_table(["ID", "Name", "Difficulty", "Tags", "Created"], rows))
    click.echo()
    click.echo(f"Total: {len(all_programs)} program(s)")


@programs.command()
@click.argument("program_id")
@click.pass_context
@async_command
async def show(ctx, program_id: str):
    """Show a program with its levels and moves."""
    tree = await authoring_service(ctx).get_program_tree(program_id)
    program = tree.program

    click.echo()
    click.echo("=" * 60)
    click.echo(f"Program: {program.name} (ID: {program.id})")
    click.echo("=" * 60)
    if program.description:
        click.echo(f"Description: {program.description}")
    if program.goal:
        click.echo(f"Goal: {program.goal}")
    if program.duration:
        click.echo(f"Duration: {program.duration}")
    click.echo(f"Difficulty: {program.difficulty.value}")
    click.echo()

    for level in tree.levels:
        click.echo(f"{level.order}. {level.name}")
        for move in (m for m in tree.moves if m.level_id == level.id):
            target = f" - {move.target_sets}x{move.target_reps}" if move.target_sets and move.target_reps else ""
            click.echo(f"    {move.order}. {move.name} [{move.type.value}]{target}")


@programs.command()
@click.argument("name")
@click.option("--description", "-d", help="What the program is about")
@click.option("--goal", "-g", help="Training goal")
@click.option("--duration", help="e.g. '8 weeks'")
@click.option("--difficulty", type=DIFFICULTIES, help="Program difficulty")
@click.option("--tags", help="Comma-separated tags")
@click.option("--color", help="Display color")
@click.pass_context
@async_command
async def create(ctx, name, description, goal, duration, difficulty, tags, color):
    """Create a program."""
    program = await authoring_service(ctx).create_program(ProgramInput(
        name=name,
        description=description,
        goal=goal,
        duration=duration,
        difficulty=difficulty,
        tags=_tags(tags),
        color=color,
    ))
    echo_success(f"Program created with ID: {program.id}")


@programs.command()
@click.argument("program_id")
@click.option("--name", "-n", help="New name")
@click.option("--description", "-d")
@click.option("--goal", "-g")
@click.option("--duration")
@click.option("--difficulty", type=DIFFICULTIES)
@click.option("--tags", help="Comma-separated tags")
@click.option("--color")
@click.pass_context
@async_command
async def update(ctx, program_id, name, description, goal, duration, difficulty, tags, color):
    """Update a program's fields."""
    await authoring_service(ctx).update_program(program_id, ProgramInput(
        name=name,
        description=description,
        goal=goal,
        duration=duration,
        difficulty=difficulty,
        tags=_tags(tags),
        color=color,
    ))
    echo_success(f"Program {program_id} updated")


@programs.command()
@click.argument("program_id")
@click.option("--force", "-f", is_flag=True, help="Skip confirmation")
@click.pass_context
@async_command
async def delete(ctx, program_id: str, force: bool):
    """Delete a program with all its levels, moves and logs."""
    service = authoring_service(ctx)
    program = await service.get_program(program_id)

    if not force:
        click.echo(f"Program: {program.name}")
        if not click.confirm("Delete this program and everything in it?"):
            echo_info("Cancelled")
            return

    await service.delete_program(program_id)
    echo_success(f"Program {program_id} deleted")


@programs.command()
@click.argument("program_id")
@click.pass_context
@async_command
async def duplicate(ctx, program_id: str):
    """Copy a program with all its levels and moves."""
    tree = await authoring_service(ctx).duplicate_program(program_id)
    echo_success(
        f"Created '{tree.program.name}' (ID: {tree.program.id}) "
        f"with {len(tree.levels)} level(s) and {len(tree.moves)} move(s)"
    )
