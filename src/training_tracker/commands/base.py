"""Shared CLI utilities."""

import asyncio
from functools import wraps
from pathlib import Path

import click

from ..db import Store, get_db_path
from ..errors import TrainingTrackerError
from ..services import (
    ExportImportService,
    ProgramAuthoringService,
    SettingsService,
    WorkoutLogService,
)


def async_command(f):
    """Decorator to run async Click commands.

    Engine errors are reported as a single [ERROR] line and exit status 1.
    """

    @wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return asyncio.run(f(*args, **kwargs))
        except TrainingTrackerError as e:
            echo_error(str(e))
            raise click.exceptions.Exit(1) from e

    return wrapper


def get_cli_db_path(ctx: click.Context, create: bool = True) -> Path:
    """Get the database path selected on the command line."""
    obj = ctx.find_root().obj or {}
    return get_db_path(obj.get("data_dir"), create=create)


def ensure_initialized(ctx: click.Context) -> None:
    """Ensure the database is initialized."""
    db_path = get_cli_db_path(ctx, create=False)
    if not db_path.exists():
        click.echo(
            click.style("Error: ", fg="red")
            + "Database not initialized. Run 'training-tracker init' first."
        )
        ctx.exit(1)


def get_store(ctx: click.Context) -> Store:
    return Store(get_cli_db_path(ctx))


def authoring_service(ctx: click.Context) -> ProgramAuthoringService:
    return ProgramAuthoringService(get_store(ctx))


def export_import_service(ctx: click.Context) -> ExportImportService:
    return ExportImportService(get_store(ctx))


def log_service(ctx: click.Context) -> WorkoutLogService:
    return WorkoutLogService(get_store(ctx))


def settings_service(ctx: click.Context) -> SettingsService:
    return SettingsService(get_store(ctx))


def echo_success(message: str) -> None:
    """Print a success message."""
    click.echo(click.style("[OK] ", fg="green") + message)


def echo_error(message: str) -> None:
    """Print an error message."""
    click.echo(click.style("[ERROR] ", fg="red") + message, err=True)


def echo_info(message: str) -> None:
    """Print an info message."""
    click.echo(click.style("[INFO] ", fg="blue") + message)


def echo_warning(message: str) -> None:
    """Print a warning message."""
    click.echo(click.style("[WARN] ", fg="yellow") + message)


def truncate(text: str, width: int = 30) -> str:
    return text[:width] + "..." if len(text) > width else text


def format_table(headers: list[str], rows: list[list[str]], padding: int = 2) -> str:
    """Format data as a simple table."""
    if not rows:
        return ""

    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))

    lines = ["".join(h.ljust(widths[i] + padding) for i, h in enumerate(headers))]
    lines.append("".join("-" * w + " " * padding for w in widths))
    for row in rows:
        lines.append("".join(str(cell).ljust(widths[i] + padding) for i, cell in enumerate(row)))

    return "\n".join(line.rstrip() for line in lines)
