"""Initialize command."""

import click

from ..db import init_db
from .base import async_command, echo_info, echo_success, get_cli_db_path


@click.command()
@click.pass_context
@async_command
async def init(ctx):
    """Create the database and default settings.

    Safe to run again on an existing database.
    """
    db_path = get_cli_db_path(ctx)
    existed = db_path.exists()

    await init_db(db_path)

    if existed:
        echo_info(f"Database already present at {db_path}, schema checked")
    else:
        echo_success(f"Database created at {db_path}")
