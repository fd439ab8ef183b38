"""Settings commands."""

import json

import click

from ..models.settings import UnitPreference
from .base import async_command, echo_success, ensure_initialized, settings_service


@click.group()
@click.pass_context
def settings(ctx):
    """View and change user settings."""
    ensure_initialized(ctx)


@settings.command()
@click.pass_context
@async_command
async def show(ctx):
    """Print the current settings."""
    current = await settings_service(ctx).get_settings()
    data = current.to_dict()
    if data.get("remoteKey"):
        data["remoteKey"] = "********"
    click.echo(json.dumps(data, indent=2))


@settings.command(name="set")
@click.option("--dark-mode/--light-mode", default=None)
@click.option("--sync/--no-sync", "sync_enabled", default=None)
@click.option("--units", "unit_preference", type=click.Choice([u.value for u in UnitPreference]))
@click.option("--remote-url")
@click.option("--remote-key")
@click.pass_context
@async_command
async def set_settings(ctx, **changes):
    """Change one or more settings."""
    await settings_service(ctx).update_settings(**changes)
    echo_success("Settings updated")
