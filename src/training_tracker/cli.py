"""CLI entry point for training-tracker."""

import logging
from pathlib import Path

import click

from .commands import export, import_data, init, levels, logs, moves, programs, settings


@click.group()
@click.version_option(version="0.1.0", prog_name="training-tracker")
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    envvar="TRAINING_TRACKER_DATA_DIR",
    help="Directory holding the database (default: ./data)",
)
@click.option("--verbose", "-v", is_flag=True, help="Show engine log output")
@click.pass_context
def main(ctx, data_dir: Path | None, verbose: bool):
    """training-tracker: manage training programs and workout logs.

    Programs contain ordered levels, levels contain ordered moves.
    Everything lives in a local SQLite database that can be exported
    to and restored from a JSON backup.

    Example usage:

        # Create the database
        training-tracker init

        # Build a program
        training-tracker programs create "Strength Builder"
        training-tracker levels add <PROGRAM_ID> "Week 1"
        training-tracker moves add <LEVEL_ID> "Squat" --sets 5 --reps 5

        # Back up and restore
        training-tracker export -o backup.json
        training-tracker import backup.json --mode merge
    """
    ctx.ensure_object(dict)
    ctx.obj["data_dir"] = data_dir

    if verbose:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")


# Register commands
main.add_command(init)
main.add_command(programs)
main.add_command(levels)
main.add_command(moves)
main.add_command(logs)
main.add_command(settings)
main.add_command(export)
main.add_command(import_data)


def run():
    """Run the CLI."""
    main()


if __name__ == "__main__":
    run()
