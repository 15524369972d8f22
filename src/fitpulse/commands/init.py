"""Initialize project command."""

import click

from ..db import get_db_path, init_db, seed_achievements, seed_workouts
from ..db.engine import get_data_dir
from .base import async_command, echo_info, echo_success


@click.command()
@click.option(
    "--sample/--no-sample",
    default=True,
    help="Seed the sample workout catalog (default: on)",
)
@async_command
async def init(sample: bool):
    """Initialize the fitpulse database.

    Creates the data directory, the SQLite schema and the achievement
    ladder, plus a small sample catalog unless --no-sample is given.
    """
    data_dir = get_data_dir()
    db_path = get_db_path(data_dir)

    echo_info(f"Initializing fitpulse in {data_dir}")

    await init_db(db_path)
    echo_success("Database initialized")

    count = await seed_achievements(db_path)
    echo_success(f"Achievement ladder ready ({count} new)")

    if sample:
        count = await seed_workouts(db_path)
        echo_success(f"Sample catalog ready ({count} new workouts)")

    click.echo()
    click.echo("fitpulse is ready to use!")
    click.echo()
    click.echo("Next steps:")
    click.echo("  1. Create a profile:")
    click.echo("     fitpulse profile create")
    click.echo()
    click.echo("  2. Get recommendations:")
    click.echo("     fitpulse recommend <user-id>")
