"""CLI entry point for fitpulse."""

import click

from . import __version__
from .commands import achievements, complete, init, profile, recommend, serve, start
from .logger import setup_logger


@click.group()
@click.version_option(version=__version__, prog_name="fitpulse")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def main(verbose: bool):
    """fitpulse: workout recommendations, streaks and achievements.

    Example usage:

        # Initialize the database with a sample catalog
        fitpulse init

        # Create a profile and get recommendations
        fitpulse profile create --name Sam --level beginner
        fitpulse recommend 1

        # Track a workout
        fitpulse start 1 3
        fitpulse complete 1 1 --duration 28
    """
    setup_logger("DEBUG" if verbose else "WARNING")


# Register commands
main.add_command(init)
main.add_command(profile)
main.add_command(recommend)
main.add_command(start)
main.add_command(complete)
main.add_command(achievements)
main.add_command(serve)


def run():
    """Run the CLI."""
    main()


if __name__ == "__main__":
    run()
