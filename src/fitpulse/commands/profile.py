"""User profile commands."""

import click
import questionary
from questionary import Style

from ..db.repositories import UserProfileRepository
from ..models.user_profile import UserProfile
from ..models.workouts import Difficulty
from .base import async_command, ensure_initialized, echo_info, echo_success, format_table

custom_style = Style(
    [
        ("qmark", "fg:#673ab7 bold"),
        ("question", "bold"),
        ("answer", "fg:#f44336 bold"),
        ("pointer", "fg:#673ab7 bold"),
        ("highlighted", "fg:#673ab7 bold"),
    ]
)


def _positive_int(text: str) -> bool | str:
    if text.isdigit() and int(text) > 0:
        return True
    return "Please enter a positive whole number"


async def _ask_profile() -> UserProfile:
    """Collect a profile through an interactive questionnaire."""
    name = await questionary.text("What's your name?", style=custom_style).ask_async()

    level = await questionary.select(
        "How would you describe your fitness level?",
        choices=[
            questionary.Choice("Beginner", Difficulty.BEGINNER),
            questionary.Choice("Intermediate", Difficulty.INTERMEDIATE),
            questionary.Choice("Advanced", Difficulty.ADVANCED),
        ],
        style=custom_style,
    ).ask_async()

    duration = await questionary.text(
        "How long is a typical session (minutes)?",
        default="30",
        validate=_positive_int,
        style=custom_style,
    ).ask_async()

    goal = await questionary.text(
        "How many workouts per week are you aiming for?",
        default="3",
        validate=_positive_int,
        style=custom_style,
    ).ask_async()

    return UserProfile(
        name=name or "Athlete",
        fitness_level=level,
        preferred_duration=int(duration),
        weekly_goal=int(goal),
    )


@click.group()
def profile():
    """Manage user profiles."""
    pass


@profile.command("create")
@click.option("--name", help="Profile name (skips the questionnaire)")
@click.option(
    "--level",
    type=click.Choice([d.value for d in Difficulty]),
    help="Fitness level",
)
@click.option("--duration", type=click.IntRange(min=1), help="Preferred minutes per session")
@click.option("--goal", type=click.IntRange(min=1), help="Workouts per week")
@click.pass_context
@async_command
async def create(
    ctx: click.Context,
    name: str | None,
    level: str | None,
    duration: int | None,
    goal: int | None,
):
    """Create a user profile.

    Without --name an interactive questionnaire is shown.
    """
    ensure_initialized(ctx)

    if name:
        new_profile = UserProfile(
            name=name,
            fitness_level=Difficulty(level) if level else None,
            preferred_duration=duration,
            weekly_goal=goal,
        )
    else:
        new_profile = await _ask_profile()

    profile_id = await UserProfileRepository().create(new_profile)
    echo_success(f"Created profile {profile_id}: {new_profile.get_summary()}")


@profile.command("list")
@click.pass_context
@async_command
async def list_profiles(ctx: click.Context):
    """List all profiles."""
    ensure_initialized(ctx)

    profiles = await UserProfileRepository().list_all()
    if not profiles:
        echo_info("No profiles yet. Run 'fitpulse profile create'.")
        return

    rows = [
        [
            str(p.id),
            p.name,
            p.effective_fitness_level.value,
            str(p.effective_duration),
            str(p.effective_weekly_goal),
        ]
        for p in profiles
    ]
    click.echo(format_table(["ID", "Name", "Level", "Minutes", "Goal"], rows))
