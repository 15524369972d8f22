"""Workout session commands."""

import click

from ..db.repositories import AchievementRepository
from ..exceptions import FitpulseError
from ..services import CompletionService, SessionService
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    echo_warning,
    ensure_initialized,
    format_table,
)


@click.command()
@click.argument("user_id", type=int)
@click.argument("workout_id", type=int)
@click.pass_context
@async_command
async def start(ctx: click.Context, user_id: int, workout_id: int):
    """Start (or resume) a workout session."""
    ensure_initialized(ctx)

    try:
        started = await SessionService().start(user_id, workout_id)
    except FitpulseError as e:
        echo_error(f"{e.code.value}: {e.message}")
        ctx.exit(1)

    verb = "Resumed" if started.is_resuming else "Started"
    title = started.session.workout.title if started.session.workout else workout_id
    echo_success(f"{verb} session {started.session.id} ({title})")
    click.echo(f"Complete it with: fitpulse complete {user_id} {started.session.id}")


@click.command()
@click.argument("user_id", type=int)
@click.argument("session_id", type=int)
@click.option("--duration", type=int, help="Actual minutes spent")
@click.option("--notes", help="Notes about the session")
@click.pass_context
@async_command
async def complete(
    ctx: click.Context,
    user_id: int,
    session_id: int,
    duration: int | None,
    notes: str | None,
):
    """Complete a workout session and award achievements."""
    ensure_initialized(ctx)

    try:
        result = await CompletionService().complete(
            user_id, session_id, duration_minutes=duration, notes=notes
        )
    except FitpulseError as e:
        echo_error(f"{e.code.value}: {e.message}")
        ctx.exit(1)

    echo_success(f"Session {session_id} completed at {result.completed_at:%Y-%m-%d %H:%M}")
    if result.total_workouts is None:
        echo_warning("Completion saved, but the lifetime total could not be read")
    else:
        echo_info(f"Lifetime workouts: {result.total_workouts}")
    for achievement in result.new_achievements:
        click.echo(click.style(f"  Achievement unlocked: {achievement.name}", fg="yellow"))


@click.command()
@click.argument("user_id", type=int)
@click.pass_context
@async_command
async def achievements(ctx: click.Context, user_id: int):
    """List a user's earned achievements."""
    ensure_initialized(ctx)

    earned = await AchievementRepository().list_user_achievements(user_id)
    if not earned:
        echo_info("No achievements yet.")
        return

    rows = [
        [ua.achievement.name, ua.achievement.description, f"{ua.earned_at:%Y-%m-%d}"]
        for ua in earned
    ]
    click.echo(format_table(["Achievement", "Description", "Earned"], rows))
