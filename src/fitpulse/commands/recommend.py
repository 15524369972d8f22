"""Recommendation command."""

import click

from ..exceptions import FitpulseError
from ..models.recommendation import DEFAULT_LIMIT, RecommendationQuery
from ..models.workouts import Difficulty
from ..services import RecommendationService
from .base import async_command, echo_error, echo_info, ensure_initialized, format_table


@click.command()
@click.argument("user_id", type=int)
@click.option("--limit", "-n", default=DEFAULT_LIMIT, type=int, help="Number of workouts (max 20)")
@click.option(
    "--difficulty",
    type=click.Choice([d.value for d in Difficulty]),
    help="Only this difficulty",
)
@click.option("--category", help="Only this category")
@click.option("--duration", type=int, help="Target minutes (+/- 10)")
@click.option("--reasons/--no-reasons", default=True, help="Show why each workout was picked")
@click.pass_context
@async_command
async def recommend(
    ctx: click.Context,
    user_id: int,
    limit: int,
    difficulty: str | None,
    category: str | None,
    duration: int | None,
    reasons: bool,
):
    """Recommend workouts for a user.

    Examples:

        fitpulse recommend 1

        fitpulse recommend 1 --category cardio --duration 45 -n 3
    """
    ensure_initialized(ctx)

    query = RecommendationQuery(
        limit=limit,
        difficulty=Difficulty(difficulty) if difficulty else None,
        category=category,
        duration=duration,
    )
    try:
        result = await RecommendationService().recommend(user_id, query)
    except FitpulseError as e:
        echo_error(f"{e.code.value}: {e.message}")
        ctx.exit(1)

    context = result.context
    progress = context.weekly_progress
    click.echo()
    click.echo(
        click.style(
            f"Level: {context.fitness_level.value}  |  "
            f"This week: {progress.completed}/{progress.goal}",
            bold=True,
        )
    )
    if context.top_categories:
        click.echo(f"Favourite categories: {', '.join(context.top_categories)}")
    click.echo()

    if not result.recommendations:
        echo_info("No workouts match these filters.")
        return

    rows = [
        [
            str(rec.workout.id),
            rec.workout.title,
            rec.workout.difficulty.value,
            rec.workout.category,
            f"{rec.workout.estimated_duration} min",
            str(rec.score),
        ]
        for rec in result.recommendations
    ]
    click.echo(format_table(["ID", "Title", "Difficulty", "Category", "Length", "Score"], rows))

    if reasons:
        click.echo()
        for rec in result.recommendations:
            if rec.reasons:
                click.echo(f"  {rec.workout.title}: {'; '.join(rec.reasons)}")
