"""Workout recommendation pipeline.

History analysis -> candidate selection -> scoring -> ranking -> reasons.
The pipeline only reads from storage; any storage failure aborts the
whole request.
"""

from datetime import datetime, time, timedelta
from pathlib import Path

import aiosqlite
from loguru import logger

from ..db.repositories import (
    CompletionRepository,
    UserProfileRepository,
    WorkoutRepository,
)
from ..exceptions import InvalidInputError, ServerError, UserNotFoundError
from ..models.recommendation import (
    Recommendation,
    RecommendationContext,
    RecommendationQuery,
    RecommendationResult,
    WeeklyProgress,
)
from ..models.workouts import CompletionRecord
from .candidates import select_candidates
from .history import analyze_history
from .ranking import effective_limit, rank
from .reasons import generate_reasons
from .scoring import RandomSource, ScoringEngine


def week_start(now: datetime) -> datetime:
    """Monday 00:00 of the week containing ``now``."""
    monday = now.date() - timedelta(days=now.weekday())
    return datetime.combine(monday, time.min, tzinfo=now.tzinfo)


def completions_this_week(records: list[CompletionRecord], now: datetime) -> int:
    start = week_start(now)
    return sum(
        1 for r in records if r.completed_at is not None and start <= r.completed_at
    )


class RecommendationService:
    """Ranks catalog workouts for a user."""

    def __init__(
        self,
        db_path: Path | None = None,
        random_source: RandomSource | None = None,
    ):
        self.profiles = UserProfileRepository(db_path)
        self.workouts = WorkoutRepository(db_path)
        self.completions = CompletionRepository(db_path)
        self.scoring = ScoringEngine(random_source)

    async def recommend(
        self,
        user_id: int,
        query: RecommendationQuery | None = None,
        now: datetime | None = None,
    ) -> RecommendationResult:
        """Recommend workouts for a user.

        Args:
            user_id: Caller's user ID
            query: Limit and optional explicit filters
            now: Reference time for recency windows (defaults to now)

        Returns:
            Ranked recommendations with profile and progress context

        Raises:
            InvalidInputError: If the limit is not a positive integer or the
                duration is negative
            UserNotFoundError: If the user has no profile
            ServerError: If storage fails
        """
        query = query or RecommendationQuery()
        now = now or datetime.now()
        effective_limit(query.limit)
        if query.duration is not None and query.duration < 0:
            raise InvalidInputError(
                "duration must not be negative", details={"duration": query.duration}
            )
        filters = query.filters

        try:
            profile = await self.profiles.get(user_id)
            if profile is None:
                raise UserNotFoundError(
                    "User not found in database", details={"user_id": user_id}
                )
            records = await self.completions.get_history(user_id)
            catalog = await self.workouts.get_catalog(filters)
        except aiosqlite.Error as e:
            logger.exception(f"Failed to load recommendation inputs for user {user_id}")
            raise ServerError("Failed to load recommendation inputs") from e

        summary = analyze_history(records, profile, filters)
        candidate_set = select_candidates(catalog, records, filters, now)
        ranked = rank(self.scoring.score(candidate_set, summary), query.limit)

        recommendations = [
            Recommendation(
                workout=scored.workout,
                score=scored.total_score,
                reasons=generate_reasons(scored.workout, scored.total_score, summary),
            )
            for scored in ranked
        ]

        context = RecommendationContext(
            fitness_level=profile.effective_fitness_level,
            preferred_duration=profile.effective_duration,
            weekly_progress=WeeklyProgress(
                completed=completions_this_week(records, now),
                goal=profile.effective_weekly_goal,
            ),
            top_categories=summary.top_categories,
            has_history=summary.has_history,
        )

        logger.info(
            f"Recommended {len(recommendations)} of {len(candidate_set.candidates)} "
            f"candidates for user {user_id} "
            f"(difficulty={summary.preferred_difficulty.value}, "
            f"duration={summary.preferred_duration})"
        )
        return RecommendationResult(recommendations=recommendations, context=context)
