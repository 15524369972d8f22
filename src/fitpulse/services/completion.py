"""Workout completion and post-completion milestones."""

from datetime import datetime, timedelta
from pathlib import Path

import aiosqlite
from loguru import logger

from ..db.repositories import (
    AchievementRepository,
    CompletionRepository,
    UserProfileRepository,
)
from ..exceptions import (
    AlreadyCompletedError,
    InvalidInputError,
    MissingDataError,
    ServerError,
    UnauthorizedWorkoutError,
    UserNotFoundError,
    WorkoutNotFoundError,
)
from ..models.progress import CompletionResult, CompletionStats
from ..models.workouts import CompletionRecord
from .achievements import (
    AchievementAwarder,
    AchievementEvaluator,
    CompletionEvent,
    default_evaluators,
)
from .streaks import current_streak

RECENT_ACHIEVEMENT_WINDOW = timedelta(hours=24)
RECENT_ACHIEVEMENT_LIMIT = 10


class CompletionService:
    """Completes workout sessions and awards the achievements they unlock."""

    def __init__(
        self,
        db_path: Path | None = None,
        evaluators: list[AchievementEvaluator] | None = None,
    ):
        self.profiles = UserProfileRepository(db_path)
        self.completions = CompletionRepository(db_path)
        self.achievements = AchievementRepository(db_path)
        if evaluators is None:
            evaluators = default_evaluators(self.completions)
        self.awarder = AchievementAwarder(self.achievements, evaluators)

    async def complete(
        self,
        user_id: int,
        session_id: int | None,
        duration_minutes: int | None = None,
        notes: str | None = None,
        now: datetime | None = None,
    ) -> CompletionResult:
        """Complete an in-progress session.

        Input and ownership checks run before anything is written. Once the
        completion is stored it stands, even if achievement evaluation fails.

        Args:
            user_id: Caller's user ID
            session_id: The in-progress session to complete
            duration_minutes: Actual session length, if tracked
            notes: Free-form notes
            now: Completion time (defaults to now)

        Raises:
            MissingDataError: If no session ID (or ID 0) was given
            InvalidInputError: If the duration is negative
            UserNotFoundError: If the user has no profile
            UnauthorizedWorkoutError: If the session is not the caller's
            AlreadyCompletedError: If the session was already completed
            ServerError: If storage fails before the completion is stored
        """
        if not session_id:
            raise MissingDataError("Missing user workout ID")
        if duration_minutes is not None and duration_minutes < 0:
            raise InvalidInputError(
                "durationMinutes must not be negative",
                details={"durationMinutes": duration_minutes},
            )
        # A zero duration means "not tracked" and stays out of the averages
        duration_minutes = duration_minutes or None
        completed_at = now or datetime.now()

        try:
            session = await self._owned_session(user_id, session_id)
            session.complete(completed_at, duration_minutes, notes)
            if not await self.completions.mark_completed(session):
                raise AlreadyCompletedError(
                    "Workout is already completed", details={"session_id": session_id}
                )
        except aiosqlite.Error as e:
            logger.exception(f"Failed to complete session {session_id}")
            raise ServerError("Failed to complete workout") from e

        logger.info(f"User {user_id} completed session {session_id}")

        event = CompletionEvent(user_id=user_id, session=session, completed_at=completed_at)
        new_achievements = await self.awarder.evaluate(event)

        try:
            total = await self.completions.count_completed(user_id)
        except aiosqlite.Error:
            logger.exception(f"Could not count completions for user {user_id}")
            total = None

        return CompletionResult(
            session=session,
            completed_at=completed_at,
            total_workouts=total,
            new_achievements=new_achievements,
        )

    async def get_completion_stats(
        self,
        user_id: int,
        session_id: int | None,
        now: datetime | None = None,
    ) -> CompletionStats:
        """Summarize a completed session: totals, streak and fresh awards.

        Raises:
            MissingDataError: If no session ID was given
            UserNotFoundError: If the user has no profile
            WorkoutNotFoundError: If the session is not the caller's
        """
        if not session_id:
            raise MissingDataError("Missing user workout ID")
        now = now or datetime.now()

        try:
            await self._require_profile(user_id)
            session = await self.completions.get(session_id)
            if session is None or session.user_id != user_id:
                raise WorkoutNotFoundError(
                    "Workout completion not found", details={"session_id": session_id}
                )
            total = await self.completions.count_completed(user_id)
            dates = await self.completions.get_completion_dates(user_id)
            earned = await self.achievements.list_user_achievements(user_id)
        except aiosqlite.Error as e:
            logger.exception(f"Failed to load completion stats for session {session_id}")
            raise ServerError("Failed to load completion stats") from e

        since = now - RECENT_ACHIEVEMENT_WINDOW
        recent = [ua for ua in earned if ua.earned_at >= since][:RECENT_ACHIEVEMENT_LIMIT]

        return CompletionStats(
            session=session,
            total_workouts=total,
            current_streak=current_streak(dates, now.date()),
            recent_achievements=recent,
        )

    async def _require_profile(self, user_id: int) -> None:
        if await self.profiles.get(user_id) is None:
            raise UserNotFoundError(
                "User not found in database", details={"user_id": user_id}
            )

    async def _owned_session(self, user_id: int, session_id: int) -> CompletionRecord:
        await self._require_profile(user_id)
        session = await self.completions.get(session_id)
        if session is None or session.user_id != user_id:
            raise UnauthorizedWorkoutError(
                "Workout session not found or unauthorized",
                details={"session_id": session_id},
            )
        return session
