"""Starting and resuming workout sessions."""

from datetime import datetime
from pathlib import Path

import aiosqlite
from loguru import logger

from ..db.repositories import (
    CompletionRepository,
    UserProfileRepository,
    WorkoutRepository,
)
from ..exceptions import ServerError, UserNotFoundError, WorkoutNotFoundError
from ..models.progress import SessionStart


class SessionService:
    """Creates in-progress sessions for catalog workouts."""

    def __init__(self, db_path: Path | None = None):
        self.profiles = UserProfileRepository(db_path)
        self.workouts = WorkoutRepository(db_path)
        self.completions = CompletionRepository(db_path)

    async def start(
        self, user_id: int, workout_id: int, now: datetime | None = None
    ) -> SessionStart:
        """Start a workout, resuming the newest unfinished session if any."""
        try:
            if await self.profiles.get(user_id) is None:
                raise UserNotFoundError(
                    "User not found in database", details={"user_id": user_id}
                )
            if await self.workouts.get(workout_id) is None:
                raise WorkoutNotFoundError(
                    "Workout not found", details={"workout_id": workout_id}
                )

            existing = await self.completions.get_in_progress(user_id, workout_id)
            if existing is not None:
                logger.debug(f"Resuming session {existing.id} for user {user_id}")
                return SessionStart(session=existing, is_resuming=True)

            session = await self.completions.start(user_id, workout_id, now)
        except aiosqlite.Error as e:
            logger.exception(f"Failed to start workout {workout_id} for user {user_id}")
            raise ServerError("Failed to start workout") from e

        logger.info(f"User {user_id} started session {session.id} (workout {workout_id})")
        return SessionStart(session=session, is_resuming=False)
