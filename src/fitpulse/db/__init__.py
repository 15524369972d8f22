"""Database layer for fitpulse."""

from .engine import get_db_path, init_db, seed_achievements, seed_workouts
from .repositories import (
    AchievementRepository,
    CompletionRepository,
    UserProfileRepository,
    WorkoutRepository,
)

__all__ = [
    "AchievementRepository",
    "CompletionRepository",
    "get_db_path",
    "init_db",
    "seed_achievements",
    "seed_workouts",
    "UserProfileRepository",
    "WorkoutRepository",
]
