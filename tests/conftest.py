"""Pytest configuration and fixtures."""

import asyncio
import itertools
import tempfile
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from fitpulse.db.engine import init_db, seed_achievements
from fitpulse.models.user_profile import UserProfile
from fitpulse.models.workouts import CompletionRecord, Difficulty, WorkoutDefinition

CATALOG_EPOCH = datetime(2024, 1, 1, 8, 0, 0)


class FixedRandom:
    """RandomSource stub that always returns the same value."""

    def __init__(self, value: int = 0):
        self.value = value
        self.calls = 0

    def next_int(self, bound: int) -> int:
        self.calls += 1
        return self.value % bound


@pytest.fixture
def temp_db_path():
    """Create a temporary database path."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "test.db"


@pytest.fixture
def db_path(temp_db_path):
    """A temporary database with the schema and achievement ladder."""
    asyncio.run(init_db(temp_db_path))
    asyncio.run(seed_achievements(temp_db_path))
    return temp_db_path


@pytest.fixture
def fixed_random():
    return FixedRandom(0)


@pytest.fixture
def sample_user_profile():
    """Create a sample user profile for testing."""
    return UserProfile(
        name="Test User",
        fitness_level=Difficulty.BEGINNER,
        preferred_duration=30,
        weekly_goal=4,
    )


@pytest.fixture
def make_workout():
    """Factory for catalog workouts with unique IDs and rising created_at."""
    ids = itertools.count(1)

    def _make(
        difficulty: Difficulty = Difficulty.INTERMEDIATE,
        category: str = "strength",
        duration: int = 30,
        title: str | None = None,
        created_at: datetime | None = None,
    ) -> WorkoutDefinition:
        workout_id = next(ids)
        return WorkoutDefinition(
            id=workout_id,
            title=title or f"Workout {workout_id}",
            difficulty=difficulty,
            category=category,
            estimated_duration=duration,
            created_at=created_at or CATALOG_EPOCH + timedelta(minutes=workout_id),
        )

    return _make


@pytest.fixture
def make_completion():
    """Factory for completed records of a workout."""
    ids = itertools.count(1)

    def _make(
        workout: WorkoutDefinition,
        completed_at: datetime,
        duration_minutes: int | None = None,
        user_id: int = 1,
    ) -> CompletionRecord:
        return CompletionRecord(
            id=next(ids),
            user_id=user_id,
            workout_id=workout.id,
            started_at=completed_at - timedelta(minutes=workout.estimated_duration),
            completed_at=completed_at,
            duration_minutes=duration_minutes,
            workout=workout,
        )

    return _make
