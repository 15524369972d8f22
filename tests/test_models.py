"""Tests for data models."""

from datetime import datetime

import pytest

from fitpulse.exceptions import AlreadyCompletedError, ErrorCode
from fitpulse.models.achievements import (
    COMPLETION_COUNT_MILESTONES,
    DEFAULT_ACHIEVEMENTS,
    STREAK_MILESTONES,
    TriggerType,
)
from fitpulse.models.recommendation import ScoreBreakdown, WeeklyProgress
from fitpulse.models.user_profile import UserProfile
from fitpulse.models.workouts import (
    CompletionRecord,
    Difficulty,
    SessionStatus,
    WorkoutFilters,
)


class TestDifficulty:
    """Tests for the Difficulty enum."""

    def test_next_tier(self):
        assert Difficulty.BEGINNER.next_tier == Difficulty.INTERMEDIATE
        assert Difficulty.INTERMEDIATE.next_tier == Difficulty.ADVANCED
        assert Difficulty.ADVANCED.next_tier is None


class TestUserProfile:
    """Tests for UserProfile model."""

    def test_defaults_when_unset(self):
        profile = UserProfile(name="New")
        assert profile.effective_fitness_level == Difficulty.INTERMEDIATE
        assert profile.effective_duration == 30
        assert profile.effective_weekly_goal == 3

    def test_profile_round_trip(self, sample_user_profile):
        data = sample_user_profile.to_dict()
        assert data["fitness_level"] == "beginner"

        restored = UserProfile.from_dict(data, id=7)
        assert restored.id == 7
        assert restored.fitness_level == Difficulty.BEGINNER
        assert restored.preferred_duration == 30
        assert restored.weekly_goal == 4

    def test_from_dict_without_level(self):
        profile = UserProfile.from_dict({"name": "Sam", "fitness_level": None})
        assert profile.fitness_level is None


class TestWorkoutFilters:
    """Tests for the explicit filter value."""

    def test_duration_range_is_ten_minutes_each_way(self):
        assert WorkoutFilters(duration=45).duration_range == (35, 55)

    def test_duration_range_floor(self):
        assert WorkoutFilters(duration=10).duration_range == (5, 20)

    def test_no_duration_no_range(self):
        assert WorkoutFilters().duration_range is None

    def test_matches(self, make_workout):
        cardio = make_workout(category="cardio", duration=40)
        strength = make_workout(category="strength", duration=40)
        filters = WorkoutFilters(category="cardio", duration=45)

        assert filters.matches(cardio)
        assert not filters.matches(strength)
        assert not WorkoutFilters(duration=20).matches(cardio)
        assert not WorkoutFilters(difficulty=Difficulty.ADVANCED).matches(cardio)

    def test_empty_filters_match_everything(self, make_workout):
        assert WorkoutFilters().matches(make_workout())


class TestCompletionRecord:
    """Tests for the session state machine."""

    def _record(self) -> CompletionRecord:
        return CompletionRecord(
            id=1, user_id=1, workout_id=2, started_at=datetime(2024, 1, 1, 9, 0)
        )

    def test_complete_once(self):
        record = self._record()
        assert record.status == SessionStatus.IN_PROGRESS

        record.complete(datetime(2024, 1, 1, 9, 30), duration_minutes=28, notes="good")

        assert record.status == SessionStatus.COMPLETED
        assert record.duration_minutes == 28
        assert record.notes == "good"

    def test_second_completion_rejected(self):
        record = self._record()
        first = datetime(2024, 1, 1, 9, 30)
        record.complete(first)

        with pytest.raises(AlreadyCompletedError) as exc_info:
            record.complete(datetime(2024, 1, 1, 10, 0), duration_minutes=60)

        assert exc_info.value.code == ErrorCode.ALREADY_COMPLETED
        assert record.completed_at == first
        assert record.duration_minutes is None


class TestScoreBreakdown:
    """Tests for ScoreBreakdown totals."""

    def test_total_is_exact_sum(self):
        breakdown = ScoreBreakdown(
            difficulty=20, duration=8, category=15, recency_penalty=-30, variety=10, random=7
        )
        assert breakdown.total == 50 + 20 + 8 + 15 - 30 + 10 + 7

    def test_total_not_clamped(self):
        breakdown = ScoreBreakdown(
            difficulty=0, duration=0, category=0, recency_penalty=-30, variety=0, random=0
        )
        assert breakdown.total == 20


class TestWeeklyProgress:
    def test_remaining_never_negative(self):
        assert WeeklyProgress(completed=1, goal=3).remaining == 2
        assert WeeklyProgress(completed=5, goal=3).remaining == 0


class TestDefaultAchievements:
    """Tests for the seeded achievement ladder."""

    def test_one_achievement_per_milestone(self):
        counts = [
            a["threshold"]
            for a in DEFAULT_ACHIEVEMENTS
            if a["trigger_type"] == TriggerType.WORKOUT_COMPLETION_COUNT.value
        ]
        streaks = [
            a["threshold"]
            for a in DEFAULT_ACHIEVEMENTS
            if a["trigger_type"] == TriggerType.STREAK.value
        ]
        assert tuple(counts) == COMPLETION_COUNT_MILESTONES
        assert tuple(streaks) == STREAK_MILESTONES

    def test_one_difficulty_achievement_per_tier(self):
        tiers = {
            a["difficulty"]
            for a in DEFAULT_ACHIEVEMENTS
            if a["trigger_type"] == TriggerType.DIFFICULTY_COMPLETION.value
        }
        assert tiers == {d.value for d in Difficulty}

    def test_names_unique(self):
        names = [a["name"] for a in DEFAULT_ACHIEVEMENTS]
        assert len(names) == len(set(names))
