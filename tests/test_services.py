"""Tests for the recommendation, session and completion services."""

import asyncio
from datetime import datetime, timedelta

import aiosqlite
import pytest

from fitpulse.db.repositories import (
    AchievementRepository,
    CompletionRepository,
    UserProfileRepository,
    WorkoutRepository,
)
from fitpulse.exceptions import (
    AlreadyCompletedError,
    InvalidInputError,
    MissingDataError,
    ServerError,
    UnauthorizedWorkoutError,
    UserNotFoundError,
    WorkoutNotFoundError,
)
from fitpulse.models.achievements import TriggerType
from fitpulse.models.recommendation import RecommendationQuery
from fitpulse.models.user_profile import UserProfile
from fitpulse.models.workouts import Difficulty
from fitpulse.services import CompletionService, RecommendationService, SessionService
from fitpulse.services.achievements import (
    AchievementAwarder,
    AchievementEvaluator,
    CompletionEvent,
    default_evaluators,
)
from fitpulse.services.recommendations import week_start

# A Wednesday
NOW = datetime(2024, 1, 3, 18, 0)

CATALOG = [
    ("Easy Spin", "beginner", "cardio", 30),
    ("Cardio Kickboxing", "intermediate", "cardio", 45),
    ("Tempo Run", "intermediate", "cardio", 40),
    ("Sprint Ladder", "advanced", "cardio", 55),
    ("Hill Repeats", "advanced", "cardio", 50),
    ("Marathon Prep", "advanced", "cardio", 90),
    ("Dumbbell Upper Body", "intermediate", "strength", 45),
    ("Kettlebell Power", "advanced", "strength", 45),
    ("Core Foundations", "beginner", "core", 20),
]


async def _add_catalog(db_path) -> dict[str, int]:
    repo = WorkoutRepository(db_path)
    ids = {}
    for offset, (title, difficulty, category, duration) in enumerate(CATALOG):
        ids[title] = await repo.add(
            {
                "title": title,
                "difficulty": difficulty,
                "category": category,
                "estimated_duration": duration,
            },
            created_at=datetime(2023, 12, 1) + timedelta(minutes=offset),
        )
    return ids


async def _add_user(db_path, **preferences) -> int:
    return await UserProfileRepository(db_path).create(
        UserProfile(name="Runner", **preferences)
    )


async def _complete(db_path, user_id, workout_id, at, duration=None):
    repo = CompletionRepository(db_path)
    session = await repo.start(user_id, workout_id, at - timedelta(minutes=30))
    session.complete(at, duration_minutes=duration)
    await repo.mark_completed(session)
    return session


class TestRecommendationService:
    """Tests for the recommendation pipeline."""

    @pytest.mark.asyncio
    async def test_unknown_user(self, db_path, fixed_random):
        service = RecommendationService(db_path, fixed_random)

        with pytest.raises(UserNotFoundError):
            await service.recommend(42, now=NOW)

    @pytest.mark.asyncio
    async def test_invalid_limit_rejected(self, db_path, fixed_random):
        user_id = await _add_user(db_path)
        service = RecommendationService(db_path, fixed_random)

        with pytest.raises(InvalidInputError):
            await service.recommend(user_id, RecommendationQuery(limit=0), now=NOW)

    @pytest.mark.asyncio
    async def test_no_history_uses_profile(self, db_path, fixed_random):
        await _add_catalog(db_path)
        user_id = await _add_user(db_path)
        service = RecommendationService(db_path, fixed_random)

        result = await service.recommend(user_id, now=NOW)

        context = result.context.to_dict()
        assert context["fitnessLevel"] == "intermediate"
        assert context["preferredDuration"] == 30
        assert context["hasHistory"] is False
        assert context["topCategories"] == []
        assert context["weeklyProgress"] == {"completed": 0, "goal": 3, "remaining": 3}
        assert len(result.recommendations) == 6
        scores = [r.score for r in result.recommendations]
        assert scores == sorted(scores, reverse=True)

    @pytest.mark.asyncio
    async def test_cardio_window_with_limit(self, db_path, fixed_random):
        await _add_catalog(db_path)
        user_id = await _add_user(db_path)
        service = RecommendationService(db_path, fixed_random)

        result = await service.recommend(
            user_id,
            RecommendationQuery(limit=3, category="cardio", duration=45),
            now=NOW,
        )

        assert 0 < len(result.recommendations) <= 3
        for rec in result.recommendations:
            assert rec.workout.category == "cardio"
            assert 35 <= rec.workout.estimated_duration <= 55

    @pytest.mark.asyncio
    async def test_intermediate_streak_promotes_to_advanced(self, db_path, fixed_random):
        ids = await _add_catalog(db_path)
        user_id = await _add_user(db_path, fitness_level=Difficulty.INTERMEDIATE)
        for days_ago in range(10, 16):
            await _complete(
                db_path, user_id, ids["Dumbbell Upper Body"], NOW - timedelta(days=days_ago)
            )
        service = RecommendationService(db_path, fixed_random)

        result = await service.recommend(user_id, RecommendationQuery(limit=20), now=NOW)

        advanced = [r for r in result.recommendations if r.workout.difficulty == Difficulty.ADVANCED]
        assert advanced
        for rec in advanced:
            assert rec.reasons[0] == "Matches your advanced fitness level"
        # Stored level is still reported
        assert result.context.fitness_level == Difficulty.INTERMEDIATE
        assert result.context.top_categories == ["strength"]

    @pytest.mark.asyncio
    async def test_recent_workout_penalized_not_excluded(self, db_path, fixed_random):
        ids = await _add_catalog(db_path)
        user_id = await _add_user(db_path)
        await _complete(db_path, user_id, ids["Tempo Run"], NOW - timedelta(days=1))
        service = RecommendationService(db_path, fixed_random)

        result = await service.recommend(user_id, RecommendationQuery(limit=20), now=NOW)

        scores = {r.workout.title: r.score for r in result.recommendations}
        assert "Tempo Run" in scores
        assert scores["Tempo Run"] == scores["Cardio Kickboxing"] - 30
        assert result.context.weekly_progress.completed == 1

    @pytest.mark.asyncio
    async def test_empty_catalog(self, db_path, fixed_random):
        user_id = await _add_user(db_path)
        service = RecommendationService(db_path, fixed_random)

        result = await service.recommend(user_id, now=NOW)

        assert result.recommendations == []

    @pytest.mark.asyncio
    async def test_negative_duration_rejected(self, db_path, fixed_random):
        user_id = await _add_user(db_path)
        service = RecommendationService(db_path, fixed_random)

        with pytest.raises(InvalidInputError):
            await service.recommend(user_id, RecommendationQuery(duration=-10), now=NOW)

    @pytest.mark.asyncio
    async def test_storage_failure_aborts(self, db_path, fixed_random):
        await _add_catalog(db_path)
        user_id = await _add_user(db_path)
        async with aiosqlite.connect(db_path) as db:
            await db.execute("DROP TABLE workouts")
            await db.commit()
        service = RecommendationService(db_path, fixed_random)

        with pytest.raises(ServerError):
            await service.recommend(user_id, now=NOW)

    def test_week_starts_monday(self):
        assert week_start(NOW) == datetime(2024, 1, 1)


class TestSessionService:
    @pytest.mark.asyncio
    async def test_start_then_resume(self, db_path):
        ids = await _add_catalog(db_path)
        user_id = await _add_user(db_path)
        service = SessionService(db_path)

        first = await service.start(user_id, ids["Tempo Run"], now=NOW)
        second = await service.start(user_id, ids["Tempo Run"], now=NOW)

        assert not first.is_resuming
        assert second.is_resuming
        assert second.session.id == first.session.id

    @pytest.mark.asyncio
    async def test_unknown_workout(self, db_path):
        user_id = await _add_user(db_path)

        with pytest.raises(WorkoutNotFoundError):
            await SessionService(db_path).start(user_id, 999, now=NOW)


class TestCompletionService:
    """Tests for completion and achievement awarding."""

    async def _started(self, db_path, title="Tempo Run", at=NOW):
        ids = await _add_catalog(db_path)
        user_id = await _add_user(db_path)
        start = await SessionService(db_path).start(user_id, ids[title], now=at)
        return user_id, start.session

    @pytest.mark.asyncio
    async def test_first_completion(self, db_path):
        user_id, session = await self._started(db_path)
        service = CompletionService(db_path)

        result = await service.complete(user_id, session.id, duration_minutes=38, now=NOW)

        assert result.total_workouts == 1
        assert result.completed_at == NOW
        names = {a.name for a in result.new_achievements}
        assert names == {"First Workout", "Intermediate Finisher"}
        data = result.to_dict()
        assert data["userWorkoutId"] == session.id
        assert data["workout"]["title"] == "Tempo Run"

    @pytest.mark.asyncio
    async def test_double_completion(self, db_path):
        user_id, session = await self._started(db_path)
        service = CompletionService(db_path)
        await service.complete(user_id, session.id, now=NOW)

        with pytest.raises(AlreadyCompletedError):
            await service.complete(user_id, session.id, now=NOW + timedelta(minutes=5))

        assert await CompletionRepository(db_path).count_completed(user_id) == 1

    @pytest.mark.asyncio
    async def test_concurrent_completion(self, db_path):
        user_id, session = await self._started(db_path)
        service = CompletionService(db_path)

        results = await asyncio.gather(
            service.complete(user_id, session.id, now=NOW),
            service.complete(user_id, session.id, now=NOW),
            return_exceptions=True,
        )

        errors = [r for r in results if isinstance(r, Exception)]
        assert len(errors) == 1
        assert isinstance(errors[0], AlreadyCompletedError)
        earned = await AchievementRepository(db_path).list_user_achievements(user_id)
        names = [ua.achievement.name for ua in earned]
        assert len(names) == len(set(names))

    @pytest.mark.asyncio
    async def test_concurrent_evaluation_awards_once(self, db_path):
        user_id, session = await self._started(db_path)
        session.complete(NOW)
        completions = CompletionRepository(db_path)
        await completions.mark_completed(session)
        achievements = AchievementRepository(db_path)
        awarder = AchievementAwarder(achievements, default_evaluators(completions))
        event = CompletionEvent(user_id=user_id, session=session, completed_at=NOW)

        first, second = await asyncio.gather(awarder.evaluate(event), awarder.evaluate(event))

        earned = await achievements.list_user_achievements(user_id)
        names = [ua.achievement.name for ua in earned]
        assert sorted(names) == ["First Workout", "Intermediate Finisher"]
        assert len(first) + len(second) == 2

    @pytest.mark.asyncio
    async def test_missing_session_reference(self, db_path):
        with pytest.raises(MissingDataError):
            await CompletionService(db_path).complete(1, None)

    @pytest.mark.asyncio
    async def test_negative_duration(self, db_path):
        user_id, session = await self._started(db_path)

        with pytest.raises(InvalidInputError):
            await CompletionService(db_path).complete(user_id, session.id, duration_minutes=-5)

        assert (await CompletionRepository(db_path).get(session.id)).completed_at is None

    @pytest.mark.asyncio
    async def test_foreign_session(self, db_path):
        owner, session = await self._started(db_path)
        intruder = await _add_user(db_path)

        with pytest.raises(UnauthorizedWorkoutError):
            await CompletionService(db_path).complete(intruder, session.id, now=NOW)

        assert await CompletionRepository(db_path).count_completed(owner) == 0

    @pytest.mark.asyncio
    async def test_unknown_user(self, db_path):
        _, session = await self._started(db_path)

        with pytest.raises(UserNotFoundError):
            await CompletionService(db_path).complete(999, session.id, now=NOW)

    @pytest.mark.asyncio
    async def test_failing_evaluator_keeps_completion(self, db_path):
        user_id, session = await self._started(db_path)

        class Broken(AchievementEvaluator):
            trigger_type = TriggerType.WORKOUT_COMPLETION_COUNT

            async def eligible(self, event, definitions):
                raise RuntimeError("boom")

        completions = CompletionRepository(db_path)
        evaluators = [Broken()] + default_evaluators(completions)[1:]
        service = CompletionService(db_path, evaluators=evaluators)

        result = await service.complete(user_id, session.id, now=NOW)

        assert result.total_workouts == 1
        assert [a.name for a in result.new_achievements] == ["Intermediate Finisher"]

    @pytest.mark.asyncio
    async def test_three_day_streak(self, db_path):
        ids = await _add_catalog(db_path)
        user_id = await _add_user(db_path)
        sessions = SessionService(db_path)
        service = CompletionService(db_path)

        awarded = []
        for day in (1, 2, 3):
            at = datetime(2024, 1, day, 7, 30)
            start = await sessions.start(user_id, ids["Core Foundations"], now=at)
            result = await service.complete(user_id, start.session.id, now=at)
            awarded.append({a.name for a in result.new_achievements})

        assert "3-Day Streak" not in awarded[1]
        assert "3-Day Streak" in awarded[2]

    @pytest.mark.asyncio
    async def test_completion_stats(self, db_path):
        user_id, session = await self._started(db_path)
        service = CompletionService(db_path)
        await service.complete(user_id, session.id, duration_minutes=41, now=NOW)

        stats = await service.get_completion_stats(
            user_id, session.id, now=NOW + timedelta(hours=1)
        )

        assert stats.total_workouts == 1
        assert stats.current_streak == 1
        data = stats.to_dict()
        assert data["completion"]["durationMinutes"] == 41
        assert {a["name"] for a in data["newAchievements"]} == {
            "First Workout",
            "Intermediate Finisher",
        }

    @pytest.mark.asyncio
    async def test_stats_for_foreign_session(self, db_path):
        _, session = await self._started(db_path)
        intruder = await _add_user(db_path)

        with pytest.raises(WorkoutNotFoundError):
            await CompletionService(db_path).get_completion_stats(intruder, session.id)

    @pytest.mark.asyncio
    async def test_count_failure_keeps_completion(self, db_path, monkeypatch):
        user_id, session = await self._started(db_path)
        service = CompletionService(db_path)

        async def unavailable(user_id):
            raise aiosqlite.OperationalError("database is locked")

        monkeypatch.setattr(service.completions, "count_completed", unavailable)

        result = await service.complete(user_id, session.id, now=NOW)

        assert result.total_workouts is None
        stored = await CompletionRepository(db_path).get(session.id)
        assert stored.completed_at == NOW
        # Evaluators that do not count still award
        assert [a.name for a in result.new_achievements] == ["Intermediate Finisher"]

    @pytest.mark.asyncio
    async def test_zero_duration_is_untracked(self, db_path):
        user_id, session = await self._started(db_path)

        await CompletionService(db_path).complete(
            user_id, session.id, duration_minutes=0, now=NOW
        )

        stored = await CompletionRepository(db_path).get(session.id)
        assert stored.completed_at == NOW
        assert stored.duration_minutes is None

    @pytest.mark.asyncio
    async def test_zero_session_reference(self, db_path):
        user_id, _ = await self._started(db_path)

        with pytest.raises(MissingDataError):
            await CompletionService(db_path).complete(user_id, 0, now=NOW)
        with pytest.raises(MissingDataError):
            await CompletionService(db_path).get_completion_stats(user_id, 0, now=NOW)
