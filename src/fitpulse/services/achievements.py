"""Post-completion achievement evaluation.

Each evaluator handles one trigger type and decides which of its
achievement definitions the user now qualifies for. The awarder runs the
evaluators in order; a failing evaluator is logged and skipped so the
others still run.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from loguru import logger

from ..db.repositories import AchievementRepository, CompletionRepository
from ..models.achievements import (
    COMPLETION_COUNT_MILESTONES,
    STREAK_MILESTONES,
    Achievement,
    TriggerType,
)
from ..models.workouts import CompletionRecord
from .streaks import current_streak


@dataclass
class CompletionEvent:
    """A session that was just completed."""

    user_id: int
    session: CompletionRecord
    completed_at: datetime


class AchievementEvaluator(ABC):
    """Decides eligibility for one trigger type."""

    trigger_type: TriggerType

    @property
    def name(self) -> str:
        return self.__class__.__name__

    @abstractmethod
    async def eligible(
        self, event: CompletionEvent, definitions: list[Achievement]
    ) -> list[Achievement]:
        """Return the definitions the user qualifies for after ``event``."""


class CompletionCountEvaluator(AchievementEvaluator):
    """Lifetime completion count milestones."""

    trigger_type = TriggerType.WORKOUT_COMPLETION_COUNT

    def __init__(self, completions: CompletionRepository):
        self.completions = completions

    async def eligible(
        self, event: CompletionEvent, definitions: list[Achievement]
    ) -> list[Achievement]:
        total = await self.completions.count_completed(event.user_id)
        logger.debug(f"User {event.user_id} has {total} completed workouts")
        return [
            a
            for a in definitions
            if a.threshold in COMPLETION_COUNT_MILESTONES and a.threshold <= total
        ]


class StreakEvaluator(AchievementEvaluator):
    """Consecutive-day streak milestones."""

    trigger_type = TriggerType.STREAK

    def __init__(self, completions: CompletionRepository):
        self.completions = completions

    async def eligible(
        self, event: CompletionEvent, definitions: list[Achievement]
    ) -> list[Achievement]:
        dates = await self.completions.get_completion_dates(event.user_id)
        streak = current_streak(dates, event.completed_at.date())
        logger.debug(f"User {event.user_id} is on a {streak}-day streak")
        return [
            a
            for a in definitions
            if a.threshold in STREAK_MILESTONES and a.threshold <= streak
        ]


class DifficultyCompletionEvaluator(AchievementEvaluator):
    """One-time achievements for finishing a workout of a given tier."""

    trigger_type = TriggerType.DIFFICULTY_COMPLETION

    async def eligible(
        self, event: CompletionEvent, definitions: list[Achievement]
    ) -> list[Achievement]:
        workout = event.session.workout
        if workout is None:
            return []
        return [a for a in definitions if a.difficulty == workout.difficulty]


def default_evaluators(completions: CompletionRepository) -> list[AchievementEvaluator]:
    """Count, streak and difficulty evaluators, in that order."""
    return [
        CompletionCountEvaluator(completions),
        StreakEvaluator(completions),
        DifficultyCompletionEvaluator(),
    ]


class AchievementAwarder:
    """Runs evaluators and awards newly earned achievements exactly once."""

    def __init__(
        self,
        achievements: AchievementRepository,
        evaluators: list[AchievementEvaluator],
    ):
        self.achievements = achievements
        self.evaluators = evaluators

    async def evaluate(self, event: CompletionEvent) -> list[Achievement]:
        """Award every achievement the event unlocks.

        Returns:
            Achievements inserted by this call; awards that already existed
            or were inserted concurrently by another trigger are left out
        """
        awarded: list[Achievement] = []
        for evaluator in self.evaluators:
            try:
                awarded.extend(await self._run(evaluator, event))
            except Exception:
                logger.exception(
                    f"{evaluator.name} failed for session {event.session.id}; "
                    "completion is kept"
                )
        return awarded

    async def _run(
        self, evaluator: AchievementEvaluator, event: CompletionEvent
    ) -> list[Achievement]:
        definitions = await self.achievements.list_definitions(evaluator.trigger_type)
        if not definitions:
            return []

        awarded = []
        for achievement in await evaluator.eligible(event, definitions):
            if await self.achievements.has_user_achievement(event.user_id, achievement.id):
                continue
            inserted = await self.achievements.award_if_absent(
                event.user_id, achievement.id, event.completed_at
            )
            if inserted:
                logger.info(f"User {event.user_id} earned '{achievement.name}'")
                awarded.append(achievement)
        return awarded
