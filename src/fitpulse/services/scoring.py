"""Multi-factor workout scoring."""

import random
from typing import Protocol

from ..models.recommendation import HistorySummary, ScoreBreakdown, ScoredWorkout
from ..models.workouts import Difficulty, WorkoutDefinition
from .candidates import CandidateSet

BASE_SCORE = 50
DIFFICULTY_MATCH_SCORE = 20
DIFFICULTY_ADJACENT_SCORE = 10
DURATION_CLOSE_SCORE = 15
DURATION_CLOSE_MINUTES = 15
DURATION_NEAR_SCORE = 8
DURATION_NEAR_MINUTES = 30
CATEGORY_SCORE = 15
RECENCY_PENALTY = -30
VARIETY_SCORE = 10
RANDOM_BOUND = 10


class RandomSource(Protocol):
    """Source of the discovery jitter."""

    def next_int(self, bound: int) -> int:
        """Return a uniformly random integer in [0, bound)."""
        ...


class SystemRandomSource:
    """RandomSource backed by ``random.Random``; pass a seed for repeatability."""

    def __init__(self, seed: int | None = None):
        self._rng = random.Random(seed)

    def next_int(self, bound: int) -> int:
        return self._rng.randrange(bound)


def difficulty_score(candidate: Difficulty, preferred: Difficulty) -> int:
    if candidate == preferred:
        return DIFFICULTY_MATCH_SCORE
    if candidate == Difficulty.INTERMEDIATE and preferred in (
        Difficulty.BEGINNER,
        Difficulty.ADVANCED,
    ):
        return DIFFICULTY_ADJACENT_SCORE
    return 0


def duration_score(candidate_minutes: int, preferred_minutes: int) -> int:
    gap = abs(candidate_minutes - preferred_minutes)
    if gap <= DURATION_CLOSE_MINUTES:
        return DURATION_CLOSE_SCORE
    if gap <= DURATION_NEAR_MINUTES:
        return DURATION_NEAR_SCORE
    return 0


def score_workout(
    workout: WorkoutDefinition,
    summary: HistorySummary,
    recent_ids: frozenset[int],
    recent_categories: frozenset[str],
    random_value: int,
) -> ScoreBreakdown:
    """Score one candidate for a given random draw.

    Pure: the same inputs always give the same breakdown.
    """
    return ScoreBreakdown(
        base=BASE_SCORE,
        difficulty=difficulty_score(workout.difficulty, summary.preferred_difficulty),
        duration=duration_score(workout.estimated_duration, summary.preferred_duration),
        category=CATEGORY_SCORE if workout.category in summary.top_categories else 0,
        recency_penalty=RECENCY_PENALTY if workout.id in recent_ids else 0,
        variety=0 if workout.category in recent_categories else VARIETY_SCORE,
        random=random_value,
    )


class ScoringEngine:
    """Scores candidate workouts against a user's history summary."""

    def __init__(self, random_source: RandomSource | None = None):
        self.random_source = random_source or SystemRandomSource()

    def score(
        self, candidate_set: CandidateSet, summary: HistorySummary
    ) -> list[ScoredWorkout]:
        """Score every candidate, drawing a fresh random term for each."""
        return [
            ScoredWorkout(
                workout=workout,
                breakdown=score_workout(
                    workout,
                    summary,
                    candidate_set.recent_ids,
                    candidate_set.recent_categories,
                    self.random_source.next_int(RANDOM_BOUND),
                ),
            )
            for workout in candidate_set.candidates
        ]
