"""Recommendation pipeline data models."""

from dataclasses import dataclass, field
from datetime import datetime

from .user_profile import DEFAULT_SESSION_DURATION
from .workouts import Difficulty, WorkoutDefinition, WorkoutFilters

DEFAULT_LIMIT = 6
MAX_LIMIT = 20


@dataclass
class HistoryAggregate:
    """Completion statistics for one (category, difficulty, duration) group."""

    category: str
    difficulty: Difficulty
    estimated_duration: int
    completion_count: int
    avg_actual_duration: float | None
    last_completed: datetime

    @property
    def typical_duration(self) -> float:
        """Average actual duration, falling back to the catalog estimate."""
        if self.avg_actual_duration is None:
            return float(self.estimated_duration)
        return self.avg_actual_duration


@dataclass
class HistorySummary:
    """Preferences derived from a user's history and explicit filters."""

    aggregates: list[HistoryAggregate]
    preferred_difficulty: Difficulty
    preferred_duration: int
    top_categories: list[str]
    historical_categories: list[str] = field(default_factory=list)
    recent_categories: list[str] = field(default_factory=list)
    # The user's stored session length, independent of history and filters
    stated_duration: int = DEFAULT_SESSION_DURATION

    @property
    def has_history(self) -> bool:
        return bool(self.aggregates)


@dataclass(frozen=True)
class ScoreBreakdown:
    """Per-factor contributions to a recommendation score."""

    difficulty: int
    duration: int
    category: int
    recency_penalty: int
    variety: int
    random: int
    base: int = 50

    @property
    def total(self) -> int:
        return (
            self.base
            + self.difficulty
            + self.duration
            + self.category
            + self.recency_penalty
            + self.variety
            + self.random
        )

    def to_dict(self) -> dict:
        return {
            "base": self.base,
            "difficulty": self.difficulty,
            "duration": self.duration,
            "category": self.category,
            "recencyPenalty": self.recency_penalty,
            "variety": self.variety,
            "random": self.random,
            "total": self.total,
        }


@dataclass(frozen=True)
class ScoredWorkout:
    """A candidate workout with its score."""

    workout: WorkoutDefinition
    breakdown: ScoreBreakdown

    @property
    def total_score(self) -> int:
        return self.breakdown.total


@dataclass
class Recommendation:
    """A ranked workout with the reasons it was picked."""

    workout: WorkoutDefinition
    score: int
    reasons: list[str]

    def to_dict(self) -> dict:
        data = self.workout.to_dict()
        data["recommendationScore"] = self.score
        data["reasons"] = list(self.reasons)
        return data


@dataclass
class RecommendationQuery:
    """Caller-supplied recommendation options."""

    limit: int = DEFAULT_LIMIT
    difficulty: Difficulty | None = None
    category: str | None = None
    duration: int | None = None

    @property
    def filters(self) -> WorkoutFilters:
        return WorkoutFilters(
            difficulty=self.difficulty,
            category=self.category,
            duration=self.duration,
        )


@dataclass
class WeeklyProgress:
    """Completions this week against the user's goal."""

    completed: int
    goal: int

    @property
    def remaining(self) -> int:
        return max(self.goal - self.completed, 0)

    def to_dict(self) -> dict:
        return {"completed": self.completed, "goal": self.goal, "remaining": self.remaining}


@dataclass
class RecommendationContext:
    """Profile and progress context returned with recommendations."""

    fitness_level: Difficulty
    preferred_duration: int
    weekly_progress: WeeklyProgress
    top_categories: list[str]
    has_history: bool

    def to_dict(self) -> dict:
        return {
            "fitnessLevel": self.fitness_level.value,
            "preferredDuration": self.preferred_duration,
            "weeklyProgress": self.weekly_progress.to_dict(),
            "topCategories": list(self.top_categories),
            "hasHistory": self.has_history,
        }


@dataclass
class RecommendationResult:
    """Output of the recommendation pipeline."""

    recommendations: list[Recommendation]
    context: RecommendationContext

    def to_dict(self) -> dict:
        return {
            "recommendations": [r.to_dict() for r in self.recommendations],
            "context": self.context.to_dict(),
        }
