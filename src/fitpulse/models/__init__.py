"""Data models for fitpulse."""

from .achievements import Achievement, TriggerType, UserAchievement
from .progress import CompletionResult, CompletionStats, SessionStart
from .recommendation import (
    HistoryAggregate,
    HistorySummary,
    Recommendation,
    RecommendationContext,
    RecommendationQuery,
    RecommendationResult,
    ScoreBreakdown,
    ScoredWorkout,
    WeeklyProgress,
)
from .user_profile import UserProfile
from .workouts import (
    CompletionRecord,
    Difficulty,
    SessionStatus,
    WorkoutDefinition,
    WorkoutFilters,
)

__all__ = [
    "Achievement",
    "CompletionRecord",
    "CompletionResult",
    "CompletionStats",
    "Difficulty",
    "HistoryAggregate",
    "HistorySummary",
    "Recommendation",
    "RecommendationContext",
    "RecommendationQuery",
    "RecommendationResult",
    "ScoreBreakdown",
    "ScoredWorkout",
    "SessionStart",
    "SessionStatus",
    "TriggerType",
    "UserAchievement",
    "UserProfile",
    "WeeklyProgress",
    "WorkoutDefinition",
    "WorkoutFilters",
]
