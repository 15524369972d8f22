"""History analysis: aggregate completions and derive preferences."""

import math
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime

from ..models.recommendation import HistoryAggregate, HistorySummary
from ..models.user_profile import (
    DEFAULT_FITNESS_LEVEL,
    DEFAULT_SESSION_DURATION,
    UserProfile,
)
from ..models.workouts import CompletionRecord, Difficulty, WorkoutFilters

TOP_CATEGORY_COUNT = 3
RECENT_CATEGORY_COUNT = 3

# Progression thresholds on completion counts per difficulty
ADVANCED_RETAIN_THRESHOLD = 3
PROMOTION_THRESHOLD = 5


@dataclass
class _Group:
    count: int = 0
    actual_durations: list[int] = field(default_factory=list)
    last_completed: datetime | None = None


def aggregate_history(records: list[CompletionRecord]) -> list[HistoryAggregate]:
    """Group completed records by (category, difficulty, estimated duration).

    Records that are not completed or carry no workout are skipped. Rows
    are ordered by completion count, then most recent completion, both
    descending.
    """
    groups: dict[tuple[str, Difficulty, int], _Group] = {}
    for record in records:
        if record.completed_at is None or record.workout is None:
            continue
        workout = record.workout
        key = (workout.category, workout.difficulty, workout.estimated_duration)
        group = groups.setdefault(key, _Group())
        group.count += 1
        if record.duration_minutes is not None:
            group.actual_durations.append(record.duration_minutes)
        if group.last_completed is None or record.completed_at > group.last_completed:
            group.last_completed = record.completed_at

    aggregates = [
        HistoryAggregate(
            category=category,
            difficulty=difficulty,
            estimated_duration=duration,
            completion_count=group.count,
            avg_actual_duration=(
                sum(group.actual_durations) / len(group.actual_durations)
                if group.actual_durations
                else None
            ),
            last_completed=group.last_completed,
        )
        for (category, difficulty, duration), group in groups.items()
    ]
    aggregates.sort(key=lambda a: a.last_completed, reverse=True)
    aggregates.sort(key=lambda a: a.completion_count, reverse=True)
    return aggregates


def preferred_difficulty(
    aggregates: list[HistoryAggregate],
    profile: UserProfile | None,
    explicit: Difficulty | None = None,
) -> Difficulty:
    """Pick the difficulty to target.

    An explicit filter wins. Otherwise users who keep completing one tier
    are promoted to the next; everyone else gets their stored fitness level.
    """
    if explicit is not None:
        return explicit

    counts = Counter()
    for aggregate in aggregates:
        counts[aggregate.difficulty] += aggregate.completion_count

    advanced = counts[Difficulty.ADVANCED]
    intermediate = counts[Difficulty.INTERMEDIATE]
    beginner = counts[Difficulty.BEGINNER]

    if advanced > ADVANCED_RETAIN_THRESHOLD:
        return Difficulty.ADVANCED
    if intermediate > PROMOTION_THRESHOLD and advanced == 0:
        return Difficulty.ADVANCED
    if beginner > PROMOTION_THRESHOLD and intermediate == 0:
        return Difficulty.INTERMEDIATE

    if profile is not None:
        return profile.effective_fitness_level
    return DEFAULT_FITNESS_LEVEL


def preferred_duration(
    aggregates: list[HistoryAggregate],
    profile: UserProfile | None,
    explicit: int | None = None,
) -> int:
    """Pick the session length to target, in minutes."""
    if explicit is not None:
        return explicit
    if aggregates:
        mean = sum(a.typical_duration for a in aggregates) / len(aggregates)
        # Half-up, so 32.5 becomes 33
        return math.floor(mean + 0.5)
    if profile is not None:
        return profile.effective_duration
    return DEFAULT_SESSION_DURATION


def top_categories(
    aggregates: list[HistoryAggregate], count: int = TOP_CATEGORY_COUNT
) -> list[str]:
    """Categories by total completions, descending; ties keep input order."""
    totals: dict[str, int] = {}
    for aggregate in aggregates:
        totals[aggregate.category] = (
            totals.get(aggregate.category, 0) + aggregate.completion_count
        )
    ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
    return [category for category, _ in ranked[:count]]


def recent_categories(
    aggregates: list[HistoryAggregate], count: int = RECENT_CATEGORY_COUNT
) -> list[str]:
    """Distinct categories of the most recently completed groups."""
    result: list[str] = []
    for aggregate in sorted(aggregates, key=lambda a: a.last_completed, reverse=True):
        if aggregate.category not in result:
            result.append(aggregate.category)
        if len(result) == count:
            break
    return result


def analyze_history(
    records: list[CompletionRecord],
    profile: UserProfile | None,
    filters: WorkoutFilters | None = None,
) -> HistorySummary:
    """Aggregate a user's completions and derive their preferences."""
    filters = filters or WorkoutFilters()
    aggregates = aggregate_history(records)

    historical: list[str] = []
    for aggregate in aggregates:
        if aggregate.category not in historical:
            historical.append(aggregate.category)

    return HistorySummary(
        aggregates=aggregates,
        preferred_difficulty=preferred_difficulty(
            aggregates, profile, filters.difficulty
        ),
        preferred_duration=preferred_duration(aggregates, profile, filters.duration),
        top_categories=top_categories(aggregates),
        historical_categories=historical,
        recent_categories=recent_categories(aggregates),
        stated_duration=(
            profile.effective_duration if profile else DEFAULT_SESSION_DURATION
        ),
    )
