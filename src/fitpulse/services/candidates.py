"""Candidate selection for recommendations.

Explicit caller filters are hard predicates. Recently completed workouts
stay in the candidate list; they are only penalized during scoring.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from ..models.workouts import CompletionRecord, WorkoutDefinition, WorkoutFilters

RECENT_WINDOW = timedelta(days=7)
VARIETY_WINDOW = timedelta(days=3)


@dataclass
class CandidateSet:
    """Eligible workouts plus the recency inputs used by the scorer."""

    candidates: list[WorkoutDefinition]
    recent_ids: frozenset[int]
    recent_categories: frozenset[str]


def _completed_since(
    records: list[CompletionRecord], since: datetime
) -> list[CompletionRecord]:
    return [
        r for r in records if r.completed_at is not None and r.completed_at >= since
    ]


def recent_workout_ids(
    records: list[CompletionRecord],
    now: datetime,
    window: timedelta = RECENT_WINDOW,
) -> frozenset[int]:
    """IDs of workouts completed within the trailing window."""
    return frozenset(r.workout_id for r in _completed_since(records, now - window))


def recent_categories(
    records: list[CompletionRecord],
    now: datetime,
    window: timedelta = VARIETY_WINDOW,
) -> frozenset[str]:
    """Categories completed within the trailing window."""
    return frozenset(
        r.workout.category
        for r in _completed_since(records, now - window)
        if r.workout is not None
    )


def filter_candidates(
    catalog: list[WorkoutDefinition], filters: WorkoutFilters | None = None
) -> list[WorkoutDefinition]:
    """Keep the catalog entries that satisfy every explicit filter."""
    if filters is None:
        return list(catalog)
    return [w for w in catalog if filters.matches(w)]


def select_candidates(
    catalog: list[WorkoutDefinition],
    records: list[CompletionRecord],
    filters: WorkoutFilters | None,
    now: datetime,
) -> CandidateSet:
    """Build the candidate set for one recommendation request."""
    return CandidateSet(
        candidates=filter_candidates(catalog, filters),
        recent_ids=recent_workout_ids(records, now),
        recent_categories=recent_categories(records, now),
    )
