"""Ranking of scored candidates."""

from ..exceptions import InvalidInputError
from ..models.recommendation import DEFAULT_LIMIT, MAX_LIMIT, ScoredWorkout


def effective_limit(limit: int) -> int:
    """Validate a requested limit and apply the hard cap."""
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise InvalidInputError(
            "limit must be a positive integer", details={"limit": limit}
        )
    return min(limit, MAX_LIMIT)


def rank(scored: list[ScoredWorkout], limit: int = DEFAULT_LIMIT) -> list[ScoredWorkout]:
    """Order by total score, newest catalog entry first on ties, and truncate."""
    count = effective_limit(limit)
    ordered = sorted(
        scored,
        key=lambda s: (s.total_score, s.workout.created_at),
        reverse=True,
    )
    return ordered[:count]
