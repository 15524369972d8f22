"""Human-readable reasons for recommended workouts."""

from collections.abc import Callable

from ..models.recommendation import HistorySummary
from ..models.workouts import Difficulty, WorkoutDefinition

MAX_REASONS = 2
DURATION_MATCH_MINUTES = 5
HIGH_SCORE = 80

_PROGRESSION_MESSAGES = {
    Difficulty.INTERMEDIATE: "Perfect next step to challenge yourself",
    Difficulty.ADVANCED: "Ready for the next level",
}

ReasonRule = Callable[[WorkoutDefinition, int, HistorySummary], str | None]


def _difficulty_reason(
    workout: WorkoutDefinition, score: int, summary: HistorySummary
) -> str | None:
    preferred = summary.preferred_difficulty
    if workout.difficulty == preferred:
        return f"Matches your {workout.difficulty.value} fitness level"
    if workout.difficulty == preferred.next_tier:
        return _PROGRESSION_MESSAGES[workout.difficulty]
    return None


def _duration_reason(
    workout: WorkoutDefinition, score: int, summary: HistorySummary
) -> str | None:
    preferred = summary.stated_duration
    if abs(workout.estimated_duration - preferred) <= DURATION_MATCH_MINUTES:
        return "Perfect duration for your schedule"
    if workout.estimated_duration < preferred:
        return "Quick workout option"
    return None


def _category_reason(
    workout: WorkoutDefinition, score: int, summary: HistorySummary
) -> str | None:
    if workout.category in summary.historical_categories:
        return f"You enjoy {workout.category} workouts"
    return None


def _novelty_reason(
    workout: WorkoutDefinition, score: int, summary: HistorySummary
) -> str | None:
    if workout.category not in summary.recent_categories:
        return "Try something new"
    return None


def _score_reason(
    workout: WorkoutDefinition, score: int, summary: HistorySummary
) -> str | None:
    if score >= HIGH_SCORE:
        return "Highly recommended for you"
    return None


# Evaluated in this order; the first MAX_REASONS matches are kept
REASON_RULES: list[ReasonRule] = [
    _difficulty_reason,
    _duration_reason,
    _category_reason,
    _novelty_reason,
    _score_reason,
]


def generate_reasons(
    workout: WorkoutDefinition,
    total_score: int,
    summary: HistorySummary,
    rules: list[ReasonRule] = REASON_RULES,
) -> list[str]:
    """Collect up to two reasons, in rule order, without padding."""
    reasons: list[str] = []
    for rule in rules:
        reason = rule(workout, total_score, summary)
        if reason is not None:
            reasons.append(reason)
        if len(reasons) == MAX_REASONS:
            break
    return reasons
