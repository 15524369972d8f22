"""Achievement definitions and awards."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .workouts import Difficulty


class TriggerType(str, Enum):
    """What kind of event unlocks an achievement."""

    WORKOUT_COMPLETION_COUNT = "workout_completion_count"
    STREAK = "streak"
    DIFFICULTY_COMPLETION = "difficulty_completion"


# Only thresholds on these ladders are ever awarded
COMPLETION_COUNT_MILESTONES = (1, 5, 10, 25, 50, 100, 250, 500, 1000)
STREAK_MILESTONES = (3, 7, 14, 30, 60, 100)


@dataclass(frozen=True)
class Achievement:
    """An achievement that users can earn once."""

    id: int
    name: str
    trigger_type: TriggerType
    description: str = ""
    threshold: int | None = None  # count and streak triggers
    difficulty: Difficulty | None = None  # difficulty_completion trigger

    def to_dict(self) -> dict:
        """Convert to dictionary for API output."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "triggerType": self.trigger_type.value,
            "threshold": self.threshold,
            "difficulty": self.difficulty.value if self.difficulty else None,
        }


@dataclass(frozen=True)
class UserAchievement:
    """An achievement earned by a user."""

    user_id: int
    achievement: Achievement
    earned_at: datetime

    def to_dict(self) -> dict:
        data = self.achievement.to_dict()
        data["earnedAt"] = self.earned_at.isoformat()
        return data


def _default_achievements() -> list[dict]:
    """Build the seed ladder: one achievement per milestone and tier."""
    rows = []
    for count in COMPLETION_COUNT_MILESTONES:
        name = "First Workout" if count == 1 else f"{count} Workouts"
        rows.append({
            "name": name,
            "description": f"Complete {count} workout{'s' if count > 1 else ''}",
            "trigger_type": TriggerType.WORKOUT_COMPLETION_COUNT.value,
            "threshold": count,
            "difficulty": None,
        })
    for days in STREAK_MILESTONES:
        rows.append({
            "name": f"{days}-Day Streak",
            "description": f"Work out {days} days in a row",
            "trigger_type": TriggerType.STREAK.value,
            "threshold": days,
            "difficulty": None,
        })
    for tier in Difficulty:
        rows.append({
            "name": f"{tier.value.title()} Finisher",
            "description": f"Complete an {tier.value} workout"
            if tier.value[0] in "aeiou"
            else f"Complete a {tier.value} workout",
            "trigger_type": TriggerType.DIFFICULTY_COMPLETION.value,
            "threshold": None,
            "difficulty": tier.value,
        })
    return rows


DEFAULT_ACHIEVEMENTS = _default_achievements()
