"""User profile data model."""

from dataclasses import dataclass
from datetime import datetime

from .workouts import Difficulty

DEFAULT_FITNESS_LEVEL = Difficulty.INTERMEDIATE
DEFAULT_SESSION_DURATION = 30  # minutes
DEFAULT_WEEKLY_GOAL = 3


@dataclass
class UserProfile:
    """A user's stated training preferences.

    Every preference is optional; the ``effective_*`` properties apply the
    defaults used when a user never filled them in.
    """

    name: str
    fitness_level: Difficulty | None = None
    preferred_duration: int | None = None  # Minutes per session
    weekly_goal: int | None = None  # Workouts per week
    id: int | None = None
    created_at: datetime | None = None

    @property
    def effective_fitness_level(self) -> Difficulty:
        return self.fitness_level or DEFAULT_FITNESS_LEVEL

    @property
    def effective_duration(self) -> int:
        return self.preferred_duration or DEFAULT_SESSION_DURATION

    @property
    def effective_weekly_goal(self) -> int:
        return self.weekly_goal or DEFAULT_WEEKLY_GOAL

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "name": self.name,
            "fitness_level": self.fitness_level.value if self.fitness_level else None,
            "preferred_duration": self.preferred_duration,
            "weekly_goal": self.weekly_goal,
        }

    @classmethod
    def from_dict(
        cls,
        data: dict,
        id: int | None = None,
        created_at: datetime | None = None,
    ) -> "UserProfile":
        """Create from dictionary."""
        level = data.get("fitness_level")
        return cls(
            id=id,
            name=data["name"],
            fitness_level=Difficulty(level) if level else None,
            preferred_duration=data.get("preferred_duration"),
            weekly_goal=data.get("weekly_goal"),
            created_at=created_at,
        )

    def get_summary(self) -> str:
        """Generate a one-line summary for CLI output."""
        return (
            f"{self.name}: {self.effective_fitness_level.value}, "
            f"{self.effective_duration} min/session, "
            f"{self.effective_weekly_goal} workouts/week"
        )
