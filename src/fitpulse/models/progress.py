"""Completion and progress result models."""

from dataclasses import dataclass, field
from datetime import datetime

from .achievements import Achievement, UserAchievement
from .workouts import CompletionRecord


@dataclass
class CompletionResult:
    """Outcome of completing a workout session.

    ``total_workouts`` is None only when the lifetime count could not be
    read back after the completion was committed.
    """

    session: CompletionRecord
    completed_at: datetime
    total_workouts: int | None
    new_achievements: list[Achievement] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary for API output."""
        workout = self.session.workout
        return {
            "userWorkoutId": self.session.id,
            "completedAt": self.completed_at.isoformat(),
            "totalWorkouts": self.total_workouts,
            "workout": {
                "id": self.session.workout_id,
                "title": workout.title if workout else None,
                "difficulty": workout.difficulty.value if workout else None,
            },
            "newAchievements": [a.to_dict() for a in self.new_achievements],
        }


@dataclass
class SessionStart:
    """Outcome of starting (or resuming) a workout session."""

    session: CompletionRecord
    is_resuming: bool

    def to_dict(self) -> dict:
        data = {
            "userWorkoutId": self.session.id,
            "isResuming": self.is_resuming,
            "session": self.session.to_dict(),
        }
        if self.session.workout:
            data["workout"] = self.session.workout.to_dict()
        return data


@dataclass
class CompletionStats:
    """Post-completion summary shown to the user."""

    session: CompletionRecord
    total_workouts: int
    current_streak: int
    recent_achievements: list[UserAchievement] = field(default_factory=list)

    def to_dict(self) -> dict:
        workout = self.session.workout
        return {
            "workout": {
                "id": self.session.workout_id,
                "title": workout.title if workout else None,
                "difficulty": workout.difficulty.value if workout else None,
            },
            "completion": {
                "completedAt": (
                    self.session.completed_at.isoformat()
                    if self.session.completed_at
                    else None
                ),
                "durationMinutes": self.session.duration_minutes,
                "notes": self.session.notes,
            },
            "totalWorkouts": self.total_workouts,
            "currentStreak": self.current_streak,
            "newAchievements": [ua.to_dict() for ua in self.recent_achievements],
        }
