"""Workout catalog and completion record models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from ..exceptions import AlreadyCompletedError


class Difficulty(str, Enum):
    """Workout difficulty tier, also used as a user's fitness level."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

    @property
    def next_tier(self) -> "Difficulty | None":
        """The tier one step harder, or None at the top."""
        tiers = list(Difficulty)
        index = tiers.index(self)
        if index + 1 < len(tiers):
            return tiers[index + 1]
        return None


class SessionStatus(str, Enum):
    """Lifecycle state of a completion record."""

    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass(frozen=True)
class WorkoutDefinition:
    """A workout from the catalog."""

    id: int
    title: str
    difficulty: Difficulty
    category: str
    estimated_duration: int  # minutes
    created_at: datetime
    description: str = ""
    equipment: frozenset[str] = field(default_factory=frozenset)

    def to_dict(self) -> dict:
        """Convert to dictionary for API output."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "difficulty": self.difficulty.value,
            "category": self.category,
            "estimatedDuration": self.estimated_duration,
            "equipmentNeeded": sorted(self.equipment),
            "createdAt": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict, id: int | None = None) -> "WorkoutDefinition":
        """Create from dictionary."""
        created_at = data.get("created_at")
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        return cls(
            id=id if id is not None else data["id"],
            title=data["title"],
            description=data.get("description", ""),
            difficulty=Difficulty(data["difficulty"]),
            category=data["category"],
            estimated_duration=data["estimated_duration"],
            equipment=frozenset(data.get("equipment", [])),
            created_at=created_at or datetime.now(),
        )


@dataclass(frozen=True)
class WorkoutFilters:
    """Explicit caller filters over the catalog.

    Storage collaborators translate this into their own query form; the
    same predicate is available in memory through ``matches``.
    """

    difficulty: Difficulty | None = None
    category: str | None = None
    duration: int | None = None  # minutes, widened to +/- DURATION_WINDOW

    DURATION_WINDOW = 10
    MIN_DURATION = 5

    @property
    def duration_range(self) -> tuple[int, int] | None:
        """Inclusive (low, high) duration bounds, or None without a duration."""
        if self.duration is None:
            return None
        low = max(self.duration - self.DURATION_WINDOW, self.MIN_DURATION)
        return low, self.duration + self.DURATION_WINDOW

    def matches(self, workout: WorkoutDefinition) -> bool:
        """Check whether a workout satisfies every filter that is set."""
        if self.difficulty is not None and workout.difficulty != self.difficulty:
            return False
        if self.category is not None and workout.category != self.category:
            return False
        bounds = self.duration_range
        if bounds is not None:
            low, high = bounds
            if not low <= workout.estimated_duration <= high:
                return False
        return True


@dataclass
class CompletionRecord:
    """A user's workout session, in progress or completed.

    ``completed_at`` is written once; ``complete`` refuses a second call.
    """

    user_id: int
    workout_id: int
    started_at: datetime
    completed_at: datetime | None = None
    duration_minutes: int | None = None
    notes: str | None = None
    id: int | None = None
    workout: WorkoutDefinition | None = None

    @property
    def status(self) -> SessionStatus:
        if self.completed_at is None:
            return SessionStatus.IN_PROGRESS
        return SessionStatus.COMPLETED

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None

    def complete(
        self,
        completed_at: datetime,
        duration_minutes: int | None = None,
        notes: str | None = None,
    ) -> None:
        """Move the session from in_progress to completed.

        Raises:
            AlreadyCompletedError: If the session was already completed
        """
        if self.completed_at is not None:
            raise AlreadyCompletedError(
                "Workout is already completed",
                details={"session_id": self.id},
            )
        self.completed_at = completed_at
        self.duration_minutes = duration_minutes
        self.notes = notes

    def to_dict(self) -> dict:
        """Convert to dictionary for API output."""
        return {
            "id": self.id,
            "userId": self.user_id,
            "workoutId": self.workout_id,
            "status": self.status.value,
            "startedAt": self.started_at.isoformat(),
            "completedAt": self.completed_at.isoformat() if self.completed_at else None,
            "durationMinutes": self.duration_minutes,
            "notes": self.notes,
        }


def _workout(
    title: str,
    difficulty: Difficulty,
    category: str,
    duration: int,
    description: str,
    equipment: list[str] | None = None,
) -> dict:
    return {
        "title": title,
        "description": description,
        "difficulty": difficulty.value,
        "category": category,
        "estimated_duration": duration,
        "equipment": equipment or [],
    }


# Sample catalog used by `fitpulse init --sample`
SAMPLE_WORKOUTS = [
    _workout("Morning Mobility Flow", Difficulty.BEGINNER, "flexibility", 15,
             "Gentle full-body mobility to start the day."),
    _workout("Beginner Full Body", Difficulty.BEGINNER, "strength", 30,
             "Bodyweight basics for all major muscle groups."),
    _workout("Brisk Walk Intervals", Difficulty.BEGINNER, "cardio", 25,
             "Alternating brisk and easy walking."),
    _workout("Core Foundations", Difficulty.BEGINNER, "core", 20,
             "Planks, bridges and dead bugs.", ["mat"]),
    _workout("Dumbbell Upper Body", Difficulty.INTERMEDIATE, "strength", 40,
             "Presses, rows and curls with dumbbells.", ["dumbbells"]),
    _workout("Cardio Kickboxing", Difficulty.INTERMEDIATE, "cardio", 45,
             "Punch and kick combinations at a steady pace."),
    _workout("HIIT Express", Difficulty.INTERMEDIATE, "hiit", 20,
             "Short, intense intervals with minimal rest."),
    _workout("Vinyasa Yoga", Difficulty.INTERMEDIATE, "flexibility", 50,
             "Flowing sequence linking breath and movement.", ["mat"]),
    _workout("Tempo Run", Difficulty.INTERMEDIATE, "cardio", 35,
             "Sustained comfortably-hard running effort."),
    _workout("Kettlebell Power", Difficulty.ADVANCED, "strength", 45,
             "Swings, cleans and snatches for power.", ["kettlebell"]),
    _workout("Sprint Ladder", Difficulty.ADVANCED, "cardio", 55,
             "Progressive sprint ladder with full recovery.", []),
    _workout("Tabata Inferno", Difficulty.ADVANCED, "hiit", 30,
             "Eight rounds of twenty seconds on, ten off."),
]
