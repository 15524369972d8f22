"""Data access layer for fitpulse.

These repositories are the storage collaborators of the recommendation and
completion pipelines. Timestamps are stored as ISO-8601 text written by
Python so that windows and streaks are computed against the caller's clock.
"""

import json
from datetime import date, datetime
from pathlib import Path

import aiosqlite

from ..models.achievements import Achievement, TriggerType, UserAchievement
from ..models.user_profile import UserProfile
from ..models.workouts import (
    CompletionRecord,
    Difficulty,
    WorkoutDefinition,
    WorkoutFilters,
)
from .engine import get_db_path

_SESSION_COLUMNS = """
    uw.id, uw.user_id, uw.workout_id, uw.started_at, uw.completed_at,
    uw.duration_minutes, uw.notes,
    w.id AS w_id, w.title AS w_title, w.description AS w_description,
    w.difficulty AS w_difficulty, w.category AS w_category,
    w.estimated_duration AS w_estimated_duration, w.equipment AS w_equipment,
    w.created_at AS w_created_at
"""


def _parse_ts(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


class UserProfileRepository:
    """Repository for user profiles."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def create(self, profile: UserProfile) -> int:
        """Create a new user profile."""
        data = profile.to_dict()
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                """
                INSERT INTO user_profiles
                (name, fitness_level, preferred_duration, weekly_goal)
                VALUES (?, ?, ?, ?)
                """,
                (
                    data["name"],
                    data["fitness_level"],
                    data["preferred_duration"],
                    data["weekly_goal"],
                ),
            )
            await db.commit()
            return cursor.lastrowid

    async def get(self, user_id: int) -> UserProfile | None:
        """Get a user profile by ID."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                "SELECT * FROM user_profiles WHERE id = ?", (user_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_profile(row)

    async def list_all(self) -> list[UserProfile]:
        """List all user profiles."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute("SELECT * FROM user_profiles ORDER BY id")
            rows = await cursor.fetchall()
            return [self._row_to_profile(row) for row in rows]

    def _row_to_profile(self, row: aiosqlite.Row) -> UserProfile:
        """Convert a database row to a UserProfile."""
        data = {
            "name": row["name"],
            "fitness_level": row["fitness_level"],
            "preferred_duration": row["preferred_duration"],
            "weekly_goal": row["weekly_goal"],
        }
        return UserProfile.from_dict(
            data,
            id=row["id"],
            created_at=_parse_ts(row["created_at"]),
        )


class WorkoutRepository:
    """Repository for the workout catalog."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def add(self, data: dict, created_at: datetime | None = None) -> int | None:
        """Add a workout. Returns its ID, or None if the title already exists."""
        created_at = created_at or datetime.now()
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                """
                INSERT OR IGNORE INTO workouts
                (title, description, difficulty, category, estimated_duration,
                 equipment, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    data["title"],
                    data.get("description", ""),
                    data["difficulty"],
                    data["category"],
                    data["estimated_duration"],
                    json.dumps(sorted(data.get("equipment", []))),
                    created_at.isoformat(),
                ),
            )
            await db.commit()
            if cursor.rowcount == 0:
                return None
            return cursor.lastrowid

    async def get(self, workout_id: int) -> WorkoutDefinition | None:
        """Get a workout by ID."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                "SELECT * FROM workouts WHERE id = ?", (workout_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_workout(row)

    async def get_catalog(
        self, filters: WorkoutFilters | None = None
    ) -> list[WorkoutDefinition]:
        """Get catalog workouts matching the explicit filters, newest first."""
        clauses: list[str] = []
        params: list = []
        if filters is not None:
            if filters.difficulty is not None:
                clauses.append("difficulty = ?")
                params.append(filters.difficulty.value)
            if filters.category is not None:
                clauses.append("category = ?")
                params.append(filters.category)
            bounds = filters.duration_range
            if bounds is not None:
                clauses.append("estimated_duration BETWEEN ? AND ?")
                params.extend(bounds)

        query = "SELECT * FROM workouts"
        if clauses:
            query += " WHERE " + " AND ".join(clauses)
        query += " ORDER BY created_at DESC"

        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(query, params)
            rows = await cursor.fetchall()
            return [self._row_to_workout(row) for row in rows]

    async def list_categories(self) -> list[str]:
        """List the distinct catalog categories."""
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT DISTINCT category FROM workouts ORDER BY category"
            )
            rows = await cursor.fetchall()
            return [row[0] for row in rows]

    def _row_to_workout(self, row: aiosqlite.Row) -> WorkoutDefinition:
        """Convert a database row to a WorkoutDefinition."""
        return WorkoutDefinition(
            id=row["id"],
            title=row["title"],
            description=row["description"] or "",
            difficulty=Difficulty(row["difficulty"]),
            category=row["category"],
            estimated_duration=row["estimated_duration"],
            equipment=frozenset(json.loads(row["equipment"] or "[]")),
            created_at=datetime.fromisoformat(row["created_at"]),
        )


class CompletionRepository:
    """Repository for workout sessions and their completions."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def start(
        self, user_id: int, workout_id: int, started_at: datetime | None = None
    ) -> CompletionRecord:
        """Create a new in-progress session."""
        started_at = started_at or datetime.now()
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                """
                INSERT INTO user_workouts (user_id, workout_id, started_at)
                VALUES (?, ?, ?)
                """,
                (user_id, workout_id, started_at.isoformat()),
            )
            await db.commit()
            session_id = cursor.lastrowid
        return await self.get(session_id)

    async def get(self, session_id: int) -> CompletionRecord | None:
        """Get a session by ID, joined with its workout."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                f"""
                SELECT {_SESSION_COLUMNS}
                FROM user_workouts uw
                LEFT JOIN workouts w ON uw.workout_id = w.id
                WHERE uw.id = ?
                """,
                (session_id,),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_record(row)

    async def get_in_progress(
        self, user_id: int, workout_id: int
    ) -> CompletionRecord | None:
        """Get the newest unfinished session of a workout for a user."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                f"""
                SELECT {_SESSION_COLUMNS}
                FROM user_workouts uw
                LEFT JOIN workouts w ON uw.workout_id = w.id
                WHERE uw.user_id = ? AND uw.workout_id = ?
                  AND uw.completed_at IS NULL
                ORDER BY uw.started_at DESC, uw.id DESC
                LIMIT 1
                """,
                (user_id, workout_id),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_record(row)

    async def mark_completed(self, record: CompletionRecord) -> bool:
        """Persist a completion.

        The write only applies while ``completed_at`` is still unset, so of
        two racing completions exactly one wins.

        Returns:
            True if this call recorded the completion
        """
        if record.id is None or record.completed_at is None:
            raise ValueError("Session must have an ID and a completion time")

        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                """
                UPDATE user_workouts SET
                    completed_at = ?, duration_minutes = ?, notes = ?
                WHERE id = ? AND completed_at IS NULL
                """,
                (
                    record.completed_at.isoformat(),
                    record.duration_minutes,
                    record.notes,
                    record.id,
                ),
            )
            await db.commit()
            return cursor.rowcount == 1

    async def get_history(self, user_id: int) -> list[CompletionRecord]:
        """Get all completed sessions for a user, newest first."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                f"""
                SELECT {_SESSION_COLUMNS}
                FROM user_workouts uw
                JOIN workouts w ON uw.workout_id = w.id
                WHERE uw.user_id = ? AND uw.completed_at IS NOT NULL
                ORDER BY uw.completed_at DESC
                """,
                (user_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_record(row) for row in rows]

    async def count_completed(self, user_id: int) -> int:
        """Count a user's completed sessions."""
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                """
                SELECT COUNT(*) FROM user_workouts
                WHERE user_id = ? AND completed_at IS NOT NULL
                """,
                (user_id,),
            )
            row = await cursor.fetchone()
            return row[0]

    async def get_completion_dates(self, user_id: int) -> list[date]:
        """Get the distinct calendar dates with a completion, newest first."""
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                """
                SELECT DISTINCT DATE(completed_at) AS day
                FROM user_workouts
                WHERE user_id = ? AND completed_at IS NOT NULL
                ORDER BY day DESC
                """,
                (user_id,),
            )
            rows = await cursor.fetchall()
            return [date.fromisoformat(row[0]) for row in rows]

    def _row_to_record(self, row: aiosqlite.Row) -> CompletionRecord:
        """Convert a joined database row to a CompletionRecord."""
        workout = None
        if row["w_id"] is not None:
            workout = WorkoutDefinition(
                id=row["w_id"],
                title=row["w_title"],
                description=row["w_description"] or "",
                difficulty=Difficulty(row["w_difficulty"]),
                category=row["w_category"],
                estimated_duration=row["w_estimated_duration"],
                equipment=frozenset(json.loads(row["w_equipment"] or "[]")),
                created_at=datetime.fromisoformat(row["w_created_at"]),
            )
        return CompletionRecord(
            id=row["id"],
            user_id=row["user_id"],
            workout_id=row["workout_id"],
            started_at=datetime.fromisoformat(row["started_at"]),
            completed_at=_parse_ts(row["completed_at"]),
            duration_minutes=row["duration_minutes"],
            notes=row["notes"],
            workout=workout,
        )


class AchievementRepository:
    """Repository for achievement definitions and awards."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def list_definitions(
        self, trigger_type: TriggerType | None = None
    ) -> list[Achievement]:
        """List achievement definitions, optionally for one trigger type."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            if trigger_type is not None:
                cursor = await db.execute(
                    "SELECT * FROM achievements WHERE trigger_type = ? ORDER BY id",
                    (trigger_type.value,),
                )
            else:
                cursor = await db.execute("SELECT * FROM achievements ORDER BY id")
            rows = await cursor.fetchall()
            return [self._row_to_achievement(row) for row in rows]

    async def add(self, data: dict) -> int:
        """Add an achievement definition."""
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                """
                INSERT INTO achievements
                (name, description, trigger_type, threshold, difficulty)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    data["name"],
                    data.get("description", ""),
                    data["trigger_type"],
                    data.get("threshold"),
                    data.get("difficulty"),
                ),
            )
            await db.commit()
            return cursor.lastrowid

    async def has_user_achievement(self, user_id: int, achievement_id: int) -> bool:
        """Check whether a user already earned an achievement."""
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                """
                SELECT 1 FROM user_achievements
                WHERE user_id = ? AND achievement_id = ?
                """,
                (user_id, achievement_id),
            )
            return await cursor.fetchone() is not None

    async def award_if_absent(
        self,
        user_id: int,
        achievement_id: int,
        earned_at: datetime | None = None,
    ) -> bool:
        """Award an achievement unless the user already has it.

        Returns:
            True if this call inserted the award
        """
        earned_at = earned_at or datetime.now()
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                """
                INSERT OR IGNORE INTO user_achievements
                (user_id, achievement_id, earned_at)
                VALUES (?, ?, ?)
                """,
                (user_id, achievement_id, earned_at.isoformat()),
            )
            await db.commit()
            return cursor.rowcount == 1

    async def list_user_achievements(self, user_id: int) -> list[UserAchievement]:
        """List a user's earned achievements, newest first."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                """
                SELECT a.*, ua.user_id, ua.earned_at
                FROM user_achievements ua
                JOIN achievements a ON ua.achievement_id = a.id
                WHERE ua.user_id = ?
                ORDER BY ua.earned_at DESC, ua.id DESC
                """,
                (user_id,),
            )
            rows = await cursor.fetchall()
            return [
                UserAchievement(
                    user_id=row["user_id"],
                    achievement=self._row_to_achievement(row),
                    earned_at=datetime.fromisoformat(row["earned_at"]),
                )
                for row in rows
            ]

    def _row_to_achievement(self, row: aiosqlite.Row) -> Achievement:
        """Convert a database row to an Achievement."""
        return Achievement(
            id=row["id"],
            name=row["name"],
            description=row["description"] or "",
            trigger_type=TriggerType(row["trigger_type"]),
            threshold=row["threshold"],
            difficulty=Difficulty(row["difficulty"]) if row["difficulty"] else None,
        )
