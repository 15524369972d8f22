"""Database engine setup and initialization."""

import os
from datetime import datetime, timedelta
from pathlib import Path

import aiosqlite
from loguru import logger

# Default data directory
DATA_DIR = Path(__file__).parent.parent.parent.parent / "data"


def get_data_dir() -> Path:
    """Get the data directory, honouring FITPULSE_DATA_DIR."""
    override = os.environ.get("FITPULSE_DATA_DIR")
    return Path(override) if override else DATA_DIR


def get_db_path(data_dir: Path | None = None) -> Path:
    """Get the database file path."""
    if data_dir is None:
        data_dir = get_data_dir()
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir / "fitpulse.db"


async def init_db(db_path: Path | None = None) -> None:
    """Initialize the database schema."""
    if db_path is None:
        db_path = get_db_path()

    async with aiosqlite.connect(db_path) as db:
        # User profiles (owned by the profile store, read-only to the engine)
        await db.execute("""
            CREATE TABLE IF NOT EXISTS user_profiles (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                fitness_level TEXT,
                preferred_duration INTEGER,
                weekly_goal INTEGER,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        # Workout catalog
        await db.execute("""
            CREATE TABLE IF NOT EXISTS workouts (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                title TEXT UNIQUE NOT NULL,
                description TEXT DEFAULT '',
                difficulty TEXT NOT NULL,
                category TEXT NOT NULL,
                estimated_duration INTEGER NOT NULL,
                equipment TEXT DEFAULT '[]',
                created_at TIMESTAMP NOT NULL
            )
        """)

        # Workout sessions; completed_at is written once
        await db.execute("""
            CREATE TABLE IF NOT EXISTS user_workouts (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                workout_id INTEGER NOT NULL,
                started_at TIMESTAMP NOT NULL,
                completed_at TIMESTAMP,
                duration_minutes INTEGER,
                notes TEXT,
                FOREIGN KEY (user_id) REFERENCES user_profiles(id),
                FOREIGN KEY (workout_id) REFERENCES workouts(id)
            )
        """)

        # Achievement definitions
        await db.execute("""
            CREATE TABLE IF NOT EXISTS achievements (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT UNIQUE NOT NULL,
                description TEXT DEFAULT '',
                trigger_type TEXT NOT NULL,
                threshold INTEGER,
                difficulty TEXT
            )
        """)

        # Earned achievements, at most one row per (user, achievement)
        await db.execute("""
            CREATE TABLE IF NOT EXISTS user_achievements (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                achievement_id INTEGER NOT NULL,
                earned_at TIMESTAMP NOT NULL,
                UNIQUE (user_id, achievement_id),
                FOREIGN KEY (user_id) REFERENCES user_profiles(id),
                FOREIGN KEY (achievement_id) REFERENCES achievements(id)
            )
        """)

        # Create indexes for common queries
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_user_workouts_user
            ON user_workouts(user_id, completed_at)
        """)
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_workouts_category
            ON workouts(category, difficulty)
        """)
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_user_achievements_user
            ON user_achievements(user_id)
        """)

        await db.commit()

    logger.debug(f"Database schema ready at {db_path}")


async def seed_achievements(db_path: Path | None = None) -> int:
    """Seed the default achievement ladder. Returns rows inserted."""
    from ..models.achievements import DEFAULT_ACHIEVEMENTS

    if db_path is None:
        db_path = get_db_path()

    inserted = 0
    async with aiosqlite.connect(db_path) as db:
        for row in DEFAULT_ACHIEVEMENTS:
            cursor = await db.execute(
                """
                INSERT OR IGNORE INTO achievements
                (name, description, trigger_type, threshold, difficulty)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    row["name"],
                    row["description"],
                    row["trigger_type"],
                    row["threshold"],
                    row["difficulty"],
                ),
            )
            inserted += cursor.rowcount
        await db.commit()

    logger.info(f"Seeded {inserted} achievements")
    return inserted


async def seed_workouts(db_path: Path | None = None) -> int:
    """Seed the sample workout catalog. Returns rows inserted."""
    from ..models.workouts import SAMPLE_WORKOUTS
    from .repositories import WorkoutRepository

    if db_path is None:
        db_path = get_db_path()

    repo = WorkoutRepository(db_path)
    base = datetime.now().replace(microsecond=0)
    inserted = 0
    for offset, data in enumerate(SAMPLE_WORKOUTS):
        created_at = base + timedelta(minutes=offset)
        if await repo.add(data, created_at=created_at) is not None:
            inserted += 1

    logger.info(f"Seeded {inserted} sample workouts")
    return inserted
