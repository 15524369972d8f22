"""FastAPI application for the fitpulse API."""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI

from .. import __version__
from ..db.engine import get_db_path, init_db, seed_achievements
from ..services.scoring import RandomSource
from .exception_handlers import register_exception_handlers
from .routers import achievements, workouts


def create_app(
    db_path: Path | None = None,
    random_source: RandomSource | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        db_path: Database file to serve (defaults to the data directory)
        random_source: Jitter source for scoring (defaults to system random)
    """
    db_path = db_path or get_db_path()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialize the database and achievement ladder on startup."""
        if not db_path.exists():
            await init_db(db_path)
        await seed_achievements(db_path)
        yield

    app = FastAPI(
        title="fitpulse",
        description="Workout recommendations, streaks and achievements",
        version=__version__,
        lifespan=lifespan,
    )

    # Store configuration in app state for use in routers
    app.state.db_path = db_path
    app.state.random_source = random_source

    register_exception_handlers(app)

    app.include_router(workouts.router)
    app.include_router(achievements.router)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    return app
