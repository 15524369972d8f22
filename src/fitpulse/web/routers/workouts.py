"""Workout recommendation and session routes."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ...models.recommendation import DEFAULT_LIMIT, RecommendationQuery
from ...models.workouts import Difficulty
from ...services import CompletionService, RecommendationService, SessionService
from ..deps import (
    get_completion_service,
    get_current_user_id,
    get_recommendation_service,
    get_session_service,
)

router = APIRouter(prefix="/workouts", tags=["workouts"])


class CompleteWorkoutRequest(BaseModel):
    """Body of a completion request."""

    user_workout_id: int | None = Field(default=None, alias="userWorkoutId")
    duration_minutes: int | None = Field(default=None, alias="durationMinutes")
    notes: str | None = None


@router.get("/recommendations")
async def get_recommendations(
    limit: int = DEFAULT_LIMIT,
    difficulty: Difficulty | None = None,
    category: str | None = None,
    duration: int | None = None,
    user_id: int = Depends(get_current_user_id),
    service: RecommendationService = Depends(get_recommendation_service),
):
    """Recommend workouts for the caller."""
    query = RecommendationQuery(
        limit=limit, difficulty=difficulty, category=category, duration=duration
    )
    result = await service.recommend(user_id, query)
    return {"success": True, "data": result.to_dict()}


@router.post("/{workout_id}/start")
async def start_workout(
    workout_id: int,
    user_id: int = Depends(get_current_user_id),
    service: SessionService = Depends(get_session_service),
):
    """Start a workout session, or resume the open one."""
    started = await service.start(user_id, workout_id)
    return {"success": True, "data": started.to_dict()}


@router.post("/sessions/complete")
async def complete_workout(
    body: CompleteWorkoutRequest,
    user_id: int = Depends(get_current_user_id),
    service: CompletionService = Depends(get_completion_service),
):
    """Complete a workout session and award achievements."""
    result = await service.complete(
        user_id,
        body.user_workout_id,
        duration_minutes=body.duration_minutes,
        notes=body.notes,
    )
    return {"success": True, "data": result.to_dict()}


@router.get("/sessions/{session_id}/stats")
async def completion_stats(
    session_id: int,
    user_id: int = Depends(get_current_user_id),
    service: CompletionService = Depends(get_completion_service),
):
    """Totals, streak and fresh achievements after a completion."""
    stats = await service.get_completion_stats(user_id, session_id)
    return {"success": True, "data": stats.to_dict()}
