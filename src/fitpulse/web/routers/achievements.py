"""Achievement routes."""

from fastapi import APIRouter, Depends

from ...db.repositories import AchievementRepository, UserProfileRepository
from ...exceptions import UserNotFoundError
from ..deps import get_current_user_id, get_db_path

router = APIRouter(prefix="/achievements", tags=["achievements"])


@router.get("")
async def list_achievements(
    user_id: int = Depends(get_current_user_id),
    db_path=Depends(get_db_path),
):
    """List the caller's earned achievements, newest first."""
    if await UserProfileRepository(db_path).get(user_id) is None:
        raise UserNotFoundError("User not found in database")

    earned = await AchievementRepository(db_path).list_user_achievements(user_id)
    return {
        "success": True,
        "data": {"achievements": [ua.to_dict() for ua in earned]},
    }
