"""Request dependencies shared by the routers."""

from pathlib import Path

from fastapi import Header, Request

from ..exceptions import UnauthorizedError
from ..services import CompletionService, RecommendationService, SessionService


def get_current_user_id(x_user_id: str | None = Header(default=None)) -> int:
    """Resolve the caller from the header set by the upstream auth proxy."""
    if not x_user_id:
        raise UnauthorizedError("Authentication required")
    try:
        return int(x_user_id)
    except ValueError:
        raise UnauthorizedError("Authentication required") from None


def get_db_path(request: Request) -> Path:
    return request.app.state.db_path


def get_recommendation_service(request: Request) -> RecommendationService:
    return RecommendationService(
        get_db_path(request), random_source=request.app.state.random_source
    )


def get_completion_service(request: Request) -> CompletionService:
    return CompletionService(get_db_path(request))


def get_session_service(request: Request) -> SessionService:
    return SessionService(get_db_path(request))
