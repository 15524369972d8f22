"""Exception handlers that render errors in the API envelope."""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from ..exceptions import ErrorCode, FitpulseError


def create_error_response(status_code: int, code: str, message: str) -> JSONResponse:
    """Create a standardized error response."""
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": {"code": code, "message": message}},
    )


async def fitpulse_error_handler(request: Request, exc: FitpulseError) -> JSONResponse:
    """Handle all FitpulseError exceptions."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed query parameters and bodies as invalid_input."""
    fields = ", ".join(
        ".".join(str(part) for part in error["loc"]) for error in exc.errors()
    )
    return create_error_response(
        400, ErrorCode.INVALID_INPUT.value, f"Invalid request: {fields}"
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.opt(exception=exc).error(f"Unhandled exception on {request.url.path}")
    return create_error_response(
        500, ErrorCode.SERVER_ERROR.value, "Internal server error"
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the application."""
    app.add_exception_handler(FitpulseError, fitpulse_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
