"""Exception handlers for the application."""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from playback_bridge.exceptions import BridgeException, ErrorCode
from playback_bridge.logging_config import get_logger, log_with_context

logger = get_logger(__name__)


async def bridge_exception_handler(request: Request, exc: BridgeException) -> JSONResponse:
    """Handle bridge exceptions with their HTTP status codes.

    Returns a structured JSON error with code, message and details so
    clients (voice assistants, shortcuts) can tell failures apart.
    """
    log_with_context(
        logger,
        "warning" if exc.status_code < 500 else "error",
        "Request failed",
        error_code=exc.code.value,
        error_message=exc.message,
        error_details=exc.details,
        status_code=exc.status_code,
        method=request.method,
        path=request.url.path,
        event_type="bridge_error",
    )

    error_content: dict[str, Any] = {"code": exc.code.value, "message": exc.message, "details": exc.details}

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": error_content},
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies as 400 in the standard error format."""
    # The rejected input is not echoed back
    errors = jsonable_encoder(
        [{k: v for k, v in error.items() if k not in ("input", "url")} for error in exc.errors()]
    )
    log_with_context(
        logger,
        "warning",
        "Request validation failed",
        method=request.method,
        path=request.url.path,
        validation_errors=errors,
        event_type="validation_error",
    )
    return JSONResponse(
        status_code=400,
        content={
            "error": {
                "code": ErrorCode.VALIDATION_ERROR.value,
                "message": "Invalid request body",
                "details": {"errors": errors},
            }
        },
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions with logging."""
    log_with_context(
        logger,
        "error",
        "Unhandled exception",
        error=str(exc),
        error_type=type(exc).__name__,
        method=request.method,
        path=request.url.path,
        event_type="unhandled_error",
    )
    logger.error("Exception traceback:", exc_info=exc)

    # Don't expose internal error details to clients
    return JSONResponse(
        status_code=500,
        content={"error": {"code": ErrorCode.INTERNAL_ERROR.value, "message": "Internal server error"}},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the application.

    Args:
        app: FastAPI application instance
    """
    from slowapi import _rate_limit_exceeded_handler
    from slowapi.errors import RateLimitExceeded

    app.add_exception_handler(BridgeException, bridge_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
