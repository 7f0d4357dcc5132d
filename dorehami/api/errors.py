"""Exception handlers mapping application errors to JSON responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from dorehami.config import get_settings
from dorehami.exceptions import CapacityExceededError, DoreHamiError

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"

    first = errors[0]
    message = str(first.get("msg", "Invalid request")).removeprefix("Value error, ")
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    if field and first.get("type") != "value_error":
        return f"{field}: {message}"
    return message


async def dorehami_error_handler(request: Request, exc: DoreHamiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__}: {exc.message}", exc_info=exc)
    else:
        logger.warning(f"{type(exc).__name__} on {request.url.path}: {exc.message}")

    content: dict = {"error": exc.message}
    if isinstance(exc, CapacityExceededError):
        content["remaining"] = exc.remaining
    return JSONResponse(status_code=exc.status_code, content=content)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": _validation_message(exc)},
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle uncaught exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal Server Error",
            "detail": str(exc) if get_settings().DEBUG else None,
        },
    )


EXCEPTION_HANDLERS = {
    DoreHamiError: dorehami_error_handler,
    StarletteHTTPException: http_exception_handler,
    RequestValidationError: validation_error_handler,
    Exception: global_exception_handler,
}


def register_exception_handlers(app: FastAPI) -> None:
    for exception_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)
