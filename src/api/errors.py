"""
Exception handlers that render every error as ``{"success": false, "message": ...}``.

Registered on the app in api.main. Unexpected exceptions are logged with their
traceback and answered with a generic 500 so internal detail never reaches clients.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


def error_response(
    status_code: int,
    message: str,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build the standard error envelope."""
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
        headers=headers,
    )


def format_validation_errors(exc: RequestValidationError) -> str:
    """Turn the first request validation error into a short message."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    message = str(first.get("msg", "Invalid request")).removeprefix("Value error, ")
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    if loc:
        return f"{'.'.join(loc)}: {message}"
    return message


async def http_exception_handler(
    _request: Request, exc: StarletteHTTPException,
) -> JSONResponse:
    """Render HTTPException (including 404/405 from routing) in the envelope."""
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return error_response(exc.status_code, message, headers=exc.headers)


async def validation_exception_handler(
    _request: Request, exc: RequestValidationError,
) -> JSONResponse:
    """Malformed bodies, query strings and path parameters are client errors (400)."""
    return error_response(status.HTTP_400_BAD_REQUEST, format_validation_errors(exc))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected failures and return a generic 500."""
    logger.exception("Unhandled error on %s %s: %s", request.method, request.url.path, exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the envelope handlers to an application."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
