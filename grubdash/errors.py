"""
Error taxonomy and the FastAPI exception handlers that render it.

Every failure leaves the service as `{"error": <message>}` with the status
code the raising layer declared.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from grubdash.telemetry import logger

GENERIC_ERROR_MESSAGE = "Something went wrong!"


class ApiError(Exception):
    """A failure with a declared HTTP status and client-facing message."""

    status = 500

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status

    def __eq__(self, other):
        if not isinstance(other, ApiError):
            return NotImplemented
        return (self.status, self.message) == (other.status, other.message)

    def __hash__(self):
        return hash((self.status, self.message))

    def __repr__(self):
        return f"{type(self).__name__}(status={self.status}, message={self.message!r})"


class ValidationError(ApiError):
    status = 400


class NotFoundError(ApiError):
    status = 404


def error_response(status: int, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(status_code=status, content={"error": message}, headers=headers)


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return error_response(exc.status, exc.message)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    path = request.url.path
    if exc.status_code == 404:
        message = f"Path not found: {path}"
    elif exc.status_code == 405:
        message = f"{request.method} not allowed for {path}"
    else:
        message = exc.detail
    return error_response(exc.status_code, message, getattr(exc, "headers", None))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled error",
        extra={"method": request.method, "path": request.url.path, "error": str(exc)},
        exc_info=exc,
    )
    return error_response(500, GENERIC_ERROR_MESSAGE)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
