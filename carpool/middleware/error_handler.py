import logging
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError

from carpool.schemas.common import ErrorBody, ErrorDetail, ErrorResponse
from carpool.utils.exceptions import AppException, ErrorCode

logger = logging.getLogger(__name__)

# CHECK constraint name -> (status, code, message) for violations that slip past the services
_CONSTRAINT_ERRORS = {
    "chk_trip_available_seats": (status.HTTP_409_CONFLICT, ErrorCode.SEATS_EXHAUSTED,
                                 "Not enough free seats left on this trip"),
    "chk_rating_range":         (status.HTTP_400_BAD_REQUEST, ErrorCode.VALIDATION_ERROR,
                                 "Rating must be between 1 and 5"),
}


def _render(status_code: int, message: str, body: ErrorBody, headers: dict | None = None) -> JSONResponse:
    payload = ErrorResponse(message=message, error=body)
    return JSONResponse(status_code=status_code, content=payload.model_dump(), headers=headers)


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Domain errors raised by services and dependencies."""
    return _render(
        exc.status_code,
        exc.detail["message"],
        ErrorBody(**exc.detail["error"]),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Request body / query validation failures.

    Each pydantic error becomes {field, message}, with the location prefix
    dropped: ("body", "seatsBooked") -> "seatsBooked", ("query", "date") -> "date".
    """
    details = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        details.append(ErrorDetail(field=".".join(loc) or "request", message=error.get("msg", "Invalid value")))

    return _render(
        422,
        "Validation error. Please check your input.",
        ErrorBody(code=ErrorCode.VALIDATION_ERROR, details=details),
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """
    Constraint violations reaching the top level.
    Known CHECK constraints map to their domain error, anything else is a conflict.
    """
    reason = str(exc.orig)
    logger.warning(f"IntegrityError on {request.method} {request.url.path}: {reason}")

    for name, (status_code, code, message) in _CONSTRAINT_ERRORS.items():
        if name in reason:
            return _render(status_code, message, ErrorBody(code=code))

    return _render(
        status.HTTP_409_CONFLICT,
        "The request conflicts with existing data.",
        ErrorBody(code=ErrorCode.DUPLICATE_ENTRY),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything unexpected: log with traceback, answer with a bare 500."""
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}", exc_info=exc)
    return _render(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "An unexpected error occurred. Please try again later.",
        ErrorBody(code=ErrorCode.INTERNAL_SERVER_ERROR),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
