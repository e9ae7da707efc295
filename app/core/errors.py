"""Error taxonomy and exception handler registration."""

from __future__ import annotations

from collections.abc import Sequence
import logging
from typing import Any
from typing import ClassVar

from fastapi import FastAPI
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.responses import DEFAULT_ERROR_MESSAGES
from app.core.responses import failure
from app.core.responses import json_response
from app.schemas.envelope import ErrorCode
from app.schemas.envelope import FieldError

logger = logging.getLogger(__name__)

_REQUEST_PREFIXES = {"body", "query", "path", "header", "cookie"}


class AppError(Exception):
    """Base of the closed set of client-visible error kinds."""

    code: ClassVar[ErrorCode]

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if cls.__module__ != __name__:
            raise TypeError(f"{cls.__name__}: the error taxonomy is closed to extension")

    def __init__(self, message: str | None = None, *, errors: Sequence[FieldError] | None = None) -> None:
        self.message = message or DEFAULT_ERROR_MESSAGES[self.code]
        self.errors = list(errors) if errors else []
        super().__init__(self.message)

    @property
    def status(self) -> int:
        return self.code.status

    def to_envelope(self) -> dict[str, Any]:
        """Return the failure envelope for this error."""
        return failure(self.code, self.message, self.errors)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r}, errors={self.errors!r})"


class BadRequestError(AppError):
    code = ErrorCode.BAD_REQUEST


class UnauthorizedError(AppError):
    code = ErrorCode.UNAUTHORIZED


class ForbiddenError(AppError):
    code = ErrorCode.FORBIDDEN


class NotFoundError(AppError):
    code = ErrorCode.NOT_FOUND


class InternalServerError(AppError):
    code = ErrorCode.INTERNAL_SERVER_ERROR


_KIND_BY_STATUS: dict[int, type[AppError]] = {
    400: BadRequestError,
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
}


def error_for_status(status_code: int, message: str | None = None) -> AppError:
    """Map an arbitrary HTTP status onto the closest error kind."""
    if status_code >= 500:
        return InternalServerError(message)
    kind = _KIND_BY_STATUS.get(status_code, BadRequestError)
    return kind(message)


def coerce_error(exc: BaseException) -> AppError:
    """Return ``exc`` if it already is an error kind, else a generic internal error."""
    if isinstance(exc, AppError):
        return exc
    return InternalServerError()


def format_location(location: tuple[Any, ...] | list[Any] | Any) -> str:
    """Render a pydantic error location as a dotted field path."""
    if not isinstance(location, (tuple, list)):
        return str(location)

    parts = list(location)
    if parts and parts[0] in _REQUEST_PREFIXES:
        parts = parts[1:]
    if parts:
        return ".".join(str(part) for part in parts)

    return "body"


def _validation_details(exc: RequestValidationError) -> list[FieldError]:
    return [
        FieldError(field=format_location(issue.get("loc", ())), message=str(issue.get("msg", "Invalid value")))
        for issue in exc.errors()
    ]


async def request_validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    """Normalize FastAPI parameter validation errors to the envelope."""
    error = BadRequestError("Request validation failed", errors=_validation_details(exc))
    return json_response(error.to_envelope())


async def http_exception_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Normalize framework HTTP exceptions to the envelope."""
    message = exc.detail if isinstance(exc.detail, str) and exc.detail else None
    error = error_for_status(exc.status_code, message)
    response = json_response(error.to_envelope())
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
    """Return raised error kinds in the shared envelope."""
    return json_response(exc.to_envelope())


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected failures and answer with a detail-free internal error."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return json_response(coerce_error(exc).to_envelope())


def register_error_handlers(app: FastAPI) -> None:
    """Attach all error handlers to a FastAPI app instance."""

    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
