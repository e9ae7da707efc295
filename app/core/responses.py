"""Success and failure envelope construction."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from app.core.result import Ok
from app.core.result import Result
from app.schemas.envelope import ErrorCode
from app.schemas.envelope import ErrorEnvelope
from app.schemas.envelope import FieldError
from app.schemas.envelope import SuccessEnvelope

DEFAULT_SUCCESS_MESSAGE = "OK"

DEFAULT_ERROR_MESSAGES = {
    ErrorCode.BAD_REQUEST: "Bad request",
    ErrorCode.UNAUTHORIZED: "Unauthorized",
    ErrorCode.FORBIDDEN: "Forbidden",
    ErrorCode.NOT_FOUND: "Resource not found",
    ErrorCode.INTERNAL_SERVER_ERROR: "Internal server error",
}


def _non_empty(message: str | None, fallback: str) -> str:
    if message is None or not str(message).strip():
        return fallback
    return str(message)


def success(data: Any = None, message: str = DEFAULT_SUCCESS_MESSAGE, status: int = 200) -> dict[str, Any]:
    """Build a success envelope around a JSON-compatible copy of ``data``."""
    envelope = SuccessEnvelope(
        status=status,
        message=_non_empty(message, DEFAULT_SUCCESS_MESSAGE),
        data=jsonable_encoder(data),
    )
    return envelope.model_dump(mode="json")


def failure(
    code: ErrorCode,
    message: str | None = None,
    errors: Sequence[FieldError] = (),
) -> dict[str, Any]:
    """Build a failure envelope whose status follows from ``code``."""
    code = ErrorCode(code)
    envelope = ErrorEnvelope(
        status=code.status,
        code=code,
        message=_non_empty(message, DEFAULT_ERROR_MESSAGES[code]),
        errors=list(errors) or None,
    )
    return envelope.model_dump(mode="json", exclude_none=True)


def json_response(envelope: dict[str, Any]) -> JSONResponse:
    """Send an envelope with its own status as the HTTP status."""
    return JSONResponse(status_code=envelope["status"], content=envelope)


def respond(result: Result[Any], message: str = DEFAULT_SUCCESS_MESSAGE, status: int = 200) -> JSONResponse:
    """Turn a service result into the matching envelope response."""
    if isinstance(result, Ok):
        return json_response(success(result.value, message=message, status=status))
    return json_response(result.error.to_envelope())
