"""Response envelope schemas shared across API handlers."""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Any
from typing import Literal

from pydantic import BaseModel


class ErrorCode(str, Enum):
    """Closed set of machine-readable error codes."""

    BAD_REQUEST = "BAD_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"

    @property
    def status(self) -> int:
        """Canonical HTTP status for this code."""
        return ERROR_STATUS[self]


ERROR_STATUS = MappingProxyType(
    {
        ErrorCode.BAD_REQUEST: 400,
        ErrorCode.UNAUTHORIZED: 401,
        ErrorCode.FORBIDDEN: 403,
        ErrorCode.NOT_FOUND: 404,
        ErrorCode.INTERNAL_SERVER_ERROR: 500,
    }
)


class FieldError(BaseModel):
    """Single field-level validation or domain issue."""

    field: str
    message: str


class SuccessEnvelope(BaseModel):
    """Top-level body of every successful response."""

    status: int
    success: Literal[True] = True
    message: str
    data: Any = None


class ErrorEnvelope(BaseModel):
    """Top-level body of every failed response."""

    success: Literal[False] = False
    status: int
    code: ErrorCode
    message: str
    errors: list[FieldError] | None = None
