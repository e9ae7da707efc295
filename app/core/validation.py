"""Validation boundary between raw request data and business logic.

Request schemas are declarative pydantic models deriving from
:class:`RequestSchema`. :func:`validate` interprets a schema against raw input
and returns either the typed model or every field error found, ordered by the
schema's field declaration order.
"""

from __future__ import annotations

import json
from typing import Any
from typing import TypeVar

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import ValidationError

from app.core.errors import BadRequestError
from app.core.result import Err
from app.core.result import Ok
from app.core.result import Result
from app.schemas.envelope import FieldError

SchemaT = TypeVar("SchemaT", bound=BaseModel)

VALIDATION_FAILED_MESSAGE = "Request validation failed"
BODY_FIELD = "body"


class RequestSchema(BaseModel):
    """Base for inbound payload schemas: strict types, undeclared keys dropped."""

    model_config = ConfigDict(strict=True, extra="ignore")


def _declaration_index(schema: type[BaseModel], field: str) -> int:
    names = list(schema.model_fields)
    head = field.split(".", 1)[0]
    if head in names:
        return names.index(head)
    return -1


def _field_path(loc: tuple[Any, ...]) -> str:
    # Schema-level locations are relative to the payload; no request-part prefix to strip.
    return ".".join(str(part) for part in loc) or BODY_FIELD


def field_errors(schema: type[BaseModel], exc: ValidationError) -> list[FieldError]:
    """Convert a pydantic error into field errors in declaration order."""
    errors = [
        FieldError(field=_field_path(tuple(issue.get("loc", ()))), message=str(issue.get("msg", "Invalid value")))
        for issue in exc.errors(include_url=False)
    ]
    # sorted() is stable: issues within one field keep discovery order.
    return sorted(errors, key=lambda error: _declaration_index(schema, error.field))


def validate(schema: type[SchemaT], raw: Any) -> Result[SchemaT]:
    """Validate ``raw`` against ``schema`` collecting every violation in one pass."""
    if not isinstance(raw, dict):
        return Err(
            BadRequestError(
                VALIDATION_FAILED_MESSAGE,
                errors=[FieldError(field=BODY_FIELD, message="Request body must be a JSON object")],
            )
        )
    try:
        model = schema.model_validate(raw, strict=True)
    except ValidationError as exc:
        return Err(BadRequestError(VALIDATION_FAILED_MESSAGE, errors=field_errors(schema, exc)))
    return Ok(model)


def parse_json_body(body: bytes) -> Result[Any]:
    """Decode a raw request body, treating malformed JSON as a body error."""
    if not body.strip():
        return Ok(None)
    try:
        return Ok(json.loads(body))
    except (UnicodeDecodeError, json.JSONDecodeError):
        return Err(
            BadRequestError(
                VALIDATION_FAILED_MESSAGE,
                errors=[FieldError(field=BODY_FIELD, message="Malformed JSON body")],
            )
        )
