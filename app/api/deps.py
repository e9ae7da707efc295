"""FastAPI dependencies shared by the API routers.

Each dependency wraps a pure ``Result``-returning function. FastAPI has no
channel for a dependency to return a response, so an ``Err`` is raised here
and rendered by the registered error handlers.
"""

from __future__ import annotations

from collections.abc import Awaitable
from collections.abc import Callable
from typing import Any
from typing import TypeVar

from fastapi import Request

from app.core.config import Settings
from app.core.result import Ok
from app.core.security import IdentityClaims
from app.core.security import authenticate
from app.core.validation import RequestSchema
from app.core.validation import parse_json_body
from app.core.validation import validate

SchemaT = TypeVar("SchemaT", bound=RequestSchema)

AUTHORIZATION_HEADER = "Authorization"


def get_app_settings(request: Request) -> Settings:
    """Return the settings the application was built with."""
    return request.app.state.settings


def require_identity(request: Request) -> IdentityClaims:
    """Verify the bearer credential and attach its claims to the request."""
    settings = get_app_settings(request)
    result = authenticate(request.headers.get(AUTHORIZATION_HEADER), settings)
    if not isinstance(result, Ok):
        raise result.error
    request.state.identity = result.value
    return result.value


def validated_body(schema: type[SchemaT]) -> Callable[[Request], Awaitable[SchemaT]]:
    """Build a dependency that validates the JSON body against ``schema``."""

    async def _dependency(request: Request) -> SchemaT:
        parsed = parse_json_body(await request.body())
        if not isinstance(parsed, Ok):
            raise parsed.error
        result = validate(schema, parsed.value)
        if not isinstance(result, Ok):
            raise result.error
        return result.value

    _dependency.__name__ = f"validated_{schema.__name__}"
    return _dependency


def json_body_openapi(schema: type[RequestSchema]) -> dict[str, Any]:
    """OpenAPI ``requestBody`` for a route whose body is read by :func:`validated_body`."""
    return {
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": schema.model_json_schema()}},
        }
    }
