"""Unit tests for the error taxonomy and shared envelope handlers."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.testclient import TestClient
import pytest
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.errors import AppError
from app.core.errors import BadRequestError
from app.core.errors import ForbiddenError
from app.core.errors import InternalServerError
from app.core.errors import NotFoundError
from app.core.errors import UnauthorizedError
from app.core.errors import coerce_error
from app.core.errors import error_for_status
from app.core.errors import format_location
from app.core.errors import register_error_handlers
from app.schemas.envelope import ErrorCode
from app.schemas.envelope import FieldError


def _build_client() -> TestClient:
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/query")
    def query(limit: int) -> dict[str, int]:
        return {"limit": limit}

    @app.get("/not-found")
    def not_found() -> None:
        raise NotFoundError("Widget not found")

    @app.get("/domain")
    def domain_error() -> None:
        raise BadRequestError(
            "Invalid widget payload",
            errors=[FieldError(field="color", message="Unsupported value")],
        )

    @app.get("/http")
    def http_error() -> None:
        raise StarletteHTTPException(status_code=404, detail="Client not found")

    @app.get("/boom")
    def boom() -> None:
        raise RuntimeError("connection to postgresql://admin:hunter2@db failed")

    return TestClient(app, raise_server_exceptions=False)


@pytest.mark.parametrize(
    ("kind", "code", "status", "message"),
    [
        (BadRequestError, ErrorCode.BAD_REQUEST, 400, "Bad request"),
        (UnauthorizedError, ErrorCode.UNAUTHORIZED, 401, "Unauthorized"),
        (ForbiddenError, ErrorCode.FORBIDDEN, 403, "Forbidden"),
        (NotFoundError, ErrorCode.NOT_FOUND, 404, "Resource not found"),
        (InternalServerError, ErrorCode.INTERNAL_SERVER_ERROR, 500, "Internal server error"),
    ],
)
def test_each_kind_maps_to_its_canonical_status(kind, code, status, message) -> None:
    error = kind()

    assert error.code is code
    assert error.status == status
    assert error.to_envelope() == {"success": False, "status": status, "code": code.value, "message": message}


def test_taxonomy_is_closed_to_extension() -> None:
    with pytest.raises(TypeError):

        class TeapotError(AppError):  # noqa: F841
            code = ErrorCode.BAD_REQUEST


def test_unexpected_exceptions_are_coerced_without_detail() -> None:
    error = coerce_error(ValueError("password=hunter2"))

    assert isinstance(error, InternalServerError)
    assert error.message == "Internal server error"
    assert coerce_error(error) is error


@pytest.mark.parametrize(
    ("status_code", "kind"),
    [(400, BadRequestError), (401, UnauthorizedError), (403, ForbiddenError), (404, NotFoundError),
     (405, BadRequestError), (422, BadRequestError), (503, InternalServerError)],
)
def test_http_statuses_map_onto_closed_taxonomy(status_code: int, kind: type[AppError]) -> None:
    assert type(error_for_status(status_code)) is kind


def test_request_validation_errors_are_normalized_to_envelope() -> None:
    client = _build_client()

    response = client.get("/query")

    assert response.status_code == 400
    payload = response.json()
    assert payload["success"] is False
    assert payload["code"] == "BAD_REQUEST"
    assert payload["status"] == 400
    assert payload["message"] == "Request validation failed"
    assert payload["errors"][0]["field"] == "limit"


def test_domain_errors_use_shared_envelope() -> None:
    client = _build_client()

    response = client.get("/domain")

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "status": 400,
        "code": "BAD_REQUEST",
        "message": "Invalid widget payload",
        "errors": [{"field": "color", "message": "Unsupported value"}],
    }


def test_not_found_errors_use_shared_envelope() -> None:
    client = _build_client()

    response = client.get("/not-found")

    assert response.status_code == 404
    assert response.json() == {
        "success": False,
        "status": 404,
        "code": "NOT_FOUND",
        "message": "Widget not found",
    }


def test_http_errors_are_wrapped_in_shared_envelope() -> None:
    client = _build_client()

    response = client.get("/http")

    assert response.status_code == 404
    assert response.json() == {
        "success": False,
        "status": 404,
        "code": "NOT_FOUND",
        "message": "Client not found",
    }


def test_unknown_routes_and_methods_are_wrapped() -> None:
    client = _build_client()

    missing = client.get("/nowhere")
    wrong_method = client.post("/not-found")

    assert missing.status_code == 404
    assert missing.json()["code"] == "NOT_FOUND"
    assert wrong_method.status_code == 400
    assert wrong_method.json()["code"] == "BAD_REQUEST"
    assert wrong_method.json()["status"] == 400


def test_unhandled_errors_are_logged_and_hidden(caplog: pytest.LogCaptureFixture) -> None:
    client = _build_client()

    with caplog.at_level(logging.ERROR, logger="app.core.errors"):
        response = client.get("/boom")

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "status": 500,
        "code": "INTERNAL_SERVER_ERROR",
        "message": "Internal server error",
    }
    assert "hunter2" not in response.text
    assert "Unhandled error on GET /boom" in caplog.text


@pytest.mark.parametrize(
    ("location", "field"),
    [
        (("query", "limit"), "limit"),
        (("body", "path"), "path"),
        (("body", "query", "header"), "query.header"),
        (("body",), "body"),
        ((), "body"),
    ],
)
def test_only_the_request_part_prefix_is_stripped(location: tuple, field: str) -> None:
    assert format_location(location) == field
