"""Unit tests for bearer credential verification and refresh exchange."""

from __future__ import annotations

from datetime import datetime
from datetime import timedelta
from datetime import timezone

import jwt
import pytest

from app.core.config import Settings
from app.core.errors import ForbiddenError
from app.core.errors import UnauthorizedError
from app.core.passwords import hash_password
from app.core.passwords import verify_password
from app.core.result import Err
from app.core.result import Ok
from app.core.security import authenticate
from app.core.security import create_access_token
from app.core.security import create_refresh_token
from app.core.security import extract_bearer_token
from app.core.security import refresh_access_token


def _timestamp(delta: timedelta) -> int:
    return int((datetime.now(timezone.utc) + delta).timestamp())


def _sign(claims: dict, settings: Settings, *, secret: str | None = None) -> str:
    return jwt.encode(claims, secret or settings.access_token_secret, algorithm=settings.jwt_algorithm)


def _bearer(token: str) -> str:
    return f"Bearer {token}"


def test_valid_credential_yields_identity_claims(settings: Settings) -> None:
    token = _sign({"sub": "u1", "exp": _timestamp(timedelta(minutes=5))}, settings)

    result = authenticate(_bearer(token), settings)

    assert isinstance(result, Ok)
    assert result.value.subject == "u1"
    assert result.value.expires_at > datetime.now(timezone.utc)
    assert result.value.issued_at is None


def test_minted_access_token_round_trips(settings: Settings) -> None:
    issued = create_access_token("user-42", settings)

    result = authenticate(_bearer(issued.token), settings)

    assert isinstance(result, Ok)
    assert result.value.subject == "user-42"
    assert issued.expires_in == settings.access_token_ttl_seconds


@pytest.mark.parametrize("header", [None, "", "   "])
def test_missing_header_is_unauthorized(settings: Settings, header: str | None) -> None:
    result = authenticate(header, settings)

    assert isinstance(result, Err)
    assert isinstance(result.error, UnauthorizedError)
    assert result.error.status == 401
    assert result.error.message == "Missing bearer token"


@pytest.mark.parametrize("header", ["Basic dXNlcjpwYXNz", "Bearer", "Bearer    ", "token-without-scheme"])
def test_malformed_header_is_unauthorized(header: str) -> None:
    result = extract_bearer_token(header)

    assert isinstance(result, Err)
    assert isinstance(result.error, UnauthorizedError)


def test_scheme_is_case_insensitive() -> None:
    assert extract_bearer_token("bearer abc.def.ghi") == Ok("abc.def.ghi")


def test_expired_credential_is_unauthorized(settings: Settings) -> None:
    token = _sign({"sub": "u1", "exp": _timestamp(timedelta(minutes=-5))}, settings)

    result = authenticate(_bearer(token), settings)

    assert isinstance(result, Err)
    assert isinstance(result.error, UnauthorizedError)
    assert result.error.message == "Token has expired"


@pytest.mark.parametrize("token", ["not-a-jwt", "a.b.c"])
def test_garbage_credential_is_unauthorized(settings: Settings, token: str) -> None:
    result = authenticate(_bearer(token), settings)

    assert isinstance(result, Err)
    assert isinstance(result.error, UnauthorizedError)


def test_wrong_signature_is_unauthorized(settings: Settings) -> None:
    token = _sign(
        {"sub": "u1", "exp": _timestamp(timedelta(minutes=5))},
        settings,
        secret="some-other-secret-0123456789abcdef",
    )

    result = authenticate(_bearer(token), settings)

    assert isinstance(result, Err)
    assert isinstance(result.error, UnauthorizedError)


@pytest.mark.parametrize(
    "claims",
    [
        {"exp": 0},
        {"sub": "u1"},
        {"sub": "", "exp": 0},
    ],
)
def test_verified_credential_missing_claims_is_forbidden(settings: Settings, claims: dict) -> None:
    if "exp" in claims:
        claims = {**claims, "exp": _timestamp(timedelta(minutes=5))}
    token = _sign(claims, settings)

    result = authenticate(_bearer(token), settings)

    assert isinstance(result, Err)
    assert isinstance(result.error, ForbiddenError)
    assert result.error.status == 403


def test_refresh_token_is_not_accepted_as_access(settings: Settings) -> None:
    refresh = create_refresh_token("u1", settings)
    same_secret_refresh = _sign(
        {"sub": "u1", "type": "refresh", "exp": _timestamp(timedelta(minutes=5))},
        settings,
    )

    for token in (refresh.token, same_secret_refresh):
        result = authenticate(_bearer(token), settings)
        assert isinstance(result, Err)
        assert isinstance(result.error, UnauthorizedError)


def test_refresh_exchange_mints_access_for_same_subject(settings: Settings) -> None:
    refresh = create_refresh_token("u1", settings)

    exchanged = refresh_access_token(refresh.token, settings)

    assert isinstance(exchanged, Ok)
    assert exchanged.value.token_type == "access"
    verified = authenticate(_bearer(exchanged.value.token), settings)
    assert isinstance(verified, Ok)
    assert verified.value.subject == "u1"


def test_refresh_exchange_does_not_revoke_existing_access(settings: Settings) -> None:
    access = create_access_token("u1", settings)
    refresh = create_refresh_token("u1", settings)

    assert isinstance(refresh_access_token(refresh.token, settings), Ok)
    assert isinstance(authenticate(_bearer(access.token), settings), Ok)


def test_refresh_exchange_rejects_access_and_expired_tokens(settings: Settings) -> None:
    access = create_access_token("u1", settings)
    expired = _sign(
        {"sub": "u1", "type": "refresh", "exp": _timestamp(timedelta(seconds=-1))},
        settings,
        secret=settings.refresh_token_secret,
    )

    for token in (access.token, expired, "garbage"):
        result = refresh_access_token(token, settings)
        assert isinstance(result, Err)
        assert isinstance(result.error, UnauthorizedError)


def test_each_verification_is_independent(settings: Settings) -> None:
    token = create_access_token("u1", settings).token

    assert authenticate(_bearer(token), settings) == authenticate(_bearer(token), settings)


def test_password_hash_round_trip() -> None:
    hashed = hash_password("correct horse battery", iterations=1_000)

    assert hashed.startswith("pbkdf2_sha256$1000$")
    assert verify_password("correct horse battery", hashed)
    assert not verify_password("wrong", hashed)
    assert not verify_password("anything", "not-a-hash")
