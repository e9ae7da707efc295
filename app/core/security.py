"""Bearer credential minting and verification.

Access and refresh tokens are HS256 JWTs signed with separate secrets. Every
verification is independent: nothing is cached between calls.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from datetime import timedelta
from datetime import timezone
import logging
from typing import Any

import jwt

from app.core.config import Settings
from app.core.errors import ForbiddenError
from app.core.errors import UnauthorizedError
from app.core.result import Err
from app.core.result import Ok
from app.core.result import Result

logger = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"
ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"
REQUIRED_CLAIMS = ("sub", "exp")


@dataclass(frozen=True)
class IdentityClaims:
    """Verified identity extracted from a credential for one request."""

    subject: str
    expires_at: datetime
    issued_at: datetime | None = None


@dataclass(frozen=True)
class IssuedToken:
    """A freshly minted credential."""

    token: str
    token_type: str
    expires_at: datetime
    expires_in: int


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _encode(subject: str, token_type: str, secret: str, ttl_seconds: int, algorithm: str) -> IssuedToken:
    now = _now()
    expires_at = now + timedelta(seconds=ttl_seconds)
    payload: dict[str, Any] = {
        "sub": subject,
        "type": token_type,
        "iat": int(now.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    token = jwt.encode(payload, secret, algorithm=algorithm)
    return IssuedToken(token=token, token_type=token_type, expires_at=expires_at, expires_in=ttl_seconds)


def create_access_token(subject: str, settings: Settings) -> IssuedToken:
    """Mint an access credential for ``subject``."""
    return _encode(
        subject,
        ACCESS_TOKEN_TYPE,
        settings.access_token_secret,
        settings.access_token_ttl_seconds,
        settings.jwt_algorithm,
    )


def create_refresh_token(subject: str, settings: Settings) -> IssuedToken:
    """Mint a refresh credential for ``subject``."""
    return _encode(
        subject,
        REFRESH_TOKEN_TYPE,
        settings.refresh_token_secret,
        settings.refresh_token_ttl_seconds,
        settings.jwt_algorithm,
    )


def _timestamp(value: Any) -> datetime | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return datetime.fromtimestamp(value, tz=timezone.utc)


def decode_token(token: str, *, secret: str, algorithm: str, token_type: str) -> Result[IdentityClaims]:
    """Verify a credential and extract its identity claims.

    Bad signatures, malformed tokens, expired tokens and tokens of the wrong
    ``type`` are unauthorized. A verified token lacking a usable subject or
    expiry is forbidden.
    """
    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])
    except jwt.ExpiredSignatureError:
        return Err(UnauthorizedError("Token has expired"))
    except jwt.PyJWTError:
        return Err(UnauthorizedError("Invalid token"))

    claimed_type = payload.get("type")
    if claimed_type is not None and claimed_type != token_type:
        return Err(UnauthorizedError("Invalid token type"))

    missing = [claim for claim in REQUIRED_CLAIMS if claim not in payload]
    subject = payload.get("sub")
    expires_at = _timestamp(payload.get("exp"))
    if missing or not isinstance(subject, str) or not subject or expires_at is None:
        return Err(ForbiddenError("Token is missing required claims"))

    return Ok(IdentityClaims(subject=subject, expires_at=expires_at, issued_at=_timestamp(payload.get("iat"))))


def extract_bearer_token(authorization: str | None) -> Result[str]:
    """Pull the credential out of an ``Authorization`` header value."""
    if authorization is None or not authorization.strip():
        return Err(UnauthorizedError("Missing bearer token"))
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != BEARER_SCHEME or not token.strip():
        return Err(UnauthorizedError("Malformed authorization header"))
    return Ok(token.strip())


def authenticate(authorization: str | None, settings: Settings) -> Result[IdentityClaims]:
    """Run the access guard over a raw ``Authorization`` header value."""
    extracted = extract_bearer_token(authorization)
    if not isinstance(extracted, Ok):
        return extracted
    result = decode_token(
        extracted.value,
        secret=settings.access_token_secret,
        algorithm=settings.jwt_algorithm,
        token_type=ACCESS_TOKEN_TYPE,
    )
    if not isinstance(result, Ok):
        logger.info("Rejected access credential: %s", result.error.message)
    return result


def refresh_access_token(refresh_token: str, settings: Settings) -> Result[IssuedToken]:
    """Exchange a valid refresh credential for a new access credential."""
    result = decode_token(
        refresh_token,
        secret=settings.refresh_token_secret,
        algorithm=settings.jwt_algorithm,
        token_type=REFRESH_TOKEN_TYPE,
    )
    if not isinstance(result, Ok):
        logger.info("Rejected refresh credential: %s", result.error.message)
        return result
    return Ok(create_access_token(result.value.subject, settings))
