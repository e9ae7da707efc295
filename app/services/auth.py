"""Service helpers for login, token refresh and identity lookup."""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.errors import UnauthorizedError
from app.core.passwords import verify_password
from app.core.result import Err
from app.core.result import Ok
from app.core.result import Result
from app.core.security import IdentityClaims
from app.core.security import create_access_token
from app.core.security import create_refresh_token
from app.core.security import refresh_access_token
from app.db.repository.users import get_user
from app.db.repository.users import get_user_by_email
from app.schemas.auth import AccessToken
from app.schemas.auth import Identity
from app.schemas.auth import LoginRequest
from app.schemas.auth import TokenPair
from app.schemas.user import User

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid email or password"


def login_service(session: Session, settings: Settings, payload: LoginRequest) -> Result[TokenPair]:
    """Check credentials and issue an access/refresh token pair."""
    user = get_user_by_email(session, payload.email)
    if user is None or not verify_password(payload.password, user.password_hash):
        logger.info("Rejected login attempt")
        return Err(UnauthorizedError(INVALID_CREDENTIALS_MESSAGE))
    if not user.is_active:
        logger.info("Rejected login for inactive user id=%s", user.id)
        return Err(UnauthorizedError("Account is disabled"))

    access = create_access_token(str(user.id), settings)
    refresh = create_refresh_token(str(user.id), settings)
    return Ok(
        TokenPair(
            access_token=access.token,
            expires_in=access.expires_in,
            expires_at=access.expires_at,
            refresh_token=refresh.token,
            refresh_expires_in=refresh.expires_in,
            user=User.model_validate(user),
        )
    )


def refresh_service(settings: Settings, refresh_token: str) -> Result[AccessToken]:
    """Mint a new access token from a refresh token."""
    result = refresh_access_token(refresh_token, settings)
    if not isinstance(result, Ok):
        return result
    issued = result.value
    return Ok(AccessToken(access_token=issued.token, expires_in=issued.expires_in, expires_at=issued.expires_at))


def identity_service(session: Session, identity: IdentityClaims) -> Result[Identity]:
    """Describe the caller, including the account when the subject is a known user."""
    user = None
    try:
        user_id = UUID(identity.subject)
    except ValueError:
        user_id = None
    if user_id is not None:
        row = get_user(session, user_id)
        user = User.model_validate(row) if row is not None else None
    return Ok(
        Identity(
            sub=identity.subject,
            expires_at=identity.expires_at,
            issued_at=identity.issued_at,
            user=user,
        )
    )
