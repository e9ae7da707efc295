"""Service helpers for user API operations."""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import BadRequestError
from app.core.errors import ForbiddenError
from app.core.errors import NotFoundError
from app.core.passwords import hash_password
from app.core.result import Err
from app.core.result import Ok
from app.core.result import Result
from app.core.security import IdentityClaims
from app.db.models.user import User as UserRow
from app.db.repository.users import create_user
from app.db.repository.users import deactivate_user
from app.db.repository.users import get_user
from app.db.repository.users import get_user_by_email
from app.db.repository.users import list_users
from app.db.repository.users import update_user
from app.schemas.envelope import FieldError
from app.schemas.user import User
from app.schemas.user import UserCreate
from app.schemas.user import UserListResponse
from app.schemas.user import UserUpdate

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = "Email is already registered"


def _duplicate_email() -> Err:
    return Err(
        BadRequestError(
            DUPLICATE_EMAIL_MESSAGE,
            errors=[FieldError(field="email", message=DUPLICATE_EMAIL_MESSAGE)],
        )
    )


def _fetch_user(session: Session, user_id: UUID) -> Result[UserRow]:
    user = get_user(session, user_id)
    if user is None:
        return Err(NotFoundError("User not found"))
    return Ok(user)


def _fetch_own_user(session: Session, identity: IdentityClaims, user_id: UUID) -> Result[UserRow]:
    if identity.subject != str(user_id):
        return Err(ForbiddenError("Users may only modify their own account"))
    result = _fetch_user(session, user_id)
    if isinstance(result, Ok) and not result.value.is_active:
        return Err(ForbiddenError("Account is disabled"))
    return result


def register_user_service(session: Session, payload: UserCreate) -> Result[User]:
    """Create and persist a new user."""
    email = payload.email.lower()
    if get_user_by_email(session, email) is not None:
        return _duplicate_email()
    try:
        user = create_user(
            session,
            name=payload.name,
            email=email,
            password_hash=hash_password(payload.password),
            age=payload.age,
        )
        session.commit()
    except IntegrityError:
        session.rollback()
        return _duplicate_email()
    logger.info("Registered user id=%s", user.id)
    return Ok(User.model_validate(user))


def list_users_service(
    session: Session,
    *,
    is_active: bool | None = None,
    limit: int = 100,
    offset: int = 0,
) -> Result[UserListResponse]:
    """List users page by page, optionally by active state."""
    users = list_users(session, is_active=is_active, limit=limit, offset=offset)
    return Ok(UserListResponse(items=[User.model_validate(user) for user in users]))


def get_user_service(session: Session, user_id: UUID) -> Result[User]:
    """Fetch a user or report not found."""
    result = _fetch_user(session, user_id)
    if not isinstance(result, Ok):
        return result
    return Ok(User.model_validate(result.value))


def update_user_service(
    session: Session,
    identity: IdentityClaims,
    user_id: UUID,
    payload: UserUpdate,
) -> Result[User]:
    """Update mutable fields of the caller's own account."""
    result = _fetch_own_user(session, identity, user_id)
    if not isinstance(result, Ok):
        return result

    changes = payload.changes()
    if "email" in changes:
        changes["email"] = changes["email"].lower()
        existing = get_user_by_email(session, changes["email"])
        if existing is not None and existing.id != result.value.id:
            return _duplicate_email()
    if "password" in changes:
        changes["password_hash"] = hash_password(changes.pop("password"))
    try:
        user = update_user(session, result.value, **changes)
        session.commit()
    except IntegrityError:
        session.rollback()
        return _duplicate_email()
    return Ok(User.model_validate(user))


def deactivate_user_service(session: Session, identity: IdentityClaims, user_id: UUID) -> Result[None]:
    """Soft-disable the caller's own account."""
    result = _fetch_own_user(session, identity, user_id)
    if not isinstance(result, Ok):
        return result
    deactivate_user(session, result.value)
    session.commit()
    logger.info("Deactivated user id=%s", user_id)
    return Ok(None)
