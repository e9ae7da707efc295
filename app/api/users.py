"""User API routes."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter
from fastapi import Depends
from fastapi import Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.api.deps import json_body_openapi
from app.api.deps import require_identity
from app.api.deps import validated_body
from app.core.responses import respond
from app.core.security import IdentityClaims
from app.db.base import get_db_session
from app.schemas.user import UserUpdate
from app.services.users import deactivate_user_service
from app.services.users import get_user_service
from app.services.users import list_users_service
from app.services.users import update_user_service

router = APIRouter(prefix="/api/v1", tags=["users"], dependencies=[Depends(require_identity)])


@router.get("/users")
def list_users_endpoint(
    is_active: bool | None = None,
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    """List users."""
    result = list_users_service(session, is_active=is_active, limit=limit, offset=offset)
    return respond(result, message="Users retrieved")


@router.get("/users/{user_id}")
def get_user_endpoint(
    user_id: UUID,
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    """Get a single user by id."""
    return respond(get_user_service(session, user_id), message="User retrieved")


@router.patch("/users/{user_id}", openapi_extra=json_body_openapi(UserUpdate))
def update_user_endpoint(
    user_id: UUID,
    payload: UserUpdate = Depends(validated_body(UserUpdate)),
    identity: IdentityClaims = Depends(require_identity),
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    """Update the caller's own account."""
    return respond(update_user_service(session, identity, user_id, payload), message="User updated")


@router.delete("/users/{user_id}")
def delete_user_endpoint(
    user_id: UUID,
    identity: IdentityClaims = Depends(require_identity),
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    """Soft-disable the caller's own account."""
    return respond(deactivate_user_service(session, identity, user_id), message="User deactivated")
