"""Authentication API routes."""

from __future__ import annotations

from fastapi import APIRouter
from fastapi import Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from app.api.deps import get_app_settings
from app.api.deps import json_body_openapi
from app.api.deps import require_identity
from app.api.deps import validated_body
from app.core.config import Settings
from app.core.responses import respond
from app.core.security import IdentityClaims
from app.db.base import get_db_session
from app.schemas.auth import LoginRequest
from app.schemas.auth import RefreshRequest
from app.schemas.user import UserCreate
from app.services.auth import identity_service
from app.services.auth import login_service
from app.services.auth import refresh_service
from app.services.users import register_user_service

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/register", status_code=201, openapi_extra=json_body_openapi(UserCreate))
def register_endpoint(
    payload: UserCreate = Depends(validated_body(UserCreate)),
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    """Register a new user."""
    return respond(register_user_service(session, payload), message="User registered", status=201)


@router.post("/login", openapi_extra=json_body_openapi(LoginRequest))
def login_endpoint(
    payload: LoginRequest = Depends(validated_body(LoginRequest)),
    session: Session = Depends(get_db_session),
    settings: Settings = Depends(get_app_settings),
) -> JSONResponse:
    """Exchange credentials for an access/refresh token pair."""
    return respond(login_service(session, settings, payload), message="Logged in")


@router.post("/refresh", openapi_extra=json_body_openapi(RefreshRequest))
def refresh_endpoint(
    payload: RefreshRequest = Depends(validated_body(RefreshRequest)),
    settings: Settings = Depends(get_app_settings),
) -> JSONResponse:
    """Exchange a refresh token for a new access token."""
    return respond(refresh_service(settings, payload.refresh_token), message="Token refreshed")


@router.get("/me")
def me_endpoint(
    identity: IdentityClaims = Depends(require_identity),
    session: Session = Depends(get_db_session),
) -> JSONResponse:
    """Describe the authenticated caller."""
    return respond(identity_service(session, identity), message="Current identity")
