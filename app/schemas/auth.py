"""Pydantic schemas for authentication payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel
from pydantic import Field

from app.core.validation import RequestSchema
from app.schemas.user import User


class LoginRequest(RequestSchema):
    email: Annotated[str, Field(min_length=1, max_length=255)]
    password: Annotated[str, Field(min_length=1, max_length=128)]


class RefreshRequest(RequestSchema):
    refresh_token: Annotated[str, Field(min_length=1)]


class AccessToken(BaseModel):
    """Newly issued access credential."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int
    expires_at: datetime


class TokenPair(AccessToken):
    """Access and refresh credentials returned at login."""

    refresh_token: str
    refresh_expires_in: int
    user: User


class Identity(BaseModel):
    """Identity claims of the current request together with the account."""

    sub: str
    expires_at: datetime
    issued_at: datetime | None = None
    user: User | None = None
