"""Pydantic schemas for user API payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated
from typing import Any
from uuid import UUID

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import field_validator

from app.core.validation import RequestSchema

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

Name = Annotated[str, Field(min_length=1, max_length=50)]
Email = Annotated[str, Field(max_length=255, pattern=EMAIL_PATTERN)]
Password = Annotated[str, Field(min_length=8, max_length=128)]
Age = Annotated[int, Field(ge=0, le=150)]


class UserCreate(RequestSchema):
    """Payload to register a user."""

    name: Name
    email: Email
    password: Password
    age: Age | None = None


class UserUpdate(RequestSchema):
    """Payload to update mutable user fields.

    Only keys present in the body are applied. ``age`` may be cleared with an
    explicit ``null``; the other fields cannot be nulled.
    """

    name: Name | None = None
    email: Email | None = None
    password: Password | None = None
    age: Age | None = None

    @field_validator("name", "email", "password")
    @classmethod
    def reject_null(cls, value: str | None) -> str | None:
        # Only runs for keys present in the body; defaults are not validated.
        if value is None:
            raise ValueError("Field may not be null")
        return value

    def changes(self) -> dict[str, Any]:
        """Return the fields present in the body."""
        return self.model_dump(exclude_unset=True)


class User(BaseModel):
    """User response payload."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str
    age: int | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class UserListResponse(BaseModel):
    """List response payload for users."""

    items: list[User]
