"""Repository primitives for user entities."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy import func
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db.models.user import User


def create_user(
    session: Session,
    *,
    name: str,
    email: str,
    password_hash: str,
    age: int | None = None,
) -> User:
    """Create and return a user row."""
    user = User(name=name, email=email, password_hash=password_hash, age=age)
    session.add(user)
    session.flush()
    session.refresh(user)
    return user


def get_user(session: Session, user_id: UUID) -> User | None:
    """Fetch a user by id."""
    return session.get(User, user_id)


def get_user_by_email(session: Session, email: str) -> User | None:
    """Fetch a user by case-insensitive email."""
    stmt = select(User).where(func.lower(User.email) == email.lower())
    return session.scalars(stmt).first()


def list_users(
    session: Session,
    *,
    is_active: bool | None = None,
    limit: int = 100,
    offset: int = 0,
) -> list[User]:
    """List users with optional active-state filtering."""
    stmt = select(User)
    if is_active is not None:
        stmt = stmt.where(User.is_active == is_active)
    stmt = stmt.order_by(User.created_at.desc(), User.email).limit(limit).offset(offset)
    return list(session.scalars(stmt))


UPDATABLE_FIELDS = frozenset({"name", "email", "age", "password_hash"})


def update_user(session: Session, user: User, **changes: Any) -> User:
    """Apply ``changes`` to mutable user fields; ``None`` is written as given."""
    unknown = set(changes) - UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot update user fields: {sorted(unknown)}")
    for field, value in changes.items():
        setattr(user, field, value)
    session.flush()
    session.refresh(user)
    return user


def deactivate_user(session: Session, user: User) -> User:
    """Soft-disable a user."""
    user.is_active = False
    session.flush()
    session.refresh(user)
    return user
