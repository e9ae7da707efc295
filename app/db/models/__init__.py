"""Model module imports for SQLAlchemy metadata registration."""

from app.db.models.user import User

__all__ = [
    "User",
]
