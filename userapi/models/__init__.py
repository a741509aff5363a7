"""SQLAlchemy ORM models — one file per table."""

from userapi.models.user import User

__all__ = ["User"]
