"""SQLAlchemy ORM models."""

from app.models.activity_log import ActivityLog
from app.models.base import Base
from app.models.user import User

__all__ = ["ActivityLog", "Base", "User"]
